"""
Small JSON-over-HTTP helpers built on urllib.

Errors are not translated here: callers decide whether a URLError or a timeout
means "service unreachable" or "this item failed".
"""
from __future__ import annotations

import json
import urllib.parse
import urllib.request
from typing import Any, Mapping

USER_AGENT = "anki-deck-builder"


def _read_json(req: urllib.request.Request, timeout: float) -> Any:
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        raw = resp.read()
    return json.loads(raw.decode("utf-8"))


def get_json(url: str, params: Mapping[str, str] | None = None, *, timeout: float) -> Any:
    if params:
        url = f"{url}?{urllib.parse.urlencode(params)}"
    req = urllib.request.Request(url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}, method="GET")
    return _read_json(req, timeout)


def post_json(url: str, payload: Mapping[str, Any], *, timeout: float) -> Any:
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        method="POST",
    )
    return _read_json(req, timeout)
