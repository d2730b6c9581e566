"""
Translators backed by public HTTP translation APIs.
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from deck_builder.common.http import get_json, post_json
from deck_builder.config_models import DEFAULT_LIBRETRANSLATE_URL, DEFAULT_TIMEOUT_SECONDS, RetryConfig
from .translator import CachingTranslator, PacingPolicy

MYMEMORY_URL = "https://api.mymemory.translated.net/get"


class MyMemoryTranslator(CachingTranslator):
    """MyMemory free API, no key required. Uses `src|tgt` language pairs."""

    # MyMemory tolerates bursts; pause briefly every 10 requests
    default_pacing = PacingPolicy(delay_seconds=0.05, every=10)

    def __init__(
            self,
            cache_root: Path | None = None,
            *,
            url: str = MYMEMORY_URL,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            pacing: PacingPolicy | None = None,
            retry: RetryConfig | None = None,
            sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(cache_root=cache_root, pacing=pacing, retry=retry, sleep=sleep)
        self.url = url
        self.timeout = timeout

    def _translate_remote(self, text: str, source: str, target: str) -> str:
        body = get_json(self.url, {"q": text, "langpair": f"{source}|{target}"}, timeout=self.timeout)
        status = body.get("responseStatus")
        if status is not None and str(status) != "200":
            raise RuntimeError(f"MyMemory returned status {status}: {body.get('responseDetails', '')}")
        return body["responseData"]["translatedText"]


class LibreTranslateTranslator(CachingTranslator):
    """LibreTranslate `/translate` endpoint (self-hosted or libretranslate.com)."""

    default_pacing = PacingPolicy(delay_seconds=0.1, every=1)

    def __init__(
            self,
            cache_root: Path | None = None,
            *,
            base_url: str = DEFAULT_LIBRETRANSLATE_URL,
            api_key: str | None = None,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            pacing: PacingPolicy | None = None,
            retry: RetryConfig | None = None,
            sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(cache_root=cache_root, pacing=pacing, retry=retry, sleep=sleep)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _translate_remote(self, text: str, source: str, target: str) -> str:
        payload = {"q": text, "source": source, "target": target, "format": "text"}
        if self.api_key:
            payload["api_key"] = self.api_key
        body = post_json(f"{self.base_url}/translate", payload, timeout=self.timeout)
        if "error" in body:
            raise RuntimeError(f"LibreTranslate error: {body['error']}")
        return body["translatedText"]
