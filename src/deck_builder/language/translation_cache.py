"""
On-disk translation memo, one JSON file per ordered language pair.

`(hr, es)` and `(es, hr)` are separate files. Entries never expire and are never
overwritten once written. The file is re-read on every lookup and rewritten on
every insert; with several processes sharing a cache directory the last writer
wins.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from deck_builder.errors import CacheIOFailure

logger = logging.getLogger(__name__)


class TranslationCache:
    """Translations for a single (source, target) pair."""

    def __init__(self, cache_root: Path, source: str, target: str) -> None:
        self.source = source
        self.target = target
        self.path = Path(cache_root) / "translations" / f"{source}_{target}.json"

    @property
    def pair(self) -> Tuple[str, str]:
        return self.source, self.target

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CacheIOFailure(self.path, str(e)) from e
        if not isinstance(data, dict):
            raise CacheIOFailure(self.path, "expected a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def entries(self) -> Dict[str, str]:
        return self._read()

    def get(self, text: str) -> Optional[str]:
        """Cached translation of text, or None on a miss.

        Raises:
            CacheIOFailure: the cache file exists but cannot be read
        """
        return self._read().get(text)

    def put(self, text: str, translation: str) -> bool:
        """Store a translation unless one is already present. Returns True if written.

        An unreadable existing file is replaced rather than blocking new entries.

        Raises:
            CacheIOFailure: the cache file cannot be written
        """
        try:
            entries = self._read()
        except CacheIOFailure as e:
            logger.warning(f"Replacing unreadable translation cache: {e}", extra={"file": str(self.path)})
            entries = {}

        if text in entries:
            return False
        entries[text] = translation

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise CacheIOFailure(self.path, str(e)) from e
        return True


class TranslationCacheStore:
    """Hands out one TranslationCache per ordered language pair under a cache root."""

    def __init__(self, cache_root: Path) -> None:
        self.cache_root = Path(cache_root)
        self._caches: Dict[Tuple[str, str], TranslationCache] = {}

    def for_pair(self, source: str, target: str) -> TranslationCache:
        key = (source, target)
        if key not in self._caches:
            self._caches[key] = TranslationCache(self.cache_root, source, target)
        return self._caches[key]
