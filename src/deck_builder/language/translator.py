"""
Translator contract and the cache-aside base class for remote translators.

Two ways to translate many texts exist on purpose:
- Translator.translate_batch: sequential, paced, fails fast on the first error
  and discards the results produced so far.
- calling Translator.translate in a loop and handling TranslationFailure per
  item, which is what the deck pipeline does.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from deck_builder.common.reliability import retry_call
from deck_builder.config_models import RetryConfig
from deck_builder.errors import CacheIOFailure, TranslationFailure
from .translation_cache import TranslationCacheStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PacingPolicy:
    """Delay inserted between sequential remote requests to respect rate limits.

    The pause happens before request i when i > 0 and i is a multiple of `every`.
    """
    delay_seconds: float = 0.0
    every: int = 1

    def __post_init__(self) -> None:
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        if self.every < 1:
            raise ValueError("every must be >= 1")

    @classmethod
    def disabled(cls) -> "PacingPolicy":
        return cls(0.0, 1)

    def should_pause(self, index: int) -> bool:
        return self.delay_seconds > 0 and index > 0 and index % self.every == 0


class Translator(ABC):
    """Translates text between two languages given as ISO 639-1 codes."""

    pacing: PacingPolicy = PacingPolicy.disabled()
    sleep: Callable[[float], None] = staticmethod(time.sleep)

    @abstractmethod
    def translate(self, text: str, source: str, target: str) -> str:
        """Translate a single text.

        Raises:
            TranslationFailure: the text could not be translated
        """

    def is_cached(self, text: str, source: str, target: str) -> bool:
        """Whether `translate` would answer without a remote request."""
        return False

    def translate_batch(self, texts: Sequence[str], source: str, target: str) -> List[str]:
        """Translate texts one after another, preserving order.

        Stops at the first failure and propagates it; results already produced
        are discarded. Pacing counts remote requests only, cache hits never pause.
        """
        results: List[str] = []
        requests = 0
        for text in texts:
            if not self.is_cached(text, source, target):
                if self.pacing.should_pause(requests):
                    self.sleep(self.pacing.delay_seconds)
                requests += 1
            results.append(self.translate(text, source, target))
        return results


class CachingTranslator(Translator):
    """Base for remote translators: cache lookup, remote call with retries, cache write.

    Subclasses implement `_translate_remote`. Any exception it raises (network,
    timeout, malformed response) ends up as a TranslationFailure.
    """

    default_pacing = PacingPolicy.disabled()

    def __init__(
            self,
            cache_root: Path | None = None,
            pacing: PacingPolicy | None = None,
            retry: RetryConfig | None = None,
            sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.caches = TranslationCacheStore(cache_root) if cache_root is not None else None
        self.pacing = pacing if pacing is not None else self.default_pacing
        self.retry = retry or RetryConfig(max_retries=0)
        self.sleep = sleep

    @abstractmethod
    def _translate_remote(self, text: str, source: str, target: str) -> str:
        ...

    def _cached(self, text: str, source: str, target: str) -> str | None:
        if self.caches is None:
            return None
        try:
            return self.caches.for_pair(source, target).get(text)
        except CacheIOFailure as e:
            logger.warning(f"Translation cache read failed: {e}", extra={"pair": f"{source}->{target}"})
            return None

    def is_cached(self, text: str, source: str, target: str) -> bool:
        return self._cached(text, source, target) is not None

    def _remember(self, text: str, translation: str, source: str, target: str) -> None:
        if self.caches is None:
            return
        try:
            self.caches.for_pair(source, target).put(text, translation)
        except CacheIOFailure as e:
            logger.warning(f"Failed to cache translation: {e}", extra={"word": text, "pair": f"{source}->{target}"})

    def translate(self, text: str, source: str, target: str) -> str:
        cached = self._cached(text, source, target)
        if cached is not None:
            logger.debug(f"Cache hit for: {text}", extra={"pair": f"{source}->{target}"})
            return cached

        logger.debug(f"Translating '{text}' from {source} to {target}")
        try:
            translation = retry_call(
                lambda: self._translate_remote(text, source, target),
                max_retries=self.retry.max_retries,
                backoff_initial_seconds=self.retry.backoff_initial_seconds,
                backoff_multiplier=self.retry.backoff_multiplier,
                sleep=self.sleep,
            )
        except TranslationFailure:
            raise
        except Exception as e:
            raise TranslationFailure(text, source, target, str(e)) from e

        if not isinstance(translation, str):
            raise TranslationFailure(text, source, target, "non-text translation returned")
        translation = translation.strip()
        if not translation:
            raise TranslationFailure(text, source, target, "empty translation returned")

        self._remember(text, translation, source, target)
        return translation
