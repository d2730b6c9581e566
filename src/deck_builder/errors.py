"""
Error taxonomy for the deck builder.

Only SinkUnreachable is fatal for a pipeline run. Everything else is either
recoverable per item (TranslationFailure, SinkItemRejected), advisory
(CacheIOFailure) or raised before any work starts (DataUnavailable,
UnsupportedLanguage, ConfigurationError).
"""
from __future__ import annotations

from pathlib import Path


class DeckBuilderError(Exception):
    """Base class for all deck builder errors."""


class ConfigurationError(DeckBuilderError):
    """Invalid or incomplete configuration."""


class UnsupportedLanguage(DeckBuilderError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Unsupported language: {value}")
        self.value = value


class DataUnavailable(DeckBuilderError):
    """Frequency data could not be fetched and no fresh snapshot exists."""

    def __init__(self, language_code: str, reason: str = "") -> None:
        message = f"Frequency data not available for language: {language_code}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.language_code = language_code


class TranslationFailure(DeckBuilderError):
    """A single text could not be translated."""

    def __init__(self, text: str, source: str, target: str, reason: str = "") -> None:
        message = f"Failed to translate '{text}' ({source}->{target})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.text = text
        self.source = source
        self.target = target


class CacheIOFailure(DeckBuilderError):
    """Reading or writing a cache file failed. Caches are advisory."""

    def __init__(self, path: Path, reason: str = "") -> None:
        message = f"Cache I/O failed for {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class SinkError(DeckBuilderError):
    """Base class for card sink errors."""


class SinkUnreachable(SinkError):
    """The card sink cannot be reached at all. Fatal for a pipeline run."""

    def __init__(self, url: str, reason: str = "") -> None:
        message = f"AnkiConnect is not running or unreachable at {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url
        # Partial PipelineResult, set by the pipeline when a run is halted.
        self.result = None


class SinkItemRejected(SinkError):
    """The sink answered but refused a single request (duplicate note, existing deck...)."""

    def __init__(self, action: str, message: str) -> None:
        super().__init__(f"AnkiConnect error on action '{action}': {message}")
        self.action = action
        self.message = message
