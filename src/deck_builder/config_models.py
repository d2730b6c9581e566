from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from deck_builder.errors import ConfigurationError

DEFAULT_ANKI_CONNECT_URL = "http://127.0.0.1:8765"
DEFAULT_LIBRETRANSLATE_URL = "https://libretranslate.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


class RetryConfig(BaseModel):
    max_retries: int = Field(default=1, ge=0, le=5, description="Retries after the first attempt")
    backoff_initial_seconds: float = Field(default=0.5, gt=0, description="Initial backoff delay in seconds")
    backoff_multiplier: float = Field(default=2.0, gt=1.0, description="Exponential backoff multiplier")


class PacingConfig(BaseModel):
    """Pause between sequential translation requests (rate limiting)."""
    delay_seconds: float = Field(default=0.1, ge=0, description="Pause length in seconds, 0 disables pacing")
    every: int = Field(default=1, ge=1, description="Pause before every Nth request")


class TranslatorConfig(BaseModel):
    """Translation service selection.

    - provider: mymemory (no key needed), libretranslate, or gemini (needs GOOGLE_API_KEY)
    - pacing: None keeps the provider's default pacing
    """
    provider: Literal["mymemory", "libretranslate", "gemini"] = Field(default="mymemory")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Per-request timeout")
    libretranslate_url: str | None = Field(default=None, description="Overrides LIBRETRANSLATE_URL")
    api_key: str | None = Field(default=None, description="LibreTranslate API key, overrides LIBRETRANSLATE_API_KEY")
    model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Gemini sampling temperature")
    pacing: PacingConfig | None = None
    retry: RetryConfig = Field(default_factory=RetryConfig)


class DeckPipelineConfig(BaseModel):
    """Configuration for the frequency deck pipeline.

    - target_language: language to learn (code or English name)
    - base_language: language translations are written in
    - words_per_category: top N words taken from each of the eight parts of speech
    - deck_name: defaults to "<Target> → <Base> (Top <N*8> Words)"
    """
    target_language: str = Field(..., description="Language to learn, e.g. 'hr' or 'Croatian'")
    base_language: str = Field(..., description="Language of the translations, e.g. 'es' or 'Spanish'")
    words_per_category: int = Field(default=100, ge=1, description="Words per part of speech")
    deck_name: str | None = Field(default=None, description="Anki deck name")
    bidirectional: bool = Field(default=True, description="Also add base→target cards")
    model_name: str = Field(default="Basic", description="Anki note type with Front/Back fields")
    offline: bool = Field(default=False, description="Use bundled frequency samples only")
    translator: TranslatorConfig = Field(default_factory=TranslatorConfig)


class RunConfig(BaseModel):
    """Top-level YAML document.

    Pipeline values are kept as raw dicts and parsed into their own config type
    by the caller after lookup.
    """
    pipelines: Dict[str, Any] | None = Field(
        default=None, description="Pipelines configuration keyed by pipeline id"
    )


class AppSettings(BaseModel):
    """Process-wide settings resolved from the environment."""
    anki_connect_url: str = DEFAULT_ANKI_CONNECT_URL
    cache_dir: Path
    libretranslate_url: str = DEFAULT_LIBRETRANSLATE_URL
    libretranslate_api_key: str | None = None
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @property
    def frequency_cache_dir(self) -> Path:
        return self.cache_dir / "frequency"

    @property
    def translation_cache_dir(self) -> Path:
        return self.cache_dir / "translations"

    @classmethod
    def from_env(cls) -> "AppSettings":
        timeout_raw = os.getenv("DECK_BUILDER_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            raise ConfigurationError(f"DECK_BUILDER_TIMEOUT must be a number, got {timeout_raw!r}")
        return cls(
            anki_connect_url=os.getenv("ANKI_CONNECT_URL", DEFAULT_ANKI_CONNECT_URL),
            cache_dir=default_cache_dir(),
            libretranslate_url=os.getenv("LIBRETRANSLATE_URL", DEFAULT_LIBRETRANSLATE_URL),
            libretranslate_api_key=os.getenv("LIBRETRANSLATE_API_KEY") or None,
            timeout_seconds=timeout,
        )


def default_cache_dir() -> Path:
    """DECK_BUILDER_CACHE_DIR, else $XDG_CACHE_HOME/anki-deck-builder, else ~/.cache/anki-deck-builder."""
    explicit = os.getenv("DECK_BUILDER_CACHE_DIR")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.getenv("XDG_CACHE_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / "anki-deck-builder"


def load_run_config(path: Path) -> RunConfig:
    """Read and validate a YAML run configuration.

    Raises:
        FileNotFoundError: path does not exist
        ConfigurationError: the YAML does not match the schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return RunConfig.model_validate(raw)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e


def deck_pipeline_config(cfg: RunConfig, overrides: Dict[str, Any] | None = None) -> DeckPipelineConfig | None:
    """Typed `pipelines.deck` section with overrides applied on top, or None when both are absent.

    A `translator` override is merged key by key into the configured translator section.
    """
    raw = (cfg.pipelines or {}).get("deck")
    if raw is None and not overrides:
        return None

    merged: Dict[str, Any] = dict(raw or {})
    for key, value in (overrides or {}).items():
        if key == "translator" and isinstance(value, dict):
            merged["translator"] = {**(merged.get("translator") or {}), **value}
        else:
            merged[key] = value

    try:
        return DeckPipelineConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pipelines.deck configuration:\n{e}") from e
