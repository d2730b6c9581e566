from __future__ import annotations

import os
from pathlib import Path

from deck_builder.config_models import DEFAULT_LIBRETRANSLATE_URL, TranslatorConfig
from deck_builder.errors import ConfigurationError
from .http_translators import LibreTranslateTranslator, MyMemoryTranslator
from .translator import CachingTranslator, PacingPolicy


def build_translator(
        config: TranslatorConfig,
        cache_root: Path | None,
        *,
        libretranslate_url: str = DEFAULT_LIBRETRANSLATE_URL,
        libretranslate_api_key: str | None = None,
) -> CachingTranslator:
    """Create the translator selected by config.provider.

    Explicit values in config win over the environment-derived arguments.
    """
    pacing = None
    if config.pacing is not None:
        pacing = PacingPolicy(delay_seconds=config.pacing.delay_seconds, every=config.pacing.every)

    if config.provider == "mymemory":
        return MyMemoryTranslator(cache_root, timeout=config.timeout_seconds, pacing=pacing, retry=config.retry)

    if config.provider == "libretranslate":
        return LibreTranslateTranslator(
            cache_root,
            base_url=config.libretranslate_url or libretranslate_url,
            api_key=config.api_key or libretranslate_api_key,
            timeout=config.timeout_seconds,
            pacing=pacing,
            retry=config.retry,
        )

    if config.provider == "gemini":
        if not os.getenv("GOOGLE_API_KEY"):
            raise ConfigurationError(
                "GOOGLE_API_KEY environment variable is not set.\n"
                "Please export it before using the gemini translator, e.g.:\n"
                "  export GOOGLE_API_KEY=your_key_here"
            )
        # Imported here so LangChain only loads when the LLM translator is used
        from .gemini_translator import GeminiTranslator

        return GeminiTranslator(
            cache_root,
            model=config.model,
            temperature=config.temperature,
            timeout=config.timeout_seconds,
            pacing=pacing,
            retry=config.retry,
        )

    raise ConfigurationError(f"Unknown translator provider: {config.provider}")
