"""
Word acquisition and translation.

This package provides:
- ranked frequency data per language with a 30-day on-disk cache
- a heuristic part-of-speech classifier used when ingesting raw lists
- translators (MyMemory, LibreTranslate, Gemini) with a per-language-pair cache
"""

from .frequency_sources import FrequencySourceRegistry, default_registry
from .frequency_store import FrequencyStore, all_top_words, parse_frequency_lines, top_words
from .languages import Language, get_language, get_prioritized_languages, get_supported_languages, is_supported
from .models import FrequencyDataset, PartOfSpeech, Word
from .pos_classifier import classify, get_classifier
from .translation_cache import TranslationCache
from .translator import CachingTranslator, PacingPolicy, Translator

__all__ = [
    "CachingTranslator",
    "FrequencyDataset",
    "FrequencySourceRegistry",
    "FrequencyStore",
    "Language",
    "PacingPolicy",
    "PartOfSpeech",
    "TranslationCache",
    "Translator",
    "Word",
    "all_top_words",
    "classify",
    "default_registry",
    "get_classifier",
    "get_language",
    "get_prioritized_languages",
    "get_supported_languages",
    "is_supported",
    "parse_frequency_lines",
    "top_words",
]
