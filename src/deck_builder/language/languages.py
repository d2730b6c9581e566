"""
Supported languages, addressed by ISO 639-1 code or English name.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Language:
    code: str
    name: str

    def label(self) -> str:
        return f"{self.name} ({self.code})"


SUPPORTED_LANGUAGES: Dict[str, str] = {
    # Languages with frequency data
    "hr": "Croatian",
    "es": "Spanish",
    # Translation-only for now
    "en": "English",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "pl": "Polish",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "tr": "Turkish",
}

PRIORITY_CODES = ["hr", "es", "en", "fr", "de", "it", "pt"]


def get_language(value: str) -> Optional[Language]:
    """Look a language up by code or by name, case-insensitive."""
    lowered = value.strip().lower()
    if lowered in SUPPORTED_LANGUAGES:
        return Language(lowered, SUPPORTED_LANGUAGES[lowered])
    for code, name in SUPPORTED_LANGUAGES.items():
        if name.lower() == lowered:
            return Language(code, name)
    return None


def is_supported(value: str) -> bool:
    return get_language(value) is not None


def get_supported_languages() -> List[Language]:
    """All supported languages sorted by name."""
    return sorted(
        (Language(code, name) for code, name in SUPPORTED_LANGUAGES.items()),
        key=lambda lang: lang.name,
    )


def get_prioritized_languages() -> List[Language]:
    """Languages with frequency data first, then common ones, then the rest alphabetically."""
    prioritized = [Language(code, SUPPORTED_LANGUAGES[code]) for code in PRIORITY_CODES]
    others = [lang for lang in get_supported_languages() if lang.code not in PRIORITY_CODES]
    return prioritized + others


def language_name(code: str) -> str:
    """English name for a code, or the code itself when unknown."""
    return SUPPORTED_LANGUAGES.get(code.lower(), code)
