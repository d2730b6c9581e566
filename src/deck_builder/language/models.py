"""
Data models for ranked frequency words.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PartOfSpeech(str, Enum):
    """Grammatical categories a word can be filed under.

    Declaration order is the deck priming order.
    """
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PREPOSITION = "preposition"
    PRONOUN = "pronoun"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"

    @classmethod
    def ordered(cls) -> List["PartOfSpeech"]:
        return list(cls)

    @classmethod
    def parse(cls, value: str) -> "PartOfSpeech | None":
        """Return the category named by value (case-insensitive), or None."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Word(BaseModel):
    """A single ranked word. Lower rank means more frequent."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Surface form as it appears in the frequency list")
    part_of_speech: PartOfSpeech = Field(..., description="Approximate grammatical category")
    frequency_rank: int = Field(..., ge=1, description="1-based position in the source list")
    raw_frequency_count: int = Field(default=0, ge=0, description="Occurrence count from the source, 0 if unknown")


def _empty_categories() -> Dict[PartOfSpeech, List[Word]]:
    return {pos: [] for pos in PartOfSpeech.ordered()}


class FrequencyDataset(BaseModel):
    """Ranked words of one language, grouped by part of speech."""

    language_code: str = Field(..., min_length=1)
    words_by_category: Dict[PartOfSpeech, List[Word]] = Field(default_factory=_empty_categories)

    @model_validator(mode="after")
    def _check_categories(self) -> "FrequencyDataset":
        # Normalise to all eight categories in fixed order so serialisation is stable
        normalised = _empty_categories()
        seen: Dict[str, PartOfSpeech] = {}
        for pos, words in self.words_by_category.items():
            previous_rank = 0
            for word in words:
                if word.part_of_speech != pos:
                    raise ValueError(
                        f"Word '{word.text}' is tagged {word.part_of_speech.value} but filed under {pos.value}"
                    )
                if word.frequency_rank <= previous_rank:
                    raise ValueError(
                        f"Ranks in category {pos.value} must be strictly increasing "
                        f"('{word.text}' has rank {word.frequency_rank} after {previous_rank})"
                    )
                other = seen.get(word.text)
                if other is not None and other != pos:
                    raise ValueError(f"Word '{word.text}' appears in both {other.value} and {pos.value}")
                seen[word.text] = pos
                previous_rank = word.frequency_rank
            normalised[pos] = list(words)
        self.words_by_category = normalised
        return self

    def add_word(self, word: Word) -> None:
        """Append a word to its category. Ranks must keep increasing."""
        bucket = self.words_by_category[word.part_of_speech]
        if bucket and word.frequency_rank <= bucket[-1].frequency_rank:
            raise ValueError(
                f"Cannot append '{word.text}' with rank {word.frequency_rank} "
                f"after rank {bucket[-1].frequency_rank} in {word.part_of_speech.value}"
            )
        bucket.append(word)

    def top_words(self, category: PartOfSpeech, count: int) -> List[Word]:
        """Return the count most frequent words of a category (fewer if it is smaller)."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return list(self.words_by_category.get(category, [])[:count])

    def all_top_words(self, count_per_category: int) -> List[Word]:
        """Concatenate top_words over every category in priming order."""
        all_words: List[Word] = []
        for pos in PartOfSpeech.ordered():
            all_words.extend(self.top_words(pos, count_per_category))
        return all_words

    def category_sizes(self) -> Dict[PartOfSpeech, int]:
        return {pos: len(words) for pos, words in self.words_by_category.items()}

    def word_count(self) -> int:
        return sum(len(words) for words in self.words_by_category.values())
