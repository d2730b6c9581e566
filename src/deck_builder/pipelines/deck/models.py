"""
Data models for the frequency deck pipeline.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from deck_builder.anki_sync.anki_connect import Note
from deck_builder.language.models import Word


class CardDirection(str, Enum):
    FORWARD = "forward"  # target word on the front
    REVERSE = "reverse"  # translation on the front


class TranslatedWord(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: Word
    translation: str


class WordFailure(BaseModel):
    """A selected word that could not be translated."""
    model_config = ConfigDict(frozen=True)

    word: Word
    reason: str


class Card(BaseModel):
    """One flashcard generated from a translated word."""
    model_config = ConfigDict(frozen=True)

    front: str
    back: str
    direction: CardDirection
    word: Word
    tags: List[str] = Field(default_factory=list)

    def to_note(self, deck_name: str, model_name: str = "Basic") -> Note:
        return Note(deck_name=deck_name, front=self.front, back=self.back, model_name=model_name,
                    tags=list(self.tags))


class CardFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    card: Card
    reason: str


class PipelineResult(BaseModel):
    """Outcome of one pipeline run, in word selection order."""

    target_language: str
    base_language: str
    deck_name: str
    deck_id: Optional[int] = None
    dry_run: bool = False
    selected_words: List[Word] = Field(default_factory=list)
    translations: List[TranslatedWord] = Field(default_factory=list)
    translation_failures: List[WordFailure] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    card_failures: List[CardFailure] = Field(default_factory=list)
    cards_attempted: int = 0
    cards_succeeded: int = 0
    cards_failed: int = 0

    def summary(self) -> str:
        return (
            f"{self.cards_attempted} attempted, {self.cards_succeeded} added, {self.cards_failed} failed "
            f"({len(self.translation_failures)} of {len(self.selected_words)} words untranslated)"
        )
