"""
Frequency deck pipeline.

Takes the most frequent words of a target language, translates them into a base
language and adds a forward and a reverse card per word to an Anki deck.
"""

from .models import Card, CardDirection, PipelineResult, TranslatedWord, WordFailure
from .pipeline import build_cards, run_deck_pipeline, translate_words
