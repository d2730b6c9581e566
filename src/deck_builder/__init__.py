"""deck_builder package.

Builds language-learning Anki decks from word frequency lists:
- language: frequency data, part-of-speech heuristics, translators and their caches
- pipelines.deck: selects top words, translates them and inserts bidirectional cards
- anki_sync: AnkiConnect client used as the card sink

Run with `python -m deck_builder --help`.
"""

__version__ = "0.1.0"
