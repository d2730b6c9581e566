import logging
from typing import Dict, List, Optional, Set

import pytest

from deck_builder.anki_sync.anki_connect import Note
from deck_builder.errors import SinkItemRejected, SinkUnreachable, TranslationFailure
from deck_builder.language.frequency_sources import FrequencySourceRegistry
from deck_builder.language.translator import CachingTranslator, Translator


class StaticSource:
    """Frequency source returning fixed lines and counting fetches."""

    def __init__(self, lines: List[str]):
        self.lines = list(lines)
        self.calls = 0

    def fetch_raw(self, language_code: str) -> List[str]:
        self.calls += 1
        return list(self.lines)


class FailingSource:
    def __init__(self, error: Exception = OSError("network down")):
        self.error = error
        self.calls = 0

    def fetch_raw(self, language_code: str) -> List[str]:
        self.calls += 1
        raise self.error


class DictTranslator(Translator):
    """In-memory translator; words listed in `failing` raise TranslationFailure."""

    def __init__(self, mapping: Dict[str, str], failing: Optional[Set[str]] = None):
        self.mapping = mapping
        self.failing = failing or set()
        self.calls: List[str] = []
        self.sleeps: List[float] = []
        self.sleep = self.sleeps.append

    def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append(text)
        if text in self.failing or text not in self.mapping:
            raise TranslationFailure(text, source, target, "no translation")
        return self.mapping[text]


class FakeRemoteTranslator(CachingTranslator):
    """Remote call backed by a dict; can fail a number of times first."""

    def __init__(self, mapping: Dict[str, Optional[str]], *, failures_before_success: int = 0, **kwargs):
        self.sleeps: List[float] = []
        kwargs.setdefault("sleep", self.sleeps.append)
        super().__init__(**kwargs)
        self.mapping = mapping
        self.failures_before_success = failures_before_success
        self.remote_calls: List[str] = []

    def _translate_remote(self, text, source, target):
        self.remote_calls.append(text)
        if self.failures_before_success > 0:
            self.failures_before_success -= 1
            raise ConnectionError("temporary failure")
        if text not in self.mapping:
            raise KeyError(text)
        return self.mapping[text]


class RecordingSink:
    """Card sink that records notes; behaviour is configurable per test."""

    def __init__(
            self,
            reject_fronts: Optional[Set[str]] = None,
            deck_exists: bool = False,
            unreachable_after: Optional[int] = None,
            unreachable_on_create: bool = False,
    ):
        self.reject_fronts = reject_fronts or set()
        self.deck_exists = deck_exists
        self.unreachable_after = unreachable_after
        self.unreachable_on_create = unreachable_on_create
        self.decks: List[str] = []
        self.notes: List[Note] = []
        self.add_calls = 0

    def create_deck(self, name: str) -> int:
        if self.unreachable_on_create:
            raise SinkUnreachable("http://anki.test", "connection refused")
        if self.deck_exists:
            raise SinkItemRejected("createDeck", "deck already exists")
        self.decks.append(name)
        return 1000

    def add_note(self, note: Note) -> int:
        self.add_calls += 1
        if self.unreachable_after is not None and self.add_calls > self.unreachable_after:
            raise SinkUnreachable("http://anki.test", "connection refused")
        if note.front in self.reject_fronts:
            raise SinkItemRejected("addNote", "cannot create note because it is a duplicate")
        self.notes.append(note)
        return 2000 + len(self.notes)


@pytest.fixture
def registry_for():
    """Build a registry serving the given source for one language."""
    def _build(language_code: str, source) -> FrequencySourceRegistry:
        registry = FrequencySourceRegistry()
        registry.register(language_code, source)
        return registry

    return _build


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """setup_logging detaches the package logger from the root; undo that so caplog works."""
    yield
    logger = logging.getLogger("deck_builder")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
