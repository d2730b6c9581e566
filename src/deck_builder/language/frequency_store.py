"""
Cache-aside store for ranked frequency data.

Each language has one JSON snapshot under `<cache_root>/frequency/`. The file's
mtime is the staleness clock: a snapshot at most `freshness` old is returned as
is; an older one is ignored and the data is fetched again. A stale snapshot is
never used as a fallback when fetching fails.

Usage:
    store = FrequencyStore(cache_root=Path("~/.cache/anki-deck-builder").expanduser())
    dataset = store.load("hr")
    words = all_top_words(dataset, 10)
"""
from __future__ import annotations

import json
import logging
import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from pydantic import ValidationError

from deck_builder.errors import CacheIOFailure, DataUnavailable
from .frequency_sources import FETCH_ERRORS, FrequencySourceRegistry, default_registry
from .models import FrequencyDataset, PartOfSpeech, Word
from .pos_classifier import Classifier, get_classifier

logger = logging.getLogger(__name__)

FREQUENCY_FRESHNESS = timedelta(days=30)
MIN_WORD_LENGTH = 2


def parse_frequency_lines(
        lines: Iterable[str],
        language_code: str,
        classifier: Classifier | None = None,
) -> FrequencyDataset:
    """Build a dataset from `word count [pos]` lines.

    Rank is the 1-based line position in the source. Malformed lines (fewer than
    two fields, non-integer count), words shorter than two characters and repeated
    words are skipped. An optional third field naming a part of speech overrides
    the classifier.
    """
    classifier = classifier or get_classifier(language_code)
    dataset = FrequencyDataset(language_code=language_code)
    seen: Set[str] = set()
    skipped = 0

    for rank, line in enumerate(lines, start=1):
        parts = line.split()
        if len(parts) < 2:
            skipped += 1
            continue

        text = parts[0]
        if len(text) < MIN_WORD_LENGTH or text in seen:
            skipped += 1
            continue

        try:
            count = int(parts[1])
        except ValueError:
            skipped += 1
            continue
        if count < 0:
            skipped += 1
            continue

        tagged = PartOfSpeech.parse(parts[2]) if len(parts) > 2 else None
        pos = tagged or classifier.classify(text)

        dataset.add_word(Word(text=text, part_of_speech=pos, frequency_rank=rank, raw_frequency_count=count))
        seen.add(text)

    logger.info(
        f"Parsed {dataset.word_count()} words for '{language_code}'",
        extra={"skipped_lines": skipped},
    )
    return dataset


def top_words(dataset: FrequencyDataset, category: PartOfSpeech, n: int) -> List[Word]:
    return dataset.top_words(category, n)


def all_top_words(dataset: FrequencyDataset, n: int) -> List[Word]:
    return dataset.all_top_words(n)


class FrequencyStore:
    """Loads frequency datasets, serving fresh snapshots before fetching."""

    def __init__(
            self,
            cache_root: Path,
            sources: FrequencySourceRegistry | None = None,
            freshness: timedelta = FREQUENCY_FRESHNESS,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache_root = Path(cache_root)
        self.sources = sources or default_registry()
        self.freshness = freshness
        self.clock = clock

    def cache_path(self, language_code: str) -> Path:
        return self.cache_root / "frequency" / f"{language_code}_frequency.json"

    def is_fresh(self, path: Path) -> bool:
        age = self.clock() - path.stat().st_mtime
        return age <= self.freshness.total_seconds()

    def load(self, language_code: str) -> FrequencyDataset:
        """Return the dataset for a language.

        Raises:
            DataUnavailable: no fresh snapshot and the source failed
        """
        try:
            cached = self._load_snapshot(language_code)
        except CacheIOFailure as e:
            logger.warning(f"Ignoring unreadable frequency snapshot: {e}", extra={"language": language_code})
            cached = None
        if cached is not None:
            logger.info(f"Loaded frequency data from cache for '{language_code}'")
            return cached

        source = self.sources.get(language_code)
        try:
            lines = source.fetch_raw(language_code)
        except FETCH_ERRORS as e:
            raise DataUnavailable(language_code, str(e)) from e

        dataset = parse_frequency_lines(lines, language_code)

        try:
            self._save_snapshot(dataset)
        except CacheIOFailure as e:
            logger.warning(f"Could not write frequency snapshot: {e}", extra={"language": language_code})
        return dataset

    def _load_snapshot(self, language_code: str) -> Optional[FrequencyDataset]:
        path = self.cache_path(language_code)
        try:
            if not path.exists():
                return None
            if not self.is_fresh(path):
                logger.info(f"Frequency snapshot for '{language_code}' is stale, will refetch",
                            extra={"file": str(path)})
                return None
            raw = path.read_text(encoding="utf-8")
            return FrequencyDataset.model_validate_json(raw)
        except (OSError, ValueError, ValidationError) as e:
            raise CacheIOFailure(path, str(e)) from e

    def _save_snapshot(self, dataset: FrequencyDataset) -> Path:
        path = self.cache_path(dataset.language_code)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(dataset.model_dump(mode="json"), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            raise CacheIOFailure(path, str(e)) from e
        logger.info(f"Saved frequency data to cache: {path}")
        return path
