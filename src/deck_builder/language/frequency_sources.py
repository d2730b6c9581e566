"""
Raw frequency list sources.

A source returns the lines of a `word count [pos]` document for a language.
Sources are looked up in a FrequencySourceRegistry keyed by language code;
languages without an entry get the registry default, an EmptySource that
succeeds with no lines.
"""
from __future__ import annotations

import http.client
import logging
import urllib.request
from pathlib import Path
from typing import Dict, List, Protocol, Sequence

logger = logging.getLogger(__name__)

HERMITDAVE_URL = "https://raw.githubusercontent.com/hermitdave/FrequencyWords/master/content/2018/{code}/{code}_50k.txt"
DATA_DIR = Path(__file__).parent / "data"
DEFAULT_FETCH_TIMEOUT = 60.0

# urllib and socket errors are OSError subclasses, truncated bodies are HTTPException,
# decoding errors are ValueError
FETCH_ERRORS = (OSError, http.client.HTTPException, ValueError)


class FrequencySource(Protocol):
    def fetch_raw(self, language_code: str) -> List[str]:
        ...


class EmptySource:
    """Default source for languages without frequency data."""

    def fetch_raw(self, language_code: str) -> List[str]:
        logger.warning(f"No frequency source for '{language_code}', using an empty dataset",
                       extra={"language": language_code})
        return []


class HermitDaveSource:
    """50k most frequent words from the hermitdave/FrequencyWords OpenSubtitles lists."""

    def __init__(self, url_template: str = HERMITDAVE_URL, timeout: float = DEFAULT_FETCH_TIMEOUT) -> None:
        self.url_template = url_template
        self.timeout = timeout

    def fetch_raw(self, language_code: str) -> List[str]:
        url = self.url_template.format(code=language_code)
        logger.info(f"Fetching frequency list for '{language_code}'", extra={"url": url})
        req = urllib.request.Request(url, headers={"User-Agent": "anki-deck-builder"})
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            text = resp.read().decode("utf-8")
        return text.splitlines()


class BundledSampleSource:
    """Small hand-tagged lists shipped with the package, used offline or when downloads fail."""

    def __init__(self, data_dir: Path = DATA_DIR) -> None:
        self.data_dir = data_dir

    def path_for(self, language_code: str) -> Path:
        return self.data_dir / f"{language_code}_sample.txt"

    def fetch_raw(self, language_code: str) -> List[str]:
        path = self.path_for(language_code)
        logger.info(f"Loading bundled frequency sample for '{language_code}'", extra={"file": str(path)})
        return path.read_text(encoding="utf-8").splitlines()


class FallbackSource:
    """Try several sources in order and return the first that succeeds."""

    def __init__(self, sources: Sequence[FrequencySource]) -> None:
        if not sources:
            raise ValueError("FallbackSource needs at least one source")
        self.sources = list(sources)

    def fetch_raw(self, language_code: str) -> List[str]:
        last_error: BaseException | None = None
        for source in self.sources:
            try:
                return source.fetch_raw(language_code)
            except FETCH_ERRORS as e:
                logger.warning(
                    f"{type(source).__name__} failed for '{language_code}': {e}",
                    extra={"language": language_code},
                )
                last_error = e
        assert last_error is not None
        raise last_error


class FrequencySourceRegistry:
    """Maps language codes to sources, with an explicit default entry."""

    def __init__(self, default: FrequencySource | None = None) -> None:
        self._sources: Dict[str, FrequencySource] = {}
        self.default: FrequencySource = default or EmptySource()

    def register(self, language_code: str, source: FrequencySource) -> None:
        self._sources[language_code.lower()] = source

    def get(self, language_code: str) -> FrequencySource:
        return self._sources.get(language_code.lower(), self.default)

    def languages(self) -> List[str]:
        return sorted(self._sources)


def default_registry(offline: bool = False, timeout: float = DEFAULT_FETCH_TIMEOUT) -> FrequencySourceRegistry:
    """Registry used by the CLI: online list with bundled fallback for hr and es.

    With offline=True only the bundled samples are used.
    """
    registry = FrequencySourceRegistry()
    bundled = BundledSampleSource()
    for code in ("hr", "es"):
        if offline:
            registry.register(code, bundled)
        else:
            registry.register(code, FallbackSource([HermitDaveSource(timeout=timeout), bundled]))
    return registry
