import http.client
import io
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from deck_builder.language.frequency_sources import (
    BundledSampleSource,
    EmptySource,
    FallbackSource,
    FrequencySourceRegistry,
    HermitDaveSource,
    default_registry,
)
from deck_builder.language.frequency_store import parse_frequency_lines
from deck_builder.language.models import PartOfSpeech
from tests.conftest import FailingSource, StaticSource


def _response(body: bytes) -> MagicMock:
    resp = MagicMock()
    resp.__enter__.return_value = io.BytesIO(body)
    return resp


class TestHermitDaveSource:
    def test_fetch_splits_lines(self):
        with patch("urllib.request.urlopen", return_value=_response("je 100\nda 90\n".encode("utf-8"))) as urlopen:
            lines = HermitDaveSource(timeout=5).fetch_raw("hr")

        assert lines == ["je 100", "da 90"]
        req = urlopen.call_args.args[0]
        assert req.full_url.endswith("/hr/hr_50k.txt")
        assert urlopen.call_args.kwargs["timeout"] == 5

    def test_network_errors_propagate(self):
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            with pytest.raises(urllib.error.URLError):
                HermitDaveSource().fetch_raw("hr")


class TestBundledSampleSource:
    @pytest.mark.parametrize("code", ["hr", "es"])
    def test_samples_cover_every_category(self, code):
        lines = BundledSampleSource().fetch_raw(code)
        dataset = parse_frequency_lines(lines, code)

        assert dataset.word_count() == len([line for line in lines if line.strip()])
        for pos in PartOfSpeech.ordered():
            assert dataset.top_words(pos, 1), f"no {pos.value} in {code} sample"

    def test_croatian_sample_starts_with_dan(self):
        dataset = parse_frequency_lines(BundledSampleSource().fetch_raw("hr"), "hr")
        assert dataset.all_top_words(1)[0].text == "dan"

    def test_missing_sample(self, tmp_path):
        with pytest.raises(OSError):
            BundledSampleSource(data_dir=tmp_path).fetch_raw("fi")


class TestFallbackSource:
    def test_first_success_wins(self):
        second = StaticSource(["dan 1"])
        third = StaticSource(["kuća 1"])
        source = FallbackSource([FailingSource(), second, third])

        assert source.fetch_raw("hr") == ["dan 1"]
        assert third.calls == 0

    def test_all_failing_raises_last_error(self):
        source = FallbackSource([FailingSource(OSError("a")), FailingSource(ValueError("b"))])
        with pytest.raises(ValueError, match="b"):
            source.fetch_raw("hr")

    def test_truncated_download_falls_through(self):
        truncated = FailingSource(http.client.IncompleteRead(b"dan 1\nku", 100))
        source = FallbackSource([truncated, StaticSource(["dan 1"])])
        assert source.fetch_raw("hr") == ["dan 1"]

    def test_requires_sources(self):
        with pytest.raises(ValueError):
            FallbackSource([])


class TestRegistry:
    def test_unknown_language_gets_empty_source(self):
        registry = FrequencySourceRegistry()
        assert isinstance(registry.get("fi"), EmptySource)
        assert registry.get("fi").fetch_raw("fi") == []

    def test_lookup_is_case_insensitive(self):
        registry = FrequencySourceRegistry()
        source = StaticSource([])
        registry.register("HR", source)
        assert registry.get("hr") is source
        assert registry.languages() == ["hr"]

    def test_default_registry(self):
        online = default_registry()
        assert online.languages() == ["es", "hr"]
        assert isinstance(online.get("hr"), FallbackSource)

        offline = default_registry(offline=True)
        assert isinstance(offline.get("hr"), BundledSampleSource)
        assert isinstance(offline.get("de"), EmptySource)
