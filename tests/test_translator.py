import logging

import pytest

from deck_builder.common.reliability import retry_call
from deck_builder.config_models import RetryConfig
from deck_builder.errors import TranslationFailure
from deck_builder.language.translation_cache import TranslationCache
from deck_builder.language.translator import PacingPolicy
from tests.conftest import FakeRemoteTranslator


class TestPacingPolicy:
    def test_never_pauses_before_first_request(self):
        assert not PacingPolicy(1.0, 1).should_pause(0)

    def test_every_nth(self):
        policy = PacingPolicy(0.05, 10)
        assert [i for i in range(25) if policy.should_pause(i)] == [10, 20]

    def test_zero_delay_disables(self):
        assert not PacingPolicy(0.0, 1).should_pause(3)
        assert not PacingPolicy.disabled().should_pause(3)

    @pytest.mark.parametrize("delay,every", [(-1.0, 1), (0.1, 0)])
    def test_invalid_values(self, delay, every):
        with pytest.raises(ValueError):
            PacingPolicy(delay, every)


class TestCachingTranslator:
    def test_cache_hit_skips_remote_call(self, tmp_path):
        TranslationCache(tmp_path, "hr", "es").put("dan", "día")
        translator = FakeRemoteTranslator({}, cache_root=tmp_path)

        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.remote_calls == []

    def test_miss_calls_remote_and_caches(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": " día "}, cache_root=tmp_path)

        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.remote_calls == ["dan"]
        assert TranslationCache(tmp_path, "hr", "es").get("dan") == "día"

    def test_cache_is_per_direction(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": "día", "día": "dan"}, cache_root=tmp_path)
        translator.translate("dan", "hr", "es")
        translator.translate("día", "es", "hr")
        assert translator.remote_calls == ["dan", "día"]

    def test_remote_error_becomes_translation_failure(self, tmp_path):
        translator = FakeRemoteTranslator({}, cache_root=tmp_path)

        with pytest.raises(TranslationFailure) as exc_info:
            translator.translate("xyz", "hr", "es")
        assert exc_info.value.text == "xyz"
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert TranslationCache(tmp_path, "hr", "es").get("xyz") is None

    def test_empty_translation_is_a_failure(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": "   "}, cache_root=tmp_path)
        with pytest.raises(TranslationFailure, match="empty"):
            translator.translate("dan", "hr", "es")

    def test_missing_translation_is_a_failure(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": None}, cache_root=tmp_path)

        with pytest.raises(TranslationFailure, match="non-text") as exc_info:
            translator.translate("dan", "hr", "es")
        assert exc_info.value.text == "dan"
        assert TranslationCache(tmp_path, "hr", "es").get("dan") is None

    def test_is_cached(self, tmp_path):
        TranslationCache(tmp_path, "hr", "es").put("dan", "día")
        translator = FakeRemoteTranslator({}, cache_root=tmp_path)

        assert translator.is_cached("dan", "hr", "es")
        assert not translator.is_cached("dan", "es", "hr")
        assert not translator.is_cached("grad", "hr", "es")
        assert not FakeRemoteTranslator({}).is_cached("dan", "hr", "es")

    def test_cache_write_failure_does_not_fail_translation(self, tmp_path, caplog):
        (tmp_path / "translations").write_text("", encoding="utf-8")
        translator = FakeRemoteTranslator({"dan": "día"}, cache_root=tmp_path)

        with caplog.at_level(logging.WARNING, logger="deck_builder"):
            assert translator.translate("dan", "hr", "es") == "día"
        assert "Failed to cache translation" in caplog.text

    def test_unreadable_cache_is_treated_as_miss(self, tmp_path):
        cache = TranslationCache(tmp_path, "hr", "es")
        cache.path.parent.mkdir(parents=True)
        cache.path.write_text("not json", encoding="utf-8")
        translator = FakeRemoteTranslator({"dan": "día"}, cache_root=tmp_path)

        assert translator.translate("dan", "hr", "es") == "día"
        assert cache.get("dan") == "día"

    def test_works_without_cache(self):
        translator = FakeRemoteTranslator({"dan": "día"})
        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.remote_calls == ["dan", "dan"]

    def test_retries_transient_errors(self, tmp_path):
        translator = FakeRemoteTranslator(
            {"dan": "día"},
            failures_before_success=1,
            cache_root=tmp_path,
            retry=RetryConfig(max_retries=1, backoff_initial_seconds=0.5),
        )
        assert translator.translate("dan", "hr", "es") == "día"
        assert translator.remote_calls == ["dan", "dan"]
        assert translator.sleeps == [0.5]

    def test_no_retry_by_default(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": "día"}, failures_before_success=1, cache_root=tmp_path)
        with pytest.raises(TranslationFailure):
            translator.translate("dan", "hr", "es")
        assert translator.remote_calls == ["dan"]


class TestTranslateBatch:
    def test_preserves_order(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": "día", "kuća": "casa", "grad": "ciudad"}, cache_root=tmp_path)
        assert translator.translate_batch(["kuća", "dan", "grad"], "hr", "es") == ["casa", "día", "ciudad"]

    def test_fails_fast(self, tmp_path):
        translator = FakeRemoteTranslator({"dan": "día", "grad": "ciudad"}, cache_root=tmp_path)

        with pytest.raises(TranslationFailure):
            translator.translate_batch(["dan", "xyz", "grad"], "hr", "es")
        assert translator.remote_calls == ["dan", "xyz"]

    def test_pacing_between_requests(self, tmp_path):
        translator = FakeRemoteTranslator(
            {"a1": "x", "a2": "y", "a3": "z"},
            cache_root=tmp_path,
            pacing=PacingPolicy(0.25, 1),
        )
        translator.translate_batch(["a1", "a2", "a3"], "hr", "es")
        assert translator.sleeps == [0.25, 0.25]

    def test_cache_hits_are_not_paced(self, tmp_path):
        cache = TranslationCache(tmp_path, "hr", "es")
        cache.put("a1", "x")
        cache.put("a2", "y")
        translator = FakeRemoteTranslator({"a3": "z", "a4": "w"}, cache_root=tmp_path, pacing=PacingPolicy(0.25, 1))

        assert translator.translate_batch(["a1", "a2", "a3", "a4"], "hr", "es") == ["x", "y", "z", "w"]
        assert translator.remote_calls == ["a3", "a4"]
        assert translator.sleeps == [0.25]

    def test_fully_cached_batch_never_pauses(self, tmp_path):
        translator = FakeRemoteTranslator({"a1": "x", "a2": "y"}, cache_root=tmp_path, pacing=PacingPolicy(0.25, 1))
        translator.translate_batch(["a1", "a2"], "hr", "es")
        translator.sleeps.clear()

        translator.translate_batch(["a1", "a2"], "hr", "es")
        assert translator.sleeps == []

    def test_empty_batch(self):
        assert FakeRemoteTranslator({}).translate_batch([], "hr", "es") == []


class TestRetryCall:
    def test_exhausted_retries_reraise(self):
        sleeps = []

        def always_fails():
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            retry_call(always_fails, max_retries=2, backoff_initial_seconds=1.0, backoff_multiplier=2.0,
                       sleep=sleeps.append)
        assert sleeps == [1.0, 2.0]

    def test_non_retryable_propagates_immediately(self):
        calls = []

        def fails():
            calls.append(1)
            raise KeyError("x")

        with pytest.raises(KeyError):
            retry_call(fails, max_retries=3, backoff_initial_seconds=1.0, backoff_multiplier=2.0,
                       retry_on=(ConnectionError,), sleep=lambda s: None)
        assert calls == [1]
