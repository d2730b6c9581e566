import pytest

from deck_builder.config_models import PacingConfig, TranslatorConfig
from deck_builder.errors import ConfigurationError
from deck_builder.language.factory import build_translator
from deck_builder.language.http_translators import LibreTranslateTranslator, MyMemoryTranslator
from deck_builder.language.translator import PacingPolicy


def test_default_provider_is_mymemory(tmp_path):
    translator = build_translator(TranslatorConfig(), tmp_path)
    assert isinstance(translator, MyMemoryTranslator)
    assert translator.pacing == MyMemoryTranslator.default_pacing
    assert translator.retry.max_retries == 1


def test_pacing_override(tmp_path):
    config = TranslatorConfig(pacing=PacingConfig(delay_seconds=2.0, every=3))
    assert build_translator(config, tmp_path).pacing == PacingPolicy(2.0, 3)


def test_libretranslate_config_wins_over_environment(tmp_path):
    config = TranslatorConfig(provider="libretranslate", libretranslate_url="http://mine:5000", api_key="cfg")
    translator = build_translator(
        config, tmp_path, libretranslate_url="http://env:5000", libretranslate_api_key="env",
    )
    assert isinstance(translator, LibreTranslateTranslator)
    assert translator.base_url == "http://mine:5000"
    assert translator.api_key == "cfg"


def test_libretranslate_environment_values(tmp_path):
    translator = build_translator(
        TranslatorConfig(provider="libretranslate"), tmp_path,
        libretranslate_url="http://env:5000/", libretranslate_api_key="env",
    )
    assert translator.base_url == "http://env:5000"
    assert translator.api_key == "env"


def test_gemini_requires_api_key(tmp_path, monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY"):
        build_translator(TranslatorConfig(provider="gemini"), tmp_path)


def test_gemini_translator_is_built_lazily(tmp_path, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    translator = build_translator(TranslatorConfig(provider="gemini", model="gemini-2.5-flash"), tmp_path)

    assert translator.model == "gemini-2.5-flash"
    assert translator.pacing == PacingPolicy(1.0, 1)
    assert translator._chain is None
