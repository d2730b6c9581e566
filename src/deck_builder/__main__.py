"""
Command line entry point: `python -m deck_builder <command>`.

Commands:
- test: check that AnkiConnect is reachable and list a few decks
- create: build a deck from the most frequent words of a language
- config: show the resolved settings
- languages: list supported languages
"""
from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from deck_builder.anki_sync.anki_connect import AnkiConnectClient
from deck_builder.common.logging_config import setup_logging
from deck_builder.config_models import (
    AppSettings,
    DeckPipelineConfig,
    RunConfig,
    deck_pipeline_config,
    load_run_config,
)
from deck_builder.errors import ConfigurationError, DeckBuilderError, SinkError, SinkUnreachable, UnsupportedLanguage
from deck_builder.language.factory import build_translator
from deck_builder.language.frequency_sources import default_registry
from deck_builder.language.frequency_store import FrequencyStore
from deck_builder.language.languages import Language, get_language, get_prioritized_languages
from deck_builder.language.models import PartOfSpeech
from deck_builder.pipelines.deck import PipelineResult, run_deck_pipeline

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
OUTPUT_DIR = Path("out")


def _resolve_language(value: str) -> Language:
    language = get_language(value)
    if language is None:
        raise UnsupportedLanguage(value)
    return language


def default_deck_name(target: Language, base: Language, words_per_category: int) -> str:
    total = words_per_category * len(PartOfSpeech.ordered())
    return f"{target.name} → {base.name} (Top {total} Words)"


def build_pipeline_config(args: argparse.Namespace) -> DeckPipelineConfig:
    """Merge `pipelines.deck` from the YAML config with command line overrides."""
    run_config = RunConfig()
    config_path: Optional[Path] = Path(args.config) if args.config else None
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH
    if config_path is not None:
        run_config = load_run_config(config_path)

    flags = {
        "target_language": args.target_language,
        "base_language": args.base_language,
        "words_per_category": args.words_per_pos,
        "deck_name": args.deck_name,
        "bidirectional": args.bidirectional,
        "offline": args.offline or None,
    }
    overrides: Dict[str, Any] = {k: v for k, v in flags.items() if v is not None}
    if args.provider:
        overrides["translator"] = {"provider": args.provider}

    configured = (run_config.pipelines or {}).get("deck") or {}
    missing = [k for k in ("target_language", "base_language") if k not in overrides and k not in configured]
    if missing:
        names = ", ".join("--" + k.replace("_", "-") for k in missing)
        raise ConfigurationError(f"Missing {names} (or set them under pipelines.deck in the config file)")

    return deck_pipeline_config(run_config, overrides)


def _safe_filename(name: str) -> str:
    return re.sub(r"[^\w\-]+", "_", name).strip("_") or "deck"


def save_result(result: PipelineResult, output_dir: Path = OUTPUT_DIR) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"{_safe_filename(result.deck_name)}.json"
    output_file.write_text(
        json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return output_file


def _print_result(result: PipelineResult) -> None:
    print("\nWord selection:")
    for pos in PartOfSpeech.ordered():
        count = sum(1 for w in result.selected_words if w.part_of_speech == pos)
        if count:
            print(f"  {pos.value}: {count} words")
    print(f"  Total: {len(result.selected_words)} words selected")

    if result.translations:
        print("\nSample translations:")
        for item in result.translations[:10]:
            print(f"  {item.word.text} → {item.translation} ({item.word.part_of_speech.value})")
        if len(result.translations) > 10:
            print(f"  ... and {len(result.translations) - 10} more")

    if result.translation_failures:
        print(f"\n{len(result.translation_failures)} words could not be translated:")
        for failure in result.translation_failures[:10]:
            print(f"  - {failure.word.text}: {failure.reason}")

    if result.dry_run:
        print(f"\nDry run: {len(result.cards)} cards would be added to '{result.deck_name}'")
        return

    print(f"\nDeck '{result.deck_name}': {result.summary()}")
    if result.cards_failed:
        print(f"  {result.cards_failed} cards failed (untranslated words or duplicates)")


def handle_create(args: argparse.Namespace, settings: AppSettings) -> int:
    cfg = build_pipeline_config(args)
    target = _resolve_language(cfg.target_language)
    base = _resolve_language(cfg.base_language)
    if target.code == base.code:
        raise ConfigurationError("Target and base languages must be different")

    deck_name = cfg.deck_name or default_deck_name(target, base, cfg.words_per_category)
    dry_run = bool(args.dry_run)
    cards_per_word = 2 if cfg.bidirectional else 1

    print("Configuration summary:")
    print(f"  Target language: {target.label()}")
    print(f"  Base language: {base.label()}")
    print(f"  Words per part of speech: {cfg.words_per_category}")
    print(f"  Cards: up to {cfg.words_per_category * len(PartOfSpeech.ordered()) * cards_per_word}"
          f"{' (bidirectional)' if cfg.bidirectional else ''}")
    print(f"  Deck name: {deck_name}")
    print(f"  Translator: {cfg.translator.provider}")
    print(f"  Dry run: {dry_run}")

    sink = None
    if not dry_run:
        sink = AnkiConnectClient(settings.anki_connect_url, timeout=settings.timeout_seconds)
        sink.verify_connection()

    store = FrequencyStore(settings.cache_dir, sources=default_registry(offline=cfg.offline))
    translator = build_translator(
        cfg.translator,
        settings.cache_dir,
        libretranslate_url=settings.libretranslate_url,
        libretranslate_api_key=settings.libretranslate_api_key,
    )

    try:
        result = run_deck_pipeline(
            store,
            translator,
            sink,
            target_language=target.code,
            base_language=base.code,
            words_per_category=cfg.words_per_category,
            deck_name=deck_name,
            bidirectional=cfg.bidirectional,
            model_name=cfg.model_name,
            dry_run=dry_run,
        )
    except SinkUnreachable as e:
        if e.result is not None:
            _print_result(e.result)
        raise

    _print_result(result)
    if not dry_run:
        print(f"Run saved to: {save_result(result)}")
    return 0


def handle_test(args: argparse.Namespace, settings: AppSettings) -> int:
    print(f"AnkiConnect URL: {settings.anki_connect_url}")
    client = AnkiConnectClient(settings.anki_connect_url, timeout=settings.timeout_seconds)
    try:
        version = client.verify_connection()
    except SinkError as e:
        print(f"Failed to connect to AnkiConnect: {e}")
        print("Make sure Anki is running with the AnkiConnect add-on (code 2055492159) installed,")
        print("or point ANKI_CONNECT_URL at the right address.")
        return 1

    print(f"Connected to AnkiConnect (API version {version})")
    decks = client.deck_names()
    print(f"Available decks ({len(decks)}):")
    for deck in decks[:10]:
        print(f"  - {deck}")
    if len(decks) > 10:
        print(f"  ... and {len(decks) - 10} more")
    return 0


def handle_config(args: argparse.Namespace, settings: AppSettings) -> int:
    print("Current configuration:")
    print(f"  AnkiConnect URL: {settings.anki_connect_url}")
    print(f"  LibreTranslate URL: {settings.libretranslate_url}")
    print(f"  Request timeout: {settings.timeout_seconds}s")
    print(f"  Cache directory: {settings.cache_dir}")
    print(f"    frequency data: {settings.frequency_cache_dir}")
    print(f"    translations: {settings.translation_cache_dir}")
    return 0


def handle_languages(args: argparse.Namespace, settings: AppSettings) -> int:
    for language in get_prioritized_languages():
        print(f"  {language.code}  {language.name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deck_builder",
        description="Build language learning Anki decks from word frequency lists",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO). Use DEBUG to see cache hits and requests.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("test", help="Test the connection to AnkiConnect").set_defaults(handler=handle_test)

    create = sub.add_parser("create", help="Create a language learning deck")
    create.add_argument("-t", "--target-language", help="Language to learn (e.g. 'Croatian', 'hr')")
    create.add_argument("-b", "--base-language", help="Language for translations (e.g. 'Spanish', 'es')")
    create.add_argument("-w", "--words-per-pos", type=int, help="Words per part of speech (default: 100)")
    create.add_argument("-d", "--deck-name", help="Deck name (default: '<Target> → <Base> (Top N Words)')")
    create.add_argument("--dry-run", action="store_true", help="Translate and preview without touching Anki")
    create.add_argument(
        "--bidirectional",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also create base→target cards (default: on)",
    )
    create.add_argument("--provider", choices=["mymemory", "libretranslate", "gemini"], help="Translation service")
    create.add_argument("--offline", action="store_true", help="Use the bundled frequency samples only")
    create.add_argument("--config", help=f"Path to YAML config (default: ./{DEFAULT_CONFIG_PATH} if present)")
    create.set_defaults(handler=handle_create)

    config = sub.add_parser("config", help="Show configuration")
    config.add_argument("--show", action="store_true", default=True, help="Show current configuration")
    config.set_defaults(handler=handle_config)

    sub.add_parser("languages", help="List supported languages").set_defaults(handler=handle_languages)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = AppSettings.from_env()
        return args.handler(args, settings)
    except FileNotFoundError as e:
        raise SystemExit(str(e))
    except DeckBuilderError as e:
        logger.debug("Command failed", exc_info=True)
        raise SystemExit(f"Error: {e}")


if __name__ == "__main__":
    sys.exit(main())
