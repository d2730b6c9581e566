"""
Frequency deck pipeline: top words -> translations -> bidirectional Anki cards.

Everything runs sequentially. Per-word translation failures and per-card
insertion failures are recorded and the run continues; only losing the
connection to the card sink stops it early.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from deck_builder.anki_sync.anki_connect import CardSink
from deck_builder.errors import SinkItemRejected, SinkUnreachable, TranslationFailure
from deck_builder.language.frequency_store import FrequencyStore, all_top_words
from deck_builder.language.languages import language_name
from deck_builder.language.models import Word
from deck_builder.language.translator import Translator
from .models import Card, CardDirection, CardFailure, PipelineResult, TranslatedWord, WordFailure

logger = logging.getLogger(__name__)

GENERATED_TAG = "auto-generated"


def direction_tag(source: str, target: str) -> str:
    """Tag naming a recall direction, e.g. croatian-to-spanish."""
    def _slug(code: str) -> str:
        return language_name(code).lower().replace(" ", "-")

    return f"{_slug(source)}-to-{_slug(target)}"


def select_words(store: FrequencyStore, language_code: str, words_per_category: int) -> List[Word]:
    dataset = store.load(language_code)
    words = all_top_words(dataset, words_per_category)
    logger.info(
        f"Selected {len(words)} words",
        extra={"language": language_code, "per_category": words_per_category},
    )
    return words


def translate_words(
        translator: Translator,
        words: Sequence[Word],
        source: str,
        target: str,
) -> Tuple[List[TranslatedWord], List[WordFailure]]:
    """Translate each word on its own so one failure does not affect the others."""
    translations: List[TranslatedWord] = []
    failures: List[WordFailure] = []
    requests = 0
    for word in words:
        if not translator.is_cached(word.text, source, target):
            if translator.pacing.should_pause(requests):
                translator.sleep(translator.pacing.delay_seconds)
            requests += 1
        try:
            translation = translator.translate(word.text, source, target)
        except TranslationFailure as e:
            logger.warning(
                f"Skipping untranslatable word: {e}",
                extra={"word": word.text, "pair": f"{source}->{target}"},
            )
            failures.append(WordFailure(word=word, reason=str(e)))
            continue
        translations.append(TranslatedWord(word=word, translation=translation))

    logger.info(f"Translated {len(translations)}/{len(words)} words", extra={"failed": len(failures)})
    return translations, failures


def build_cards(
        translations: Sequence[TranslatedWord],
        target_language: str,
        base_language: str,
        bidirectional: bool = True,
) -> List[Card]:
    """Forward card (word -> translation) for each word, followed by its reverse card."""
    forward_tag = direction_tag(target_language, base_language)
    reverse_tag = direction_tag(base_language, target_language)

    cards: List[Card] = []
    for item in translations:
        pos_tag = item.word.part_of_speech.value
        cards.append(Card(
            front=item.word.text,
            back=item.translation,
            direction=CardDirection.FORWARD,
            word=item.word,
            tags=[GENERATED_TAG, forward_tag, pos_tag],
        ))
        if bidirectional:
            cards.append(Card(
                front=item.translation,
                back=item.word.text,
                direction=CardDirection.REVERSE,
                word=item.word,
                tags=[GENERATED_TAG, reverse_tag, pos_tag],
            ))
    return cards


def ensure_deck(sink: CardSink, deck_name: str) -> int | None:
    """Create the deck or reuse it. Only an unreachable sink is an error."""
    try:
        return sink.create_deck(deck_name)
    except SinkItemRejected as e:
        logger.warning(f"Deck creation returned: {e}; using existing deck", extra={"deck": deck_name})
        return None


def insert_cards(
        sink: CardSink,
        cards: Sequence[Card],
        result: PipelineResult,
        model_name: str = "Basic",
) -> None:
    """Add cards in order, updating the counters on result.

    Raises:
        SinkUnreachable: the sink went away; counters reflect the cards tried so far
    """
    for card in cards:
        result.cards_attempted += 1
        try:
            sink.add_note(card.to_note(result.deck_name, model_name))
        except SinkItemRejected as e:
            logger.warning(
                f"Failed to add note for '{card.front}→{card.back}': {e}",
                extra={"direction": card.direction.value},
            )
            result.cards_failed += 1
            result.card_failures.append(CardFailure(card=card, reason=str(e)))
            continue
        except SinkUnreachable:
            result.cards_failed += 1
            raise
        result.cards_succeeded += 1


def run_deck_pipeline(
        store: FrequencyStore,
        translator: Translator,
        sink: CardSink | None,
        *,
        target_language: str,
        base_language: str,
        words_per_category: int,
        deck_name: str,
        bidirectional: bool = True,
        model_name: str = "Basic",
        dry_run: bool = False,
) -> PipelineResult:
    """Select the top words of target_language, translate them and add cards to the sink.

    Cards are inserted in selection order: part-of-speech order, then rank, then
    forward before reverse. A word whose translation failed counts its planned
    cards as attempted and failed. With dry_run the sink is not touched and the
    counters stay at zero; result.cards lists what would have been added.

    Raises:
        DataUnavailable: no frequency data for target_language
        SinkUnreachable: the card sink cannot be reached; `exc.result` holds the partial result
    """
    result = PipelineResult(
        target_language=target_language,
        base_language=base_language,
        deck_name=deck_name,
        dry_run=dry_run,
    )

    result.selected_words = select_words(store, target_language, words_per_category)
    result.translations, result.translation_failures = translate_words(
        translator, result.selected_words, target_language, base_language,
    )
    result.cards = build_cards(result.translations, target_language, base_language, bidirectional)

    if dry_run:
        logger.info(f"Dry run: {len(result.cards)} cards not inserted", extra={"deck": deck_name})
        return result

    if sink is None:
        raise ValueError("A card sink is required unless dry_run is set")

    cards_per_word = 2 if bidirectional else 1
    untranslated_cards = len(result.translation_failures) * cards_per_word
    result.cards_attempted += untranslated_cards
    result.cards_failed += untranslated_cards

    try:
        result.deck_id = ensure_deck(sink, deck_name)
        insert_cards(sink, result.cards, result, model_name)
    except SinkUnreachable as e:
        logger.error(f"Stopping run: {e}", extra={"deck": deck_name})
        e.result = result
        raise

    logger.info(f"Deck run finished: {result.summary()}", extra={"deck": deck_name})
    return result
