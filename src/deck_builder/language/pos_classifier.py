"""
Heuristic part-of-speech classifier.

This is an approximation for bucketing frequency-list words, not a tagger.
Each language has an ordered table of rules; classification is a single pass
over the table where the first matching rule wins, and words no rule matches
fall back to NOUN:

    1. exact-match closed sets (pronouns, prepositions, conjunctions, interjections)
    2. suffix rules (verb, adjective, adverb endings)
    3. NOUN

Closed sets come first so that short function words are not caught by a suffix
rule (Croatian "ti" is a pronoun, not a verb ending in -ti). All matching is
case-insensitive.

Usage:
    from deck_builder.language.pos_classifier import classify

    classify("biti", "hr")   # PartOfSpeech.VERB
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence

from .models import PartOfSpeech

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class ClassificationRule:
    """One (predicate, category) row of a rule table. Predicates receive lowercased words."""
    name: str
    predicate: Predicate
    category: PartOfSpeech

    def matches(self, word: str) -> bool:
        return self.predicate(word.lower())


def exact(category: PartOfSpeech, words: Iterable[str], name: str | None = None) -> ClassificationRule:
    closed_set = frozenset(w.lower() for w in words)
    return ClassificationRule(
        name=name or f"exact-{category.value}",
        predicate=lambda w: w in closed_set,
        category=category,
    )


def suffix(
        category: PartOfSpeech,
        endings: Sequence[str],
        min_length: int = 0,
        name: str | None = None,
) -> ClassificationRule:
    lowered = tuple(e.lower() for e in endings)
    return ClassificationRule(
        name=name or f"suffix-{category.value}",
        predicate=lambda w: len(w) >= min_length and w.endswith(lowered),
        category=category,
    )


@dataclass
class Classifier:
    language_code: str
    rules: List[ClassificationRule] = field(default_factory=list)
    default: PartOfSpeech = PartOfSpeech.NOUN

    def classify(self, word: str) -> PartOfSpeech:
        lowered = word.lower()
        for rule in self.rules:
            if rule.predicate(lowered):
                return rule.category
        return self.default


CROATIAN_RULES: List[ClassificationRule] = [
    exact(PartOfSpeech.PRONOUN, ["ja", "ti", "on", "ona", "ono", "mi", "vi", "oni", "me", "te", "se"]),
    exact(PartOfSpeech.PREPOSITION, ["u", "na", "za", "s", "sa", "iz", "do", "od", "po", "prema", "kroz"]),
    exact(PartOfSpeech.CONJUNCTION, ["i", "ali", "ili", "da", "ako", "jer", "kad", "dok"]),
    exact(PartOfSpeech.INTERJECTION, ["ah", "oh", "eh", "hej", "jao", "joj", "uf"]),
    # infinitives and present tense 1st/2nd person
    suffix(PartOfSpeech.VERB, ["ti", "ći", "am", "aš", "im", "iš"]),
    suffix(PartOfSpeech.ADJECTIVE, ["ski", "ški", "čki"]),
    suffix(PartOfSpeech.ADVERB, ["no", "ko"]),
    suffix(PartOfSpeech.ADVERB, ["je"], min_length=5, name="suffix-adverb-long-je"),
]

SPANISH_RULES: List[ClassificationRule] = [
    exact(PartOfSpeech.PRONOUN, ["yo", "tú", "él", "ella", "nosotros", "vosotros", "ellos", "ellas", "me", "te",
                                 "se", "lo", "la", "le", "les", "nos"]),
    exact(PartOfSpeech.PREPOSITION, ["a", "de", "en", "con", "por", "para", "sin", "sobre", "entre", "hasta",
                                     "desde", "hacia", "según", "contra", "bajo"]),
    exact(PartOfSpeech.CONJUNCTION, ["y", "e", "o", "u", "pero", "que", "si", "porque", "aunque", "ni", "como",
                                     "cuando", "mientras"]),
    exact(PartOfSpeech.INTERJECTION, ["ay", "oh", "ah", "eh", "hola", "ojalá", "vaya"]),
    suffix(PartOfSpeech.ADVERB, ["mente"]),
    suffix(PartOfSpeech.VERB, ["ar", "er", "ir"], min_length=4),
    suffix(PartOfSpeech.ADJECTIVE, ["oso", "osa", "ble", "ivo", "iva"]),
]

_CLASSIFIERS: Dict[str, Classifier] = {
    "hr": Classifier("hr", CROATIAN_RULES),
    "es": Classifier("es", SPANISH_RULES),
}


def register_classifier(classifier: Classifier) -> None:
    """Add or replace the classifier used for classifier.language_code."""
    _CLASSIFIERS[classifier.language_code.lower()] = classifier


def get_classifier(language_code: str) -> Classifier:
    """Classifier for a language; languages without rules get an empty table (always NOUN)."""
    code = language_code.lower()
    return _CLASSIFIERS.get(code) or Classifier(code)


def classify(word: str, language_code: str = "hr") -> PartOfSpeech:
    return get_classifier(language_code).classify(word)
