"""
LLM-backed translator using Google Gemini through LangChain.

Requires GOOGLE_API_KEY in the environment.
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from deck_builder.common.llm import build_llm
from deck_builder.config_models import DEFAULT_TIMEOUT_SECONDS, RetryConfig
from .languages import language_name
from .prompts import build_word_translation_prompts
from .translator import CachingTranslator, PacingPolicy


class WordTranslation(BaseModel):
    """Structured LLM answer for one word."""
    translation: str = Field(..., description="Most common translation of the word, nothing else")


class GeminiTranslator(CachingTranslator):

    # Free-tier Gemini quotas are per minute
    default_pacing = PacingPolicy(delay_seconds=1.0, every=1)

    def __init__(
            self,
            cache_root: Path | None = None,
            *,
            model: str = "gemini-2.5-flash",
            temperature: float = 0.0,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            pacing: PacingPolicy | None = None,
            retry: RetryConfig | None = None,
            sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(cache_root=cache_root, pacing=pacing, retry=retry, sleep=sleep)
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._chain = None

    def _get_chain(self):
        """Build the prompt | llm chain on first use."""
        if self._chain is None:
            llm = build_llm(model=self.model, temperature=self.temperature, timeout_seconds=self.timeout)
            prompts = build_word_translation_prompts()
            prompt = ChatPromptTemplate.from_messages([
                ("system", prompts["system"]),
                ("human", prompts["human"]),
            ])
            self._chain = prompt | llm.with_structured_output(WordTranslation)
        return self._chain

    def _translate_remote(self, text: str, source: str, target: str) -> str:
        result = self._get_chain().invoke({
            "text": text,
            "source_language": language_name(source),
            "target_language": language_name(target),
        })
        if result is None:
            raise RuntimeError(f"LLM did not return a translation for '{text}'")
        return result.translation
