from __future__ import annotations

from langchain_google_genai import ChatGoogleGenerativeAI


def build_llm(
    model: str,
    temperature: float,
    timeout_seconds: float | None = None,
    thinking_budget: int | None = 0,
) -> ChatGoogleGenerativeAI:
    """Return a configured Google Gemini chat LLM instance.

    Parameters
    - model: Gemini model name (e.g., "gemini-2.5-flash").
    - temperature: Sampling temperature.
    - timeout_seconds: Per-request timeout, None for the client default.
    - thinking_budget: Token budget for internal reasoning (Gemini 2.5+ only).
        Single-word translation needs none, so 0 is the default. None keeps the model default.
    """
    kwargs = {
        "model": model,
        "temperature": temperature,
    }
    if timeout_seconds is not None:
        kwargs["timeout"] = timeout_seconds
    if thinking_budget is not None:
        kwargs["thinking_budget"] = thinking_budget

    try:
        return ChatGoogleGenerativeAI(**kwargs)
    except TypeError:
        # Older releases do not know thinking_budget
        kwargs.pop("thinking_budget", None)
        return ChatGoogleGenerativeAI(**kwargs)
