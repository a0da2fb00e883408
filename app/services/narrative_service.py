"""
app/services/narrative_service.py

Plain-language narrative generation with ordered model fallback.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any

from app.config import GeminiSettings
from app.retry import RetryCancelledError, wait_or_cancel
from llm_synthesis.adapter import BaseLLMAdapter, GeminiLLMAdapter, MockLLMAdapter
from llm_synthesis.prompt_builder import NarrativePromptBuilder

logger = logging.getLogger(__name__)

FALLBACK_NARRATIVE = (
    "AI could not generate the plain-language summary right now because the AI is busy. "
    "Please try again in a moment."
)


class NarrativeGenerator:
    """
    Asks each adapter in turn for a narrative; the first non-empty text wins.

    ``generate`` never raises: every failure ends in FALLBACK_NARRATIVE.
    """

    def __init__(
        self,
        *,
        adapters: Sequence[BaseLLMAdapter],
        retry_delay_seconds: float = 0.7,
        prompt_builder: NarrativePromptBuilder | None = None,
    ) -> None:
        self._adapters = list(adapters)
        self._retry_delay_seconds = max(0.0, retry_delay_seconds)
        self._prompt_builder = prompt_builder or NarrativePromptBuilder()

    def generate(self, summary: dict[str, Any], *, cancel_event: threading.Event | None = None) -> str:
        """
        Return the first non-empty narrative, or FALLBACK_NARRATIVE.

        Setting ``cancel_event`` skips the remaining models.
        """

        prompt = self._prompt_builder.build_prompt(summary)

        for adapter in self._adapters:
            try:
                text = adapter.generate(prompt)
            except Exception as exc:
                logger.warning("Narrative model failed model=%s error=%s", adapter.model, exc)
                text = None

            if text and text.strip():
                logger.info("Narrative generated model=%s", adapter.model)
                return text.strip()

            logger.info("Narrative model returned no text model=%s", adapter.model)
            try:
                wait_or_cancel(self._retry_delay_seconds, cancel_event)
            except RetryCancelledError:
                logger.info("Narrative generation cancelled; using fallback text.")
                break

        logger.warning("All narrative models failed models=%s", [a.model for a in self._adapters])
        return FALLBACK_NARRATIVE


def build_llm_adapters(settings: GeminiSettings) -> list[BaseLLMAdapter]:
    """
    Build one adapter per configured model, or a single mock adapter.
    """

    if settings.adapter == "mock":
        return [MockLLMAdapter()]
    return [
        GeminiLLMAdapter(
            model=model,
            api_key=settings.api_key or "",
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
        for model in settings.models
    ]


def build_narrative_generator(settings: GeminiSettings) -> NarrativeGenerator:
    return NarrativeGenerator(
        adapters=build_llm_adapters(settings),
        retry_delay_seconds=settings.retry_delay_seconds,
    )
