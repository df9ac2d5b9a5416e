"""Narrative generators used to phrase roadmap recommendations and notes.

A generator turns a prompt into free text. Failures of any kind surface as
UpstreamDegradedError so callers can fall back to deterministic text.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from openai import OpenAI

from career_compass.core.config import Settings
from career_compass.core.errors import UpstreamDegradedError

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an experienced career counselor. You give students practical, "
    "encouraging and concrete advice."
)


class NarrativeGenerator(Protocol):
    """Anything that can complete a prompt at a given temperature."""

    def complete(self, prompt: str, temperature: float, system: Optional[str] = None) -> str:
        ...


class NullNarrativeGenerator:
    """Generator used when no text backend is configured. Always degrades."""

    def complete(self, prompt: str, temperature: float, system: Optional[str] = None) -> str:
        raise UpstreamDegradedError("No narrative provider configured")


class OpenAINarrativeGenerator:
    """Chat-completions backed generator. One attempt, bounded by a timeout."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 15.0, client: Optional[OpenAI] = None):
        self.model = model
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, prompt: str, temperature: float, system: Optional[str] = None) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system or DEFAULT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
            )
        except Exception as exc:
            raise UpstreamDegradedError(f"Narrative request failed: {type(exc).__name__}") from exc
        if not response.choices:
            raise UpstreamDegradedError("Narrative response had no choices")
        text = response.choices[0].message.content
        if not text or not text.strip():
            raise UpstreamDegradedError("Narrative response was empty")
        return text


# PUBLIC_INTERFACE
def get_narrative_generator(settings: Settings) -> NarrativeGenerator:
    """Build the generator selected by NARRATIVE_PROVIDER."""
    if settings.narrative_provider == "openai":
        if not settings.openai_api_key:
            logger.warning("NARRATIVE_PROVIDER=openai but OPENAI_API_KEY is not set; using fallback text")
            return NullNarrativeGenerator()
        logger.info("Using OpenAI narrative generator (model=%s)", settings.narrative_model)
        return OpenAINarrativeGenerator(
            api_key=settings.openai_api_key,
            model=settings.narrative_model,
            timeout=settings.narrative_timeout_seconds,
        )
    return NullNarrativeGenerator()
