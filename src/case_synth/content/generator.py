"""Content generator: prompt in, normalized text out, never raises."""

from __future__ import annotations

import logging

from case_synth.content.protocols import ITextGenerator
from case_synth.exceptions import ContentGenerationDegraded

log = logging.getLogger(__name__)

DEFAULT_FALLBACK_TEXT = "Content unavailable."

# Opening -> closing quote pairs the model likes to wrap answers in
_QUOTE_PAIRS = {'"': '"', "'": "'", "`": "`", "“": "”", "‘": "’"}


def normalize_text(text: str) -> str:
    """Strip surrounding whitespace and one matched pair of wrapping quotes."""
    text = text.strip()
    if len(text) >= 2 and _QUOTE_PAIRS.get(text[0]) == text[-1]:
        text = text[1:-1].strip()
    return text


class ContentGenerator:
    """Wraps a text collaborator with output normalization and a fixed fallback.

    Failures are recorded in :attr:`degraded` so callers can report them as
    warnings; the returned text is then ``fallback_text``.
    """

    def __init__(
        self,
        collaborator: ITextGenerator,
        *,
        fallback_text: str = DEFAULT_FALLBACK_TEXT,
    ) -> None:
        self._collaborator = collaborator
        self._fallback_text = fallback_text
        self.degraded: list[ContentGenerationDegraded] = []

    @property
    def fallback_text(self) -> str:
        return self._fallback_text

    def generate(self, prompt: str) -> str:
        try:
            raw = self._collaborator.generate(prompt)
        except Exception as e:
            return self._degrade(f"Text generation failed: {e}", prompt)

        if not isinstance(raw, str):
            return self._degrade(f"Malformed generator response of type {type(raw).__name__}", prompt)

        text = normalize_text(raw)
        if not text:
            return self._degrade("Text generator returned empty content", prompt)
        return text

    def drain_degraded(self) -> list[ContentGenerationDegraded]:
        """Return and clear the degradation events recorded so far."""
        events, self.degraded = self.degraded, []
        return events

    def _degrade(self, message: str, prompt: str) -> str:
        log.warning("%s; using fallback text", message)
        self.degraded.append(ContentGenerationDegraded(message, prompt=prompt))
        return self._fallback_text
