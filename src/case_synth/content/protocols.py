"""Text generation collaborator protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ITextGenerator(Protocol):
    """Anything that turns a prompt into text.

    Implementations may raise or time out; :class:`ContentGenerator`
    turns any failure into fallback text.
    """

    def generate(self, prompt: str) -> str:
        ...
