"""Offline text generator that echoes the prompt. No LLM required."""

from __future__ import annotations


class TemplateTextGenerator:
    """Deterministic placeholder content, handy for dry runs and demos."""

    def __init__(self, prefix: str = "Generated content based on prompt: ") -> None:
        self._prefix = prefix

    def generate(self, prompt: str) -> str:
        return f"{self._prefix}{prompt}"
