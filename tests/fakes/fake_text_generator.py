"""Fake text generators for testing: no LLM calls needed."""

from __future__ import annotations


class FakeTextGenerator:
    """Canned-response generator that records prompts."""

    def __init__(self, *, default_content: str = "fake response") -> None:
        self._default_content = default_content
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._default_content


class FailingTextGenerator:
    """Always raises, like an unreachable AI content API."""

    def __init__(self, exc: Exception | None = None) -> None:
        self._exc = exc or TimeoutError("content API timed out")
        self.calls = 0

    def generate(self, prompt: str) -> str:
        self.calls += 1
        raise self._exc


class ScriptedTextGenerator:
    """Returns the given responses in order, raising any that are exceptions."""

    def __init__(self, responses: list[object]) -> None:
        self._responses = list(responses)

    def generate(self, prompt: str) -> str:
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response  # type: ignore[return-value]
