"""Tests for ContentGenerator normalization and fallback."""

from __future__ import annotations

import pytest

from case_synth.content.generator import ContentGenerator, normalize_text
from case_synth.content.template_backend import TemplateTextGenerator
from case_synth.exceptions import ContentGenerationDegraded
from tests.fakes.fake_text_generator import (
    FailingTextGenerator,
    FakeTextGenerator,
    ScriptedTextGenerator,
)


class TestNormalizeText:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"Quoted answer"', "Quoted answer"),
            ("  padded  \n", "padded"),
            ("“Curly quotes”", "Curly quotes"),
            ("'single'", "single"),
            ("`backticks`", "backticks"),
            ('He said "hi" today', 'He said "hi" today'),
            ('He typed "ping"', 'He typed "ping"'),
            ('""Double wrapped""', '"Double wrapped"'),
        ],
    )
    def test_strips_wrapping(self, raw: str, expected: str) -> None:
        assert normalize_text(raw) == expected


class TestContentGenerator:
    def test_returns_normalized_text(self) -> None:
        gen = ContentGenerator(FakeTextGenerator(default_content=' "A clean note." '))
        assert gen.generate("prompt") == "A clean note."
        assert gen.degraded == []

    def test_failure_returns_fallback(self) -> None:
        failing = FailingTextGenerator()
        gen = ContentGenerator(failing, fallback_text="N/A")
        assert gen.generate("prompt") == "N/A"
        assert failing.calls == 1
        assert len(gen.degraded) == 1
        assert isinstance(gen.degraded[0], ContentGenerationDegraded)
        assert gen.degraded[0].prompt == "prompt"

    def test_never_raises(self) -> None:
        gen = ContentGenerator(FailingTextGenerator(RuntimeError("boom")))
        for _ in range(5):
            assert gen.generate("p") == gen.fallback_text

    @pytest.mark.parametrize("response", ["", "   ", '""', None, 42])
    def test_empty_or_malformed_response_degrades(self, response: object) -> None:
        gen = ContentGenerator(ScriptedTextGenerator([response]), fallback_text="fallback")
        assert gen.generate("p") == "fallback"
        assert len(gen.degraded) == 1

    def test_drain_degraded_clears(self) -> None:
        gen = ContentGenerator(ScriptedTextGenerator([TimeoutError("slow"), "ok"]))
        gen.generate("first")
        gen.generate("second")
        events = gen.drain_degraded()
        assert len(events) == 1
        assert "slow" in str(events[0])
        assert gen.drain_degraded() == []


class TestTemplateTextGenerator:
    def test_echoes_prompt(self) -> None:
        gen = TemplateTextGenerator()
        assert gen.generate("Write a note.") == "Generated content based on prompt: Write a note."

    def test_custom_prefix(self) -> None:
        assert TemplateTextGenerator(prefix="> ").generate("x") == "> x"
