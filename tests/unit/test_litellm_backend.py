"""Tests for LiteLLMTextGenerator retry behaviour (litellm.completion mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from case_synth.content.litellm_backend import LiteLLMTextGenerator
from case_synth.core.config import LLMConfig
from case_synth.exceptions import NonRetryableError, RetryableError


def _litellm_response(content: str) -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def config() -> LLMConfig:
    return LLMConfig(model="openai/test-model", api_key="sk-test", max_retries=3)


class TestLiteLLMTextGenerator:
    def test_returns_content(self, config: LLMConfig) -> None:
        with patch("litellm.completion", return_value=_litellm_response("A note.")) as mock_completion:
            gen = LiteLLMTextGenerator(config, system_prompt="Be brief.")
            assert gen.generate("Write a note.") == "A note."

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "openai/test-model"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Write a note."},
        ]

    def test_placeholder_key_not_sent(self) -> None:
        with patch("litellm.completion", return_value=_litellm_response("x")) as mock_completion:
            LiteLLMTextGenerator(LLMConfig(api_key="no-key")).generate("p")
        assert "api_key" not in mock_completion.call_args.kwargs

    def test_retries_then_succeeds(self, config: LLMConfig) -> None:
        sleeps: list[float] = []
        side_effect = [TimeoutError("slow"), _litellm_response("recovered")]
        with patch("litellm.completion", side_effect=side_effect) as mock_completion:
            gen = LiteLLMTextGenerator(config, sleep=sleeps.append)
            assert gen.generate("p") == "recovered"
        assert mock_completion.call_count == 2
        assert len(sleeps) == 1

    def test_exhausted_retries(self, config: LLMConfig) -> None:
        sleeps: list[float] = []
        with patch("litellm.completion", side_effect=TimeoutError("slow")) as mock_completion:
            gen = LiteLLMTextGenerator(config, sleep=sleeps.append)
            with pytest.raises(RetryableError, match="after 3 retries"):
                gen.generate("p")
        assert mock_completion.call_count == 3
        assert len(sleeps) == 2
        assert all(s <= config.retry_max_delay * (1 + config.retry_jitter_factor) for s in sleeps)

    def test_non_retryable_fails_fast(self, config: LLMConfig) -> None:
        with patch.object(LiteLLMTextGenerator, "_is_retryable", return_value=False):
            with patch("litellm.completion", side_effect=ValueError("bad request")) as mock_completion:
                with pytest.raises(NonRetryableError):
                    LiteLLMTextGenerator(config, sleep=lambda _: None).generate("p")
        assert mock_completion.call_count == 1

    def test_none_content_is_empty_string(self, config: LLMConfig) -> None:
        response = _litellm_response("")
        response.choices[0].message.content = None
        with patch("litellm.completion", return_value=response):
            assert LiteLLMTextGenerator(config).generate("p") == ""
