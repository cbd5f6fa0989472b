"""Synchronous LLM text generator routed through LiteLLM.

Supports ``anthropic/``, ``bedrock/``, ``openai/`` and ``ollama/`` model
prefixes transparently.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable

from case_synth.core.config import LLMConfig
from case_synth.exceptions import NonRetryableError, RetryableError

log = logging.getLogger(__name__)


class LiteLLMTextGenerator:
    """Blocking LLM client using ``litellm.completion`` with retry and jitter."""

    def __init__(
        self,
        config: LLMConfig,
        *,
        system_prompt: str = "",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._system_prompt = system_prompt
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import (
            AuthenticationError,
            BadRequestError,
            NotFoundError,
        )

        non_retryable = (AuthenticationError, BadRequestError, NotFoundError)
        return not isinstance(exc, non_retryable)

    def _messages(self, prompt: str) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate(self, prompt: str) -> str:
        """Single completion, returns the content string.

        Raises:
            NonRetryableError: auth / bad request / not found.
            RetryableError: still failing after ``max_retries`` attempts.
        """
        from litellm import completion

        cfg = self._config
        kwargs: dict[str, Any] = {
            "model": cfg.model,
            "messages": self._messages(prompt),
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
            "timeout": cfg.timeout,
        }
        if cfg.base_url:
            kwargs["api_base"] = cfg.base_url
        if cfg.api_key and cfg.api_key != "no-key":
            kwargs["api_key"] = cfg.api_key

        last_error: Exception | None = None
        for attempt in range(cfg.max_retries):
            try:
                response = completion(**kwargs)
                return response.choices[0].message.content or ""

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2 ** attempt, cfg.retry_max_delay)
                wait = base_wait + random.uniform(0, base_wait * cfg.retry_jitter_factor)

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, cfg.max_retries, e, wait,
                )
                if attempt < cfg.max_retries - 1:
                    self._sleep(wait)

        raise RetryableError(
            f"LLM API failed after {cfg.max_retries} retries: {last_error}"
        ) from last_error
