"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

if TYPE_CHECKING:
    from case_synth.case_types.registry import CaseTypeRegistry
    from case_synth.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that use IAM/local auth and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"bedrock", "ollama"})


def validate_settings(settings: AppSettings, registry: CaseTypeRegistry | None = None) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_timezone(settings)
    if registry is not None:
        _check_overrides(settings, registry)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys when the LLM backend is in use."""
    if settings.content.backend != "litellm":
        return
    if settings.llm.provider not in _NO_KEY_PROVIDERS:
        if settings.llm.api_key in ("no-key", ""):
            raise ValueError(
                f"CASESYNTH_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
                f"Set it via environment variable or secrets manager."
            )


def _check_timezone(settings: AppSettings) -> None:
    try:
        ZoneInfo(settings.synthesis.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(
            f"CASESYNTH_SYNTHESIS_TIMEZONE={settings.synthesis.timezone!r} is not a known time zone"
        ) from e


def _check_overrides(settings: AppSettings, registry: CaseTypeRegistry) -> None:
    """Warn about override keys that name no registered case type."""
    overrides = {
        **settings.synthesis.batch_overrides,
        **settings.synthesis.short_description_overrides,
    }
    for case_type_id in sorted(overrides):
        if not registry.has(case_type_id):
            log.warning("Override for unregistered case type %r is ignored", case_type_id)
