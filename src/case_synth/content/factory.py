"""Content generator factory: resolves the text collaborator from config."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from case_synth.content.generator import ContentGenerator
from case_synth.content.protocols import ITextGenerator
from case_synth.content.template_backend import TemplateTextGenerator

if TYPE_CHECKING:
    from case_synth.core.config import AppSettings

log = logging.getLogger(__name__)


def create_text_generator(settings: AppSettings) -> ITextGenerator:
    """Return the collaborator named by ``settings.content.backend``."""
    if settings.content.backend == "litellm":
        from case_synth.content.litellm_backend import LiteLLMTextGenerator

        log.info("Using LiteLLM text generator (model=%s)", settings.llm.model)
        return LiteLLMTextGenerator(settings.llm, system_prompt=settings.content.system_prompt)

    log.info("Using template text generator")
    return TemplateTextGenerator()


def create_content_generator(
    settings: AppSettings,
    text_generator: ITextGenerator | None = None,
) -> ContentGenerator:
    """Wrap ``text_generator`` (or the configured one) with normalization and fallback."""
    return ContentGenerator(
        text_generator if text_generator is not None else create_text_generator(settings),
        fallback_text=settings.content.fallback_text,
    )
