"""Text generation for field values, notes and attachments."""

from __future__ import annotations

from case_synth.content.factory import create_content_generator, create_text_generator
from case_synth.content.generator import ContentGenerator, normalize_text
from case_synth.content.protocols import ITextGenerator
from case_synth.content.template_backend import TemplateTextGenerator

__all__ = [
    "ContentGenerator",
    "ITextGenerator",
    "TemplateTextGenerator",
    "create_content_generator",
    "create_text_generator",
    "normalize_text",
]
