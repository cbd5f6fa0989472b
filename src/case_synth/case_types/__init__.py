"""Case type schemas and the registry that discovers them."""

from __future__ import annotations

from case_synth.case_types.registry import (
    AnnotationStep,
    AttachmentSpec,
    CaseTypeRegistry,
    CaseTypeSchema,
    build_registry,
    get_registry,
)

__all__ = [
    "AnnotationStep",
    "AttachmentSpec",
    "CaseTypeRegistry",
    "CaseTypeSchema",
    "build_registry",
    "get_registry",
]
