"""case-synth: schema-driven synthetic case records with generated notes and attachments.

Public API::

    from case_synth import AppSettings, build_orchestrator

    orchestrator = build_orchestrator(AppSettings())
    result = orchestrator.create_case("incident", "VPN drops every 10 minutes")
    if result.ok:
        print(result.record_id)
    else:
        print(result.error.code, result.error.message)
"""

from __future__ import annotations

from case_synth.case_types.registry import (
    AnnotationStep,
    AttachmentSpec,
    CaseTypeRegistry,
    CaseTypeSchema,
    build_registry,
    get_registry,
)
from case_synth.content.generator import ContentGenerator
from case_synth.core.config import AppSettings
from case_synth.fields.generator import FieldValueGenerator, ResolutionContext
from case_synth.models import (
    Annotation,
    AnnotationReport,
    Attachment,
    CaseCreationResult,
    CaseError,
    SynthesisStage,
    SynthesizedRecord,
)
from case_synth.persistence import FileRecordStore, IRecordStore, MemoryRecordStore
from case_synth.services.annotation_attacher import AnnotationAttacher
from case_synth.services.orchestrator import SynthesisOrchestrator, build_orchestrator
from case_synth.services.synthesizer import RecordSynthesizer

__all__ = [
    "AppSettings",
    # Registry
    "AnnotationStep",
    "AttachmentSpec",
    "CaseTypeRegistry",
    "CaseTypeSchema",
    "build_registry",
    "get_registry",
    # Engine
    "FieldValueGenerator",
    "ResolutionContext",
    "ContentGenerator",
    "RecordSynthesizer",
    "AnnotationAttacher",
    "SynthesisOrchestrator",
    "build_orchestrator",
    # Stores
    "IRecordStore",
    "MemoryRecordStore",
    "FileRecordStore",
    # Models
    "Annotation",
    "AnnotationReport",
    "Attachment",
    "CaseCreationResult",
    "CaseError",
    "SynthesisStage",
    "SynthesizedRecord",
]
