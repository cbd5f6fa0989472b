"""Synthesis services: synthesizer, annotation attacher, orchestrator."""

from __future__ import annotations

from case_synth.services.annotation_attacher import AnnotationAttacher, AnnotationContext
from case_synth.services.orchestrator import SynthesisOrchestrator, build_orchestrator
from case_synth.services.synthesizer import RecordSynthesizer

__all__ = [
    "AnnotationAttacher",
    "AnnotationContext",
    "RecordSynthesizer",
    "SynthesisOrchestrator",
    "build_orchestrator",
]
