"""Field specs and their resolver."""

from __future__ import annotations

from case_synth.fields.generator import FieldValueGenerator, ResolutionContext, render_template
from case_synth.fields.specs import (
    NO_MATCH,
    CallerInput,
    ComputedDate,
    ConfigValue,
    Constant,
    FieldRef,
    FieldSpec,
    GeneratedText,
    NextSequenceNumber,
    RandomChoice,
    RandomNumericRange,
    RandomPatternString,
    RelatedField,
    RelatedRecordLookup,
    Template,
)

__all__ = [
    "NO_MATCH",
    "CallerInput",
    "ComputedDate",
    "ConfigValue",
    "Constant",
    "FieldRef",
    "FieldSpec",
    "FieldValueGenerator",
    "GeneratedText",
    "NextSequenceNumber",
    "RandomChoice",
    "RandomNumericRange",
    "RandomPatternString",
    "RelatedField",
    "RelatedRecordLookup",
    "ResolutionContext",
    "Template",
    "render_template",
]
