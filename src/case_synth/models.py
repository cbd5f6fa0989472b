"""Pydantic data models for case-synth.

Schemas and field specs are frozen dataclasses (see ``case_types`` and
``fields``); the models here are the per-call values that flow between the
services and out to callers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

NoteKind = Literal["note_from_requester", "note_from_agent"]


class SynthesisStage(str, Enum):
    """Per-call state machine of the orchestrator."""

    VALIDATING = "validating"
    RESOLVING = "resolving"
    PERSISTING = "persisting"
    ANNOTATING = "annotating"
    DONE = "done"
    FAILED = "failed"


# ── Records ──────────────────────────────────────────────────────────


class SynthesizedRecord(BaseModel):
    """A record built from a case type's field plan."""

    case_type: str
    collection: str
    fields: dict[str, Any] = Field(default_factory=dict)
    record_id: Optional[str] = None


class Annotation(BaseModel):
    """A follow-up note appended to a persisted record."""

    kind: NoteKind
    text: str
    author_id: str


class Attachment(BaseModel):
    """A file attached to a persisted record."""

    file_name: str
    mime_type: str = "text/plain"
    content: str | bytes


class AnnotationReport(BaseModel):
    """Outcome of the best-effort annotation step for one record."""

    record_id: str
    notes: list[Annotation] = Field(default_factory=list)
    failed_notes: int = 0
    attachment: Optional[Attachment] = None
    attachment_error: str = ""

    @property
    def attachment_written(self) -> bool:
        return self.attachment is not None


# ── Results ──────────────────────────────────────────────────────────


class CaseError(BaseModel):
    """Error returned by the orchestrator instead of raising."""

    code: str
    message: str
    stage: SynthesisStage = SynthesisStage.VALIDATING


class UnitFailure(BaseModel):
    """One failed unit of a batch."""

    index: int
    error: CaseError


class CaseCreationResult(BaseModel):
    """Return value of ``SynthesisOrchestrator.create_case``.

    ``error`` is set only when the whole call failed. A batch that lost
    some units has ``error=None`` and fewer ``record_ids`` than
    ``requested``; the lost units are listed in ``failures``.
    """

    case_type: str
    requested: int = 1
    record_ids: list[str] = Field(default_factory=list)
    error: Optional[CaseError] = None
    failures: list[UnitFailure] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    run_id: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and len(self.record_ids) == self.requested

    @property
    def is_partial(self) -> bool:
        return self.error is None and len(self.record_ids) < self.requested

    @property
    def record_id(self) -> Optional[str]:
        """The single created id, for non-batch calls."""
        return self.record_ids[0] if len(self.record_ids) == 1 else None


# ── Run analytics ────────────────────────────────────────────────────


class StageMetrics(BaseModel):
    """Timing for one orchestrator stage."""

    stage: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: float = 0.0
    success_count: int = 0
    failure_count: int = 0


class RunAnalytics(BaseModel):
    """Per-call analytics collected by the run tracker."""

    run_id: str
    case_type: str = ""
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: Optional[datetime] = None
    status: str = "running"
    stages: list[StageMetrics] = Field(default_factory=list)
    total_duration_ms: float = 0.0

    def finalize(self, status: str = "completed") -> None:
        self.ended_at = datetime.now(timezone.utc)
        self.total_duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000
        if self.status == "running":
            self.status = status
