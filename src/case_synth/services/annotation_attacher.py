"""Annotation attacher: ordered follow-up notes plus one file per record.

Best effort and non-transactional. The record already exists, so a failed
note or attachment is logged and reported, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from case_synth.case_types.registry import AnnotationStep, AttachmentSpec
from case_synth.content.generator import ContentGenerator
from case_synth.fields.generator import render_template
from case_synth.hooks.authorship import acting_as, current_author
from case_synth.models import Annotation, AnnotationReport, Attachment
from case_synth.persistence.protocols import IRecordStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnotationContext:
    """Template values and the two identities notes are attributed to."""

    values: Mapping[str, Any]
    requester_id: str
    agent_id: str

    def author_for(self, step: AnnotationStep) -> str:
        return self.requester_id if step.author_role == "requester" else self.agent_id


class AnnotationAttacher:
    """Writes an annotation plan and an attachment to a persisted record."""

    def __init__(self, store: IRecordStore, content: ContentGenerator) -> None:
        self._store = store
        self._content = content

    def attach(
        self,
        record_id: str,
        collection: str,
        annotation_plan: Sequence[AnnotationStep],
        context: AnnotationContext,
        attachment: AttachmentSpec | None = None,
    ) -> AnnotationReport:
        report = AnnotationReport(record_id=record_id)

        for position, step in enumerate(annotation_plan, start=1):
            note = self._write_note(record_id, collection, step, context, position)
            if note is None:
                report.failed_notes += 1
            else:
                report.notes.append(note)

        if attachment is not None:
            self._write_attachment(record_id, collection, attachment, context, report)

        log.info(
            "Annotated %s: %d note(s), %d failed, attachment=%s",
            record_id,
            len(report.notes),
            report.failed_notes,
            report.attachment_written,
        )
        return report

    def _write_note(
        self,
        record_id: str,
        collection: str,
        step: AnnotationStep,
        context: AnnotationContext,
        position: int,
    ) -> Annotation | None:
        author_id = context.author_for(step)
        try:
            with acting_as(author_id):
                text = self._content.generate(render_template(step.prompt_template, context.values))
                self._store.append_note(collection, record_id, step.kind, text, current_author())
        except Exception as e:
            log.warning(
                "Skipping note %d (%s) on %s: %s", position, step.kind, record_id, e, exc_info=True
            )
            return None
        return Annotation(kind=step.kind, text=text, author_id=author_id)

    def _write_attachment(
        self,
        record_id: str,
        collection: str,
        spec: AttachmentSpec,
        context: AnnotationContext,
        report: AnnotationReport,
    ) -> None:
        try:
            content = self._content.generate(render_template(spec.prompt_template, context.values))
            self._store.attach(collection, record_id, spec.file_name, spec.mime_type, content)
        except Exception as e:
            log.warning("Skipping attachment %s on %s: %s", spec.file_name, record_id, e, exc_info=True)
            report.attachment_error = str(e)
            return
        report.attachment = Attachment(file_name=spec.file_name, mime_type=spec.mime_type, content=content)
