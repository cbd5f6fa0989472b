"""Synthesis orchestrator: the public entry point.

``create_case`` never raises. Every outcome, including validation errors
and unexpected failures, is reported through :class:`CaseCreationResult`.

Per call::

    validating ──► resolving ──► persisting ──► annotating ──► done
        │              │             │
        └──────────────┴─────────────┴──► failed

Validation covers the case type, the required short description and the
batch size, and finishes before the store or the text generator is touched.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Mapping
from zoneinfo import ZoneInfo

from case_synth.case_types.registry import CaseTypeRegistry, CaseTypeSchema, build_registry
from case_synth.content.factory import create_content_generator
from case_synth.content.protocols import ITextGenerator
from case_synth.exceptions import (
    BatchNotSupported,
    CaseSynthError,
    CaseValidationError,
    InvalidBatchSize,
    PersistenceFailure,
)
from case_synth.hooks.authorship import set_caller_identity
from case_synth.hooks.run_tracker import end_run, start_run, track_stage
from case_synth.models import CaseCreationResult, CaseError, SynthesisStage, UnitFailure
from case_synth.persistence.factory import create_record_store
from case_synth.persistence.protocols import IRecordStore
from case_synth.services.annotation_attacher import AnnotationAttacher, AnnotationContext
from case_synth.services.synthesizer import RecordSynthesizer

if TYPE_CHECKING:
    from case_synth.core.config import AppSettings

log = logging.getLogger(__name__)


class _UnitError(Exception):
    """Carries a unit failure and the stage it happened in."""

    def __init__(self, error: CaseError) -> None:
        super().__init__(error.message)
        self.error = error


class SynthesisOrchestrator:
    """Validates a request, then synthesizes and annotates one or many cases."""

    def __init__(
        self,
        registry: CaseTypeRegistry,
        synthesizer: RecordSynthesizer,
        attacher: AnnotationAttacher,
        *,
        default_requester: str = "",
        default_agent: str = "",
    ) -> None:
        self._registry = registry
        self._synthesizer = synthesizer
        self._attacher = attacher
        self._default_requester = default_requester
        self._default_agent = default_agent

    @property
    def registry(self) -> CaseTypeRegistry:
        return self._registry

    @property
    def store(self) -> IRecordStore:
        return self._synthesizer.store

    def create_case(
        self,
        case_type_id: str,
        short_description: str | None = None,
        num_cases: int = 1,
    ) -> CaseCreationResult:
        """Create ``num_cases`` cases of ``case_type_id``.

        Non-batchable types yield one id or an error. Batchable types yield the
        ids of the units that succeeded, in order; failed units are skipped and
        listed in ``failures``.
        """
        content = self._synthesizer.content
        content.drain_degraded()
        analytics = start_run(case_type=case_type_id or "")
        result = CaseCreationResult(
            case_type=case_type_id or "",
            requested=num_cases if isinstance(num_cases, int) else 0,
            run_id=analytics.run_id,
        )
        inputs = {"short_description": short_description}

        try:
            with track_stage(SynthesisStage.VALIDATING.value):
                schema = self._validate(case_type_id, inputs, num_cases)
        except CaseValidationError as e:
            log.error("Rejected %r request: %s", case_type_id, e)
            result.error = CaseError(code=e.code, message=str(e), stage=SynthesisStage.VALIDATING)
            end_run("failed")
            return result
        except Exception as e:
            log.exception("Unexpected error validating %r request", case_type_id)
            result.error = CaseError(
                code="UnexpectedError",
                message=f"{type(e).__name__}: {e}",
                stage=SynthesisStage.VALIDATING,
            )
            end_run("failed")
            return result

        if schema.allows_batch:
            self._run_batch(schema, inputs, num_cases, result)
        else:
            try:
                result.record_ids.append(self._run_unit(schema, inputs))
            except _UnitError as e:
                log.error("Failed to create case of type %s: %s", schema.id, e.error.message)
                result.error = e.error

        result.warnings = [str(event) for event in content.drain_degraded()]
        end_run("failed" if result.error else "completed")
        return result

    def _validate(
        self,
        case_type_id: str,
        inputs: Mapping[str, Any],
        num_cases: int,
    ) -> CaseTypeSchema:
        schema = self._registry.lookup(case_type_id)
        self._synthesizer.validate(schema, inputs)
        if not isinstance(num_cases, int) or isinstance(num_cases, bool) or num_cases < 1:
            raise InvalidBatchSize(num_cases)
        if num_cases > 1 and not schema.allows_batch:
            raise BatchNotSupported(schema.id, num_cases)
        return schema

    def _run_batch(
        self,
        schema: CaseTypeSchema,
        inputs: Mapping[str, Any],
        num_cases: int,
        result: CaseCreationResult,
    ) -> None:
        for index in range(num_cases):
            try:
                result.record_ids.append(self._run_unit(schema, inputs))
            except _UnitError as e:
                log.error("Failed to create %s number %d: %s", schema.id, index + 1, e.error.message)
                result.failures.append(UnitFailure(index=index, error=e.error))

        if result.failures:
            log.warning(
                "Batch of %s: %d/%d created", schema.id, len(result.record_ids), num_cases
            )

    def _run_unit(self, schema: CaseTypeSchema, inputs: Mapping[str, Any]) -> str:
        """Resolve, persist and annotate one case. Raises _UnitError only."""
        stage = SynthesisStage.RESOLVING
        try:
            with track_stage(stage.value):
                record = self._synthesizer.resolve(schema, inputs)

            stage = SynthesisStage.PERSISTING
            with track_stage(stage.value):
                record = self._synthesizer.persist(record)
                if not record.record_id:
                    raise PersistenceFailure(f"No identifier returned for {record.collection} record")

            stage = SynthesisStage.ANNOTATING
            with track_stage(stage.value):
                self._attacher.attach(
                    record.record_id,
                    schema.target_collection,
                    schema.annotation_plan,
                    self._annotation_context(schema, record.fields, inputs),
                    schema.attachment,
                )
        except CaseSynthError as e:
            raise _UnitError(CaseError(code=e.code, message=str(e), stage=stage)) from e
        except Exception as e:
            log.exception("Unexpected error while %s %s", stage.value, schema.id)
            raise _UnitError(
                CaseError(code="UnexpectedError", message=f"{type(e).__name__}: {e}", stage=stage)
            ) from e

        return record.record_id

    def _annotation_context(
        self,
        schema: CaseTypeSchema,
        fields: Mapping[str, Any],
        inputs: Mapping[str, Any],
    ) -> AnnotationContext:
        values = {k: v for k, v in inputs.items() if v is not None}
        values.update(fields)
        return AnnotationContext(
            values=values,
            requester_id=str(fields.get(schema.requester_field) or self._default_requester),
            agent_id=str(fields.get(schema.agent_field) or self._default_agent),
        )


def build_orchestrator(
    settings: AppSettings,
    *,
    store: IRecordStore | None = None,
    text_generator: ITextGenerator | None = None,
    registry: CaseTypeRegistry | None = None,
) -> SynthesisOrchestrator:
    """Wire an orchestrator from settings; any collaborator may be injected."""
    refs = settings.refs.as_mapping()
    set_caller_identity(settings.refs.caller_identity)

    store = store if store is not None else create_record_store(settings)
    content = create_content_generator(settings, text_generator)
    registry = registry or build_registry(
        settings.synthesis.batch_overrides,
        settings.synthesis.short_description_overrides,
    )

    synthesizer = RecordSynthesizer(
        store,
        content,
        refs=refs,
        rng=random.Random(settings.synthesis.seed),
        tz=ZoneInfo(settings.synthesis.timezone),
        date_format=settings.synthesis.date_format,
    )
    return SynthesisOrchestrator(
        registry,
        synthesizer,
        AnnotationAttacher(store, content),
        default_requester=settings.refs.incident_end_user,
        default_agent=settings.refs.agent_user,
    )
