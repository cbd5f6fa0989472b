"""Record synthesizer: validate inputs, resolve the field plan, insert once."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Mapping

from case_synth.case_types.registry import CaseTypeSchema
from case_synth.content.generator import ContentGenerator
from case_synth.exceptions import MissingRequiredInput, PersistenceFailure
from case_synth.fields.generator import (
    DEFAULT_DATE_FORMAT,
    FieldValueGenerator,
    ResolutionContext,
)
from case_synth.models import SynthesizedRecord
from case_synth.persistence.protocols import IRecordStore

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordSynthesizer:
    """Builds one record per call from a :class:`CaseTypeSchema`.

    The three steps are exposed separately so the orchestrator can track
    them as stages; :meth:`synthesize` runs all of them.
    """

    def __init__(
        self,
        store: IRecordStore,
        content: ContentGenerator,
        *,
        refs: Mapping[str, str] | None = None,
        field_generator: FieldValueGenerator | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
        tz: tzinfo = timezone.utc,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        self._store = store
        self._content = content
        self._refs = dict(refs or {})
        self._fields = field_generator or FieldValueGenerator()
        self._rng = rng or random.Random()
        self._clock = clock
        self._tz = tz
        self._date_format = date_format

    @property
    def store(self) -> IRecordStore:
        return self._store

    @property
    def content(self) -> ContentGenerator:
        return self._content

    def synthesize(self, schema: CaseTypeSchema, inputs: Mapping[str, Any]) -> SynthesizedRecord:
        """Validate, resolve and persist one record.

        Raises:
            MissingRequiredInput: before any field is resolved.
            EmptyChoiceSet, FieldResolutionError: while resolving.
            PersistenceFailure: the insert failed or returned no id.
        """
        self.validate(schema, inputs)
        record = self.resolve(schema, inputs)
        return self.persist(record)

    def validate(self, schema: CaseTypeSchema, inputs: Mapping[str, Any]) -> None:
        if schema.requires_short_description:
            value = inputs.get("short_description")
            if not isinstance(value, str) or not value.strip():
                raise MissingRequiredInput(schema.id, "short_description")

    def resolve(self, schema: CaseTypeSchema, inputs: Mapping[str, Any]) -> SynthesizedRecord:
        """Resolve ``schema.field_plan`` in declared order."""
        ctx = ResolutionContext(
            store=self._store,
            content=self._content,
            inputs=inputs,
            refs=self._refs,
            rng=self._rng,
            clock=self._clock,
            tz=self._tz,
            date_format=self._date_format,
        )
        for name, spec in schema.field_plan.items():
            ctx.resolved[name] = self._fields.resolve(spec, ctx)

        log.debug("Resolved %d field(s) for %s", len(ctx.resolved), schema.id)
        return SynthesizedRecord(
            case_type=schema.id,
            collection=schema.target_collection,
            fields=ctx.resolved,
        )

    def persist(self, record: SynthesizedRecord) -> SynthesizedRecord:
        """Insert ``record`` and return it with ``record_id`` set."""
        try:
            record_id = self._store.insert(record.collection, record.fields)
        except PersistenceFailure:
            raise
        except Exception as e:
            raise PersistenceFailure(
                f"Failed to insert record into {record.collection}", diagnostic=str(e)
            ) from e

        if not record_id:
            raise PersistenceFailure(
                f"Failed to insert record into {record.collection}",
                diagnostic="store returned no identifier",
            )

        log.info("Created %s record %s", record.collection, record_id)
        return record.model_copy(update={"record_id": record_id})
