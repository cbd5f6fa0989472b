"""Field value resolution.

:class:`FieldValueGenerator` turns one :mod:`~case_synth.fields.specs` spec
into a concrete value. Everything a spec may need (earlier fields, caller
inputs, reference ids, the store, the content generator, randomness and the
clock) is carried by :class:`ResolutionContext`, so the generator itself
holds no per-call state.

Usage::

    ctx = ResolutionContext(store=store, content=content, rng=random.Random(7))
    gen = FieldValueGenerator()
    ctx.resolved["total"] = gen.resolve(RandomNumericRange(100, 500, 2), ctx)
    paid = gen.resolve(RandomNumericRange(0, FieldRef("total"), 2), ctx)
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING, Any, Callable, Mapping

from case_synth.exceptions import EmptyChoiceSet, FieldResolutionError, RecordNotFound
from case_synth.fields.specs import (
    NO_MATCH,
    CallerInput,
    ComputedDate,
    ConfigValue,
    Constant,
    FieldRef,
    GeneratedText,
    NextSequenceNumber,
    RandomChoice,
    RandomNumericRange,
    RandomPatternString,
    RelatedField,
    RelatedRecordLookup,
    Template,
)

if TYPE_CHECKING:
    from case_synth.content.generator import ContentGenerator
    from case_synth.persistence.protocols import IRecordStore

log = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResolutionContext:
    """Per-record state shared by every field resolution of one plan."""

    store: IRecordStore | None = None
    content: ContentGenerator | None = None
    inputs: Mapping[str, Any] = field(default_factory=dict)
    refs: Mapping[str, str] = field(default_factory=dict)
    resolved: dict[str, Any] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], datetime] = _utcnow
    tz: tzinfo = timezone.utc
    date_format: str = DEFAULT_DATE_FORMAT

    def template_values(self) -> dict[str, Any]:
        """Caller inputs overlaid with resolved fields, for prompt/template formatting."""
        values = {k: v for k, v in self.inputs.items() if v is not None}
        values.update(self.resolved)
        return values


class _Blank(dict):
    """Format mapping that renders unknown placeholders as empty strings."""

    def __missing__(self, key: str) -> str:
        log.debug("Template placeholder {%s} has no value", key)
        return ""


def render_template(template: str, values: Mapping[str, Any]) -> str:
    """Format ``template``; unknown placeholders render as empty strings."""
    try:
        return template.format_map(_Blank(values))
    except (ValueError, IndexError, AttributeError) as e:
        raise FieldResolutionError(f"Bad template {template!r}: {e}") from e


class FieldValueGenerator:
    """Resolves field specs to values."""

    def __init__(self) -> None:
        self._handlers: dict[type, Callable[[Any, ResolutionContext], Any]] = {
            Constant: self._constant,
            RandomChoice: self._random_choice,
            RandomNumericRange: self._numeric_range,
            RandomPatternString: self._pattern_string,
            GeneratedText: self._generated_text,
            RelatedRecordLookup: self._lookup,
            ComputedDate: self._computed_date,
            CallerInput: self._caller_input,
            ConfigValue: self._config_value,
            Template: self._template,
            RelatedField: self._related_field,
            NextSequenceNumber: self._next_sequence,
            FieldRef: self._field_ref,
        }

    def resolve(self, spec: Any, context: ResolutionContext) -> Any:
        """Resolve ``spec`` against ``context``.

        Raises:
            EmptyChoiceSet: ``RandomChoice`` with no choices.
            FieldResolutionError: unknown spec, dangling ``FieldRef``,
                missing reference id or malformed template.
        """
        handler = self._handlers.get(type(spec))
        if handler is None:
            raise FieldResolutionError(f"Unsupported field spec: {spec!r}")
        return handler(spec, context)

    # ── Pure specs ───────────────────────────────────────────────────

    def _constant(self, spec: Constant, ctx: ResolutionContext) -> Any:
        return spec.value

    def _random_choice(self, spec: RandomChoice, ctx: ResolutionContext) -> Any:
        if not spec.choices:
            raise EmptyChoiceSet("RandomChoice has an empty choice set")
        return ctx.rng.choice(spec.choices)

    def _numeric_range(self, spec: RandomNumericRange, ctx: ResolutionContext) -> float | int:
        if spec.precision < 0:
            raise FieldResolutionError(f"precision must be >= 0, got {spec.precision}")
        low = self._bound(spec.minimum, ctx)
        high = self._bound(spec.maximum, ctx)

        # Draw an integer count of the smallest unit so the result can never
        # round up to ``high``.
        scale = 10 ** spec.precision
        lo_units = math.ceil(round(low * scale, 6))
        hi_units = math.ceil(round(high * scale, 6))
        if hi_units <= lo_units:
            units = lo_units
        else:
            units = ctx.rng.randrange(lo_units, hi_units)

        if spec.precision == 0:
            return units
        return round(units / scale, spec.precision)

    def _bound(self, bound: float | FieldRef, ctx: ResolutionContext) -> float:
        value = self._field_ref(bound, ctx) if isinstance(bound, FieldRef) else bound
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise FieldResolutionError(f"Range bound {bound!r} is not numeric: {value!r}") from e

    def _pattern_string(self, spec: RandomPatternString, ctx: ResolutionContext) -> str:
        if spec.digit_count < 0:
            raise FieldResolutionError(f"digit_count must be >= 0, got {spec.digit_count}")
        digits = "".join(str(ctx.rng.randrange(10)) for _ in range(spec.digit_count))
        return f"{spec.prefix}{digits}"

    def _computed_date(self, spec: ComputedDate, ctx: ResolutionContext) -> str:
        when = ctx.clock().astimezone(ctx.tz) + timedelta(days=spec.offset_days)
        return when.strftime(ctx.date_format)

    def _caller_input(self, spec: CallerInput, ctx: ResolutionContext) -> Any:
        value = ctx.inputs.get(spec.name)
        return spec.default if value is None else value

    def _config_value(self, spec: ConfigValue, ctx: ResolutionContext) -> str:
        if spec.key not in ctx.refs:
            raise FieldResolutionError(f"No reference id configured for {spec.key!r}")
        return ctx.refs[spec.key]

    def _template(self, spec: Template, ctx: ResolutionContext) -> str:
        return render_template(spec.template, ctx.template_values())

    def _field_ref(self, spec: FieldRef, ctx: ResolutionContext) -> Any:
        if spec.name not in ctx.resolved:
            raise FieldResolutionError(
                f"Field {spec.name!r} is referenced before it is resolved"
            )
        return ctx.resolved[spec.name]

    # ── Collaborator-backed specs ────────────────────────────────────

    def _generated_text(self, spec: GeneratedText, ctx: ResolutionContext) -> str:
        if ctx.content is None:
            raise FieldResolutionError("GeneratedText needs a content generator")
        prompt = render_template(spec.prompt_template, ctx.template_values())
        return ctx.content.generate(prompt)

    def _lookup(self, spec: RelatedRecordLookup, ctx: ResolutionContext) -> Any:
        store = self._require_store(ctx, spec)
        criteria = {
            key: self._field_ref(value, ctx) if isinstance(value, FieldRef) else value
            for key, value in (spec.filter or {}).items()
        }
        unmatched = [
            key
            for key, value in (spec.filter or {}).items()
            if isinstance(value, FieldRef) and criteria[key] in (None, NO_MATCH)
        ]
        if unmatched:
            # An unmatched upstream lookup is not an id to filter on
            log.info("Skipping %s lookup: no value for %s", spec.collection, ", ".join(unmatched))
            ids = []
        else:
            ids = store.query(spec.collection, criteria or None)
        if ids:
            return ctx.rng.choice(ids)

        log.info("No %s records match %s", spec.collection, criteria or "{}")
        if spec.fallback is None:
            return NO_MATCH
        return self.resolve(spec.fallback, ctx)

    def _related_field(self, spec: RelatedField, ctx: ResolutionContext) -> Any:
        source_id = ctx.resolved.get(spec.source_field)
        if not source_id:
            return spec.default
        store = self._require_store(ctx, spec)
        try:
            record = store.get(spec.collection, source_id)
        except RecordNotFound:
            log.warning("Related %s record %s not found", spec.collection, source_id)
            return spec.default
        value = record.get(spec.field)
        return spec.default if value in (None, "") else value

    def _next_sequence(self, spec: NextSequenceNumber, ctx: ResolutionContext) -> str:
        store = self._require_store(ctx, spec)
        highest = 0
        for record_id in store.query(spec.collection):
            number = str(store.get(spec.collection, record_id).get(spec.field) or "")
            suffix = number[len(spec.prefix):]
            if number.startswith(spec.prefix) and suffix.isdigit():
                highest = max(highest, int(suffix))
        return f"{spec.prefix}{highest + 1:0{spec.width}d}"

    @staticmethod
    def _require_store(ctx: ResolutionContext, spec: Any) -> IRecordStore:
        if ctx.store is None:
            raise FieldResolutionError(f"{type(spec).__name__} needs a record store")
        return ctx.store
