"""Field specs: declarative rules for producing one field value.

A case type's field plan is an ordered mapping of field name to one of the
specs below. Specs are frozen and carry no state; all randomness, clock and
store access happens in :class:`~case_synth.fields.generator.FieldValueGenerator`.

Only :class:`RelatedRecordLookup`, :class:`RelatedField` and
:class:`NextSequenceNumber` read from the record store. Each tolerates an
empty result:

- ``RelatedRecordLookup`` resolves ``fallback`` (if given) or returns
  :data:`NO_MATCH`.
- ``RelatedField`` returns ``default``.
- ``NextSequenceNumber`` starts at ``1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

#: Sentinel value for a lookup that found nothing and has no fallback.
NO_MATCH = ""


@dataclass(frozen=True)
class FieldRef:
    """Reference to a field resolved earlier in the same plan."""

    name: str


@dataclass(frozen=True)
class Constant:
    value: Any


@dataclass(frozen=True)
class RandomChoice:
    choices: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", tuple(self.choices))


@dataclass(frozen=True)
class RandomNumericRange:
    """Uniform value in ``[minimum, maximum)`` rounded to ``precision`` decimals.

    Either bound may be a :class:`FieldRef`, so a second amount can be
    constrained by the first (``RandomNumericRange(0, FieldRef("total"), 2)``).
    """

    minimum: Union[float, FieldRef]
    maximum: Union[float, FieldRef]
    precision: int = 2


@dataclass(frozen=True)
class RandomPatternString:
    """``prefix`` followed by exactly ``digit_count`` random digits. Not unique."""

    prefix: str
    digit_count: int


@dataclass(frozen=True)
class GeneratedText:
    """Text from the content generator; the template is formatted over resolved fields."""

    prompt_template: str


@dataclass(frozen=True)
class RelatedRecordLookup:
    """Id of a random record in ``collection`` matching ``filter``.

    Filter values may be :class:`FieldRef`. When nothing matches, ``fallback``
    (any other spec) is resolved instead, else :data:`NO_MATCH` is returned.
    """

    collection: str
    filter: Mapping[str, Any] | None = None
    fallback: Any = None


@dataclass(frozen=True)
class ComputedDate:
    """Now, in the configured time zone, shifted by ``offset_days``."""

    offset_days: float = 0


@dataclass(frozen=True)
class CallerInput:
    """A value supplied by the caller (e.g. ``short_description``)."""

    name: str
    default: Any = None


@dataclass(frozen=True)
class ConfigValue:
    """A value from the injected reference-id table."""

    key: str


@dataclass(frozen=True)
class Template:
    """``str.format`` over previously resolved fields and caller inputs."""

    template: str


@dataclass(frozen=True)
class RelatedField:
    """Read ``field`` from the ``collection`` record whose id is in ``source_field``."""

    source_field: str
    collection: str
    field: str
    default: Any = ""


@dataclass(frozen=True)
class NextSequenceNumber:
    """Next number after the highest existing ``prefix``-numbered record."""

    collection: str
    prefix: str
    width: int = 7
    field: str = "number"


FieldSpec = Union[
    Constant,
    RandomChoice,
    RandomNumericRange,
    RandomPatternString,
    GeneratedText,
    RelatedRecordLookup,
    ComputedDate,
    CallerInput,
    ConfigValue,
    Template,
    RelatedField,
    NextSequenceNumber,
]


__all__ = [
    "NO_MATCH",
    "FieldRef",
    "FieldSpec",
    "Constant",
    "RandomChoice",
    "RandomNumericRange",
    "RandomPatternString",
    "GeneratedText",
    "RelatedRecordLookup",
    "ComputedDate",
    "CallerInput",
    "ConfigValue",
    "Template",
    "RelatedField",
    "NextSequenceNumber",
]
