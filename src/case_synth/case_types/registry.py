"""Convention-based case type registry with auto-discovery.

Each module under ``case_synth/case_types/`` may expose a module-level
``CASE_TYPES`` list of :class:`CaseTypeSchema`. :meth:`CaseTypeRegistry.auto_discover`
imports every such module and registers its schemas.

Usage::

    from case_synth.case_types.registry import get_registry

    registry = get_registry()
    schema = registry.lookup("incident")
    print(schema.target_collection)     # "incident"
    print(list(schema.field_plan))      # ["short_description", "description", ...]
"""

from __future__ import annotations

import dataclasses
import importlib
import logging
import pkgutil
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal, Mapping

from case_synth.exceptions import UnknownCaseType
from case_synth.models import NoteKind

log = logging.getLogger(__name__)

AuthorRole = Literal["requester", "agent"]


@dataclass(frozen=True)
class AnnotationStep:
    """One entry of an annotation plan."""

    kind: NoteKind
    author_role: AuthorRole
    prompt_template: str


@dataclass(frozen=True)
class AttachmentSpec:
    """The single file attached to every record of a case type."""

    file_name: str
    prompt_template: str
    mime_type: str = "text/plain"


@dataclass(frozen=True)
class CaseTypeSchema:
    """Everything needed to synthesize one kind of case.

    ``field_plan`` is resolved in declared order and is read-only once the
    schema is built, so later specs can safely reference earlier fields.
    """

    id: str
    target_collection: str
    field_plan: Mapping[str, Any]
    display_name: str = ""
    requires_short_description: bool = False
    allows_batch: bool = False
    annotation_plan: tuple[AnnotationStep, ...] = ()
    attachment: AttachmentSpec | None = None
    requester_field: str = "opened_by"
    agent_field: str = "assigned_to"

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_plan", MappingProxyType(dict(self.field_plan)))
        object.__setattr__(self, "annotation_plan", tuple(self.annotation_plan))
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id.replace("_", " ").title())


class CaseTypeRegistry:
    """Registry of case type schemas.

    Schemas are registered either manually via :meth:`register` or
    automatically via :meth:`auto_discover`.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, CaseTypeSchema] = {}

    def register(self, schema: CaseTypeSchema) -> None:
        """Register a schema; an existing id is overwritten."""
        if schema.id in self._schemas:
            log.warning("Case type %r already registered, overwriting", schema.id)
        self._schemas[schema.id] = schema
        log.debug("Registered case type: %s", schema.id)

    def lookup(self, case_type_id: str) -> CaseTypeSchema:
        """Get a schema by id.

        Raises:
            UnknownCaseType: If the id is empty or not registered.
        """
        if not case_type_id or case_type_id not in self._schemas:
            raise UnknownCaseType(case_type_id, list(self._schemas))
        return self._schemas[case_type_id]

    def has(self, case_type_id: str) -> bool:
        return case_type_id in self._schemas

    def list_case_types(self) -> list[CaseTypeSchema]:
        """Return all registered schemas, sorted by id."""
        return sorted(self._schemas.values(), key=lambda s: s.id)

    def apply_overrides(
        self,
        *,
        batch: Mapping[str, bool] | None = None,
        short_description: Mapping[str, bool] | None = None,
    ) -> None:
        """Replace per-type ``allows_batch`` / ``requires_short_description`` flags.

        Unknown ids are skipped with a warning.
        """
        for flag, overrides in (
            ("allows_batch", batch or {}),
            ("requires_short_description", short_description or {}),
        ):
            for case_type_id, value in overrides.items():
                schema = self._schemas.get(case_type_id)
                if schema is None:
                    log.warning("Cannot override %s for unknown case type %r", flag, case_type_id)
                    continue
                self._schemas[case_type_id] = dataclasses.replace(schema, **{flag: value})
                log.info("Case type %s: %s=%s", case_type_id, flag, value)

    def auto_discover(self) -> None:
        """Scan ``case_synth.case_types`` modules for ``CASE_TYPES`` lists."""
        import case_synth.case_types as case_types_pkg

        for _importer, modname, ispkg in pkgutil.iter_modules(
            case_types_pkg.__path__, prefix="case_synth.case_types."
        ):
            if ispkg or modname.endswith(".registry"):
                continue

            mod = importlib.import_module(modname)
            schemas = getattr(mod, "CASE_TYPES", None)
            if schemas is None:
                log.debug("No CASE_TYPES in %s, skipping", modname)
                continue

            for schema in schemas:
                if not isinstance(schema, CaseTypeSchema):
                    log.warning("%s.CASE_TYPES holds %r, skipping", modname, schema)
                    continue
                self.register(schema)

        log.info(
            "Auto-discovered %d case type(s): %s",
            len(self._schemas),
            ", ".join(sorted(self._schemas)),
        )


# ── Module-level singleton ──────────────────────────────────────────

_global_registry: CaseTypeRegistry | None = None


def get_registry() -> CaseTypeRegistry:
    """Return the global registry, auto-discovering on first call."""
    global _global_registry
    if _global_registry is None:
        _global_registry = CaseTypeRegistry()
        _global_registry.auto_discover()
    return _global_registry


def build_registry(
    batch_overrides: Mapping[str, bool] | None = None,
    short_description_overrides: Mapping[str, bool] | None = None,
) -> CaseTypeRegistry:
    """Fresh auto-discovered registry with configuration overrides applied."""
    registry = CaseTypeRegistry()
    registry.auto_discover()
    registry.apply_overrides(batch=batch_overrides, short_description=short_description_overrides)
    return registry


__all__ = [
    "AnnotationStep",
    "AttachmentSpec",
    "CaseTypeRegistry",
    "CaseTypeSchema",
    "build_registry",
    "get_registry",
]

