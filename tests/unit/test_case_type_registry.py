"""Tests for CaseTypeRegistry and the built-in case catalog."""

from __future__ import annotations

import pytest

from case_synth.case_types.registry import (
    CaseTypeRegistry,
    CaseTypeSchema,
    build_registry,
    get_registry,
)
from case_synth.exceptions import UnknownCaseType
from case_synth.fields.specs import Constant, FieldRef, RandomNumericRange

BUILT_IN = {
    "incident",
    "change_request",
    "csm_case",
    "hr_case",
    "healthcare_claim",
    "pre_authorization",
    "claim_dispute",
}


def _schema(case_type_id: str = "widget", **kwargs) -> CaseTypeSchema:
    return CaseTypeSchema(
        id=case_type_id,
        target_collection="u_widget",
        field_plan={"state": Constant(1)},
        **kwargs,
    )


class TestCaseTypeRegistry:
    def test_register_and_lookup(self) -> None:
        registry = CaseTypeRegistry()
        registry.register(_schema())
        assert registry.lookup("widget").target_collection == "u_widget"
        assert registry.has("widget")

    def test_unknown_id(self) -> None:
        registry = CaseTypeRegistry()
        registry.register(_schema())
        with pytest.raises(UnknownCaseType, match="Invalid case type") as exc_info:
            registry.lookup("gadget")
        assert exc_info.value.available == ["widget"]

    def test_empty_id(self) -> None:
        with pytest.raises(UnknownCaseType, match="must be provided"):
            CaseTypeRegistry().lookup("")

    def test_register_overwrites(self) -> None:
        registry = CaseTypeRegistry()
        registry.register(_schema(allows_batch=False))
        registry.register(_schema(allows_batch=True))
        assert registry.lookup("widget").allows_batch is True
        assert len(registry.list_case_types()) == 1

    def test_list_sorted(self) -> None:
        registry = CaseTypeRegistry()
        registry.register(_schema("zeta"))
        registry.register(_schema("alpha"))
        assert [s.id for s in registry.list_case_types()] == ["alpha", "zeta"]

    def test_apply_overrides(self) -> None:
        registry = CaseTypeRegistry()
        registry.register(_schema(allows_batch=False, requires_short_description=True))
        registry.apply_overrides(
            batch={"widget": True, "unknown": True},
            short_description={"widget": False},
        )
        schema = registry.lookup("widget")
        assert schema.allows_batch is True
        assert schema.requires_short_description is False
        assert not registry.has("unknown")


class TestCaseTypeSchema:
    def test_field_plan_is_read_only(self) -> None:
        schema = _schema()
        with pytest.raises(TypeError):
            schema.field_plan["extra"] = Constant(2)  # type: ignore[index]

    def test_field_plan_keeps_order(self) -> None:
        schema = CaseTypeSchema(
            id="ordered",
            target_collection="u_ordered",
            field_plan={
                "b": Constant(1),
                "a": RandomNumericRange(0, FieldRef("b")),
                "c": Constant(3),
            },
        )
        assert list(schema.field_plan) == ["b", "a", "c"]

    def test_display_name_default(self) -> None:
        assert _schema("claim_dispute").display_name == "Claim Dispute"


class TestBuiltInCatalog:
    def test_auto_discover_finds_built_ins(self, registry: CaseTypeRegistry) -> None:
        assert {s.id for s in registry.list_case_types()} == BUILT_IN

    def test_get_registry_is_singleton(self) -> None:
        assert get_registry() is get_registry()

    def test_build_registry_is_fresh(self) -> None:
        assert build_registry() is not build_registry()

    @pytest.mark.parametrize("case_type_id", ["incident", "change_request", "csm_case", "hr_case"])
    def test_service_types_need_short_description(
        self, registry: CaseTypeRegistry, case_type_id: str
    ) -> None:
        schema = registry.lookup(case_type_id)
        assert schema.requires_short_description is True
        assert schema.allows_batch is False

    @pytest.mark.parametrize("case_type_id", ["healthcare_claim", "pre_authorization", "claim_dispute"])
    def test_healthcare_types_are_batchable(self, registry: CaseTypeRegistry, case_type_id: str) -> None:
        schema = registry.lookup(case_type_id)
        assert schema.allows_batch is True
        assert schema.requires_short_description is False

    def test_every_type_has_notes_and_attachment(self, registry: CaseTypeRegistry) -> None:
        for schema in registry.list_case_types():
            assert schema.annotation_plan, schema.id
            assert schema.attachment is not None, schema.id

    def test_field_refs_point_backwards(self, registry: CaseTypeRegistry) -> None:
        for schema in registry.list_case_types():
            seen: set[str] = set()
            for name, spec in schema.field_plan.items():
                for bound in (getattr(spec, "minimum", None), getattr(spec, "maximum", None)):
                    if isinstance(bound, FieldRef):
                        assert bound.name in seen, f"{schema.id}.{name}"
                for value in (getattr(spec, "filter", None) or {}).values():
                    if isinstance(value, FieldRef):
                        assert value.name in seen, f"{schema.id}.{name}"
                seen.add(name)

    def test_overrides_from_build_registry(self) -> None:
        registry = build_registry(batch_overrides={"incident": True})
        assert registry.lookup("incident").allows_batch is True
        assert build_registry().lookup("incident").allows_batch is False
