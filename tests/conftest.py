"""Shared fixtures for case-synth tests."""

from __future__ import annotations

import random
from typing import Callable

import pytest

from case_synth.case_types.registry import CaseTypeRegistry, build_registry
from case_synth.content.generator import ContentGenerator
from case_synth.core.config import (
    AppSettings,
    ContentConfig,
    LLMConfig,
    PersistenceConfig,
    SynthesisConfig,
)
from case_synth.fields.generator import FieldValueGenerator, ResolutionContext
from case_synth.services.annotation_attacher import AnnotationAttacher
from case_synth.services.orchestrator import SynthesisOrchestrator
from case_synth.services.synthesizer import RecordSynthesizer
from tests.fakes.fake_record_store import FakeRecordStore
from tests.fakes.fake_text_generator import FakeTextGenerator
from tests.fakes.reference_data import REFS, fixed_clock


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    """Offline settings: memory store, template text, fixed seed."""
    return AppSettings(
        llm=LLMConfig(api_key="test-key", model="test-model"),
        content=ContentConfig(backend="template"),
        persistence=PersistenceConfig(backend="memory", store_path=tmp_path / "records"),
        synthesis=SynthesisConfig(seed=7),
    )


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator(default_content='"Generated text."')


@pytest.fixture
def content(text_generator: FakeTextGenerator) -> ContentGenerator:
    return ContentGenerator(text_generator, fallback_text="Content unavailable.")


@pytest.fixture
def context(store: FakeRecordStore, content: ContentGenerator) -> ResolutionContext:
    """Resolution context over the fake store with a fixed clock."""
    return ResolutionContext(
        store=store,
        content=content,
        refs=dict(REFS),
        rng=random.Random(1234),
        clock=fixed_clock,
    )


@pytest.fixture
def field_generator() -> FieldValueGenerator:
    return FieldValueGenerator()


@pytest.fixture
def registry() -> CaseTypeRegistry:
    return build_registry()


@pytest.fixture
def make_orchestrator() -> Callable[..., SynthesisOrchestrator]:
    """Factory wiring an orchestrator around a given store and content generator."""

    def _make(
        store: FakeRecordStore,
        content: ContentGenerator,
        registry: CaseTypeRegistry | None = None,
    ) -> SynthesisOrchestrator:
        synthesizer = RecordSynthesizer(
            store,
            content,
            refs=REFS,
            rng=random.Random(42),
            clock=fixed_clock,
        )
        return SynthesisOrchestrator(
            registry or build_registry(),
            synthesizer,
            AnnotationAttacher(store, content),
            default_requester=REFS["incident_end_user"],
            default_agent=REFS["agent_user"],
        )

    return _make


@pytest.fixture
def orchestrator(
    store: FakeRecordStore,
    content: ContentGenerator,
    make_orchestrator: Callable[..., SynthesisOrchestrator],
) -> SynthesisOrchestrator:
    return make_orchestrator(store, content)
