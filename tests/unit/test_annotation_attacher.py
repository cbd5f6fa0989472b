"""Tests for AnnotationAttacher and scoped note authorship."""

from __future__ import annotations

import pytest

from case_synth.case_types.registry import AnnotationStep, AttachmentSpec
from case_synth.content.generator import ContentGenerator
from case_synth.hooks.authorship import acting_as, current_author, set_caller_identity
from case_synth.services.annotation_attacher import AnnotationAttacher, AnnotationContext
from tests.fakes.fake_record_store import FakeRecordStore
from tests.fakes.fake_text_generator import FailingTextGenerator, ScriptedTextGenerator

PLAN = (
    AnnotationStep("note_from_requester", "requester", "Requester asks about {short_description}."),
    AnnotationStep("note_from_agent", "agent", "Agent investigates {short_description}."),
    AnnotationStep("note_from_requester", "requester", "Requester confirms."),
    AnnotationStep("note_from_agent", "agent", "Agent resolves."),
)

ATTACHMENT = AttachmentSpec(file_name="error_log.txt", prompt_template="Log for {short_description}.")

CONTEXT = AnnotationContext(
    values={"short_description": "VPN drops"},
    requester_id="user-caller",
    agent_id="agent-1",
)


@pytest.fixture(autouse=True)
def _caller_identity() -> None:
    set_caller_identity("system")


@pytest.fixture
def record(store: FakeRecordStore) -> str:
    return store.seed("incident", {"short_description": "VPN drops"})


class TestAnnotationAttacher:
    def test_notes_in_plan_order(self, store: FakeRecordStore, content: ContentGenerator, record: str) -> None:
        report = AnnotationAttacher(store, content).attach(record, "incident", PLAN, CONTEXT, ATTACHMENT)
        assert [n["kind"] for n in store.notes] == [s.kind for s in PLAN]
        assert [n.kind for n in report.notes] == [s.kind for s in PLAN]
        assert report.failed_notes == 0
        assert report.attachment_written

    def test_authors_follow_roles(self, store: FakeRecordStore, content: ContentGenerator, record: str) -> None:
        AnnotationAttacher(store, content).attach(record, "incident", PLAN, CONTEXT)
        authors = [n["author_id"] for n in store.notes]
        assert authors == ["user-caller", "agent-1", "user-caller", "agent-1"]
        assert [n["active_author"] for n in store.notes] == authors
        assert current_author() == "system"

    def test_prompts_rendered_from_values(self, store: FakeRecordStore, record: str) -> None:
        prompts: list[str] = []

        class _Recording:
            def generate(self, prompt: str) -> str:
                prompts.append(prompt)
                return "ok"

        AnnotationAttacher(store, ContentGenerator(_Recording())).attach(
            record, "incident", PLAN[:1], CONTEXT, ATTACHMENT
        )
        assert prompts == ["Requester asks about VPN drops.", "Log for VPN drops."]

    def test_failed_note_skipped_and_author_restored(self, content: ContentGenerator) -> None:
        store = FakeRecordStore(fail_notes={2})
        record = store.seed("incident", {})
        report = AnnotationAttacher(store, content).attach(record, "incident", PLAN, CONTEXT, ATTACHMENT)
        assert report.failed_notes == 1
        assert len(report.notes) == 3
        assert [n["author_id"] for n in store.notes] == ["user-caller", "user-caller", "agent-1"]
        assert current_author() == "system"
        assert report.attachment_written

    def test_attachment_failure_reported(self, content: ContentGenerator) -> None:
        store = FakeRecordStore(fail_attach=True)
        record = store.seed("incident", {})
        report = AnnotationAttacher(store, content).attach(record, "incident", PLAN, CONTEXT, ATTACHMENT)
        assert not report.attachment_written
        assert "error_log.txt" in report.attachment_error
        assert len(store.notes) == 4

    def test_generator_outage_uses_fallback(self, store: FakeRecordStore, record: str) -> None:
        content = ContentGenerator(FailingTextGenerator(), fallback_text="Content unavailable.")
        report = AnnotationAttacher(store, content).attach(record, "incident", PLAN, CONTEXT, ATTACHMENT)
        assert [n["text"] for n in store.notes] == ["Content unavailable."] * 4
        assert store.attachments[0]["content"] == "Content unavailable."
        assert report.failed_notes == 0
        assert len(content.drain_degraded()) == 5

    def test_note_text_is_normalized(self, store: FakeRecordStore, record: str) -> None:
        content = ContentGenerator(ScriptedTextGenerator(['"First."', "“Second.”"]))
        AnnotationAttacher(store, content).attach(record, "incident", PLAN[:2], CONTEXT)
        assert [n["text"] for n in store.notes] == ["First.", "Second."]

    def test_no_attachment_spec(self, store: FakeRecordStore, content: ContentGenerator, record: str) -> None:
        report = AnnotationAttacher(store, content).attach(record, "incident", (), CONTEXT)
        assert report.notes == []
        assert store.attachments == []
        assert report.attachment_error == ""


class TestActingAs:
    def test_scope_and_restore(self) -> None:
        assert current_author() == "system"
        with acting_as("alice"):
            assert current_author() == "alice"
            with acting_as("bob"):
                assert current_author() == "bob"
            assert current_author() == "alice"
        assert current_author() == "system"

    def test_restored_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with acting_as("alice"):
                raise RuntimeError("write failed")
        assert current_author() == "system"

    def test_caller_identity(self) -> None:
        set_caller_identity("integration-bot")
        assert current_author() == "integration-bot"
        set_caller_identity("system")
