"""In-memory record store: dict-backed, ideal for tests and dry runs."""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from case_synth.exceptions import AttachmentFailure, PersistenceFailure, RecordNotFound
from case_synth.models import Annotation, Attachment, NoteKind

log = logging.getLogger(__name__)


class MemoryRecordStore:
    """Stores records in nested dicts: nothing touches disk."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._notes: dict[str, list[Annotation]] = {}
        self._attachments: dict[str, list[Attachment]] = {}

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        if not collection:
            raise PersistenceFailure("Collection name must not be empty")
        record_id = uuid.uuid4().hex
        record = dict(fields)
        record["sys_id"] = record_id
        record.setdefault("sys_created_on", datetime.now(timezone.utc).isoformat())
        self._collections.setdefault(collection, {})[record_id] = record
        log.debug("Inserted %s into %s", record_id, collection)
        return record_id

    def get(self, collection: str, record_id: str) -> dict[str, Any]:
        try:
            return copy.deepcopy(self._collections[collection][record_id])
        except KeyError:
            raise RecordNotFound(f"Not found in {collection}: {record_id}") from None

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        record = self._record(collection, record_id)
        record.update(fields)

    def query(self, collection: str, filter: Mapping[str, Any] | None = None) -> list[str]:
        records = self._collections.get(collection, {})
        criteria = dict(filter or {})
        return [
            record_id
            for record_id, record in records.items()
            if all(record.get(k) == v for k, v in criteria.items())
        ]

    def append_note(
        self,
        collection: str,
        record_id: str,
        kind: NoteKind,
        text: str,
        author_id: str,
    ) -> None:
        self._record(collection, record_id)
        self._notes.setdefault(record_id, []).append(
            Annotation(kind=kind, text=text, author_id=author_id)
        )

    def attach(
        self,
        collection: str,
        record_id: str,
        file_name: str,
        mime_type: str,
        content: str | bytes,
    ) -> None:
        if collection not in self._collections or record_id not in self._collections[collection]:
            raise AttachmentFailure(f"Cannot attach {file_name!r}: no record {record_id} in {collection}")
        self._attachments.setdefault(record_id, []).append(
            Attachment(file_name=file_name, mime_type=mime_type, content=content)
        )

    # ── Inspection helpers (not part of the protocol) ────────────────

    def notes(self, record_id: str) -> list[Annotation]:
        return list(self._notes.get(record_id, []))

    def attachments(self, record_id: str) -> list[Attachment]:
        return list(self._attachments.get(record_id, []))

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    def _record(self, collection: str, record_id: str) -> dict[str, Any]:
        try:
            return self._collections[collection][record_id]
        except KeyError:
            raise PersistenceFailure(
                f"Failed to update {collection}", diagnostic=f"no record {record_id}"
            ) from None
