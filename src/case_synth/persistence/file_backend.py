"""File-based record store: JSON documents on the local filesystem.

Layout under ``base_path``::

    incident.json                 {record_id: fields, ...}
    _journal.json                 [note, ...]
    _attachments.json             [attachment metadata, ...]
    attachments/<collection>/<record_id>/<file_name>
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from case_synth.exceptions import AttachmentFailure, PersistenceFailure, RecordNotFound
from case_synth.models import NoteKind

log = logging.getLogger(__name__)

_JOURNAL = "_journal"
_ATTACHMENTS = "_attachments"


class FileRecordStore:
    """Stores each collection as one JSON file in a local directory."""

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        safe = name.replace("/", "_").replace("\\", "_")
        return self._base / f"{safe}.json"

    def _read(self, name: str, empty: Any) -> Any:
        path = self._path(name)
        if not path.is_file():
            return empty
        return json.loads(path.read_text(encoding="utf-8"))

    def _write(self, name: str, data: Any) -> None:
        path = self._path(name)
        path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        log.debug(f"Saved {name} to {path}")

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        if not collection or collection.startswith("_"):
            raise PersistenceFailure(f"Invalid collection name: {collection!r}")
        records = self._read(collection, {})
        record_id = uuid.uuid4().hex
        record = dict(fields)
        record["sys_id"] = record_id
        record.setdefault("sys_created_on", datetime.now(timezone.utc).isoformat())
        records[record_id] = record
        try:
            self._write(collection, records)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"Failed to insert record into {collection}", diagnostic=str(e)) from e
        return record_id

    def get(self, collection: str, record_id: str) -> dict[str, Any]:
        records = self._read(collection, {})
        if record_id not in records:
            raise RecordNotFound(f"Not found in {collection}: {record_id} (path: {self._path(collection)})")
        return records[record_id]

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        records = self._read(collection, {})
        if record_id not in records:
            raise PersistenceFailure(f"Failed to update {collection}", diagnostic=f"no record {record_id}")
        records[record_id].update(fields)
        try:
            self._write(collection, records)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"Failed to update {collection}", diagnostic=str(e)) from e

    def query(self, collection: str, filter: Mapping[str, Any] | None = None) -> list[str]:
        records = self._read(collection, {})
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
        if record_id not in self._read(collection, {}):
            raise PersistenceFailure(f"Failed to add note to {collection}", diagnostic=f"no record {record_id}")
        journal = self._read(_JOURNAL, [])
        journal.append(
            {
                "collection": collection,
                "record_id": record_id,
                "kind": kind,
                "text": text,
                "author_id": author_id,
                "created_on": datetime.now(timezone.utc).isoformat(),
            }
        )
        try:
            self._write(_JOURNAL, journal)
        except OSError as e:
            raise PersistenceFailure(f"Failed to add note to {collection}", diagnostic=str(e)) from e

    def attach(
        self,
        collection: str,
        record_id: str,
        file_name: str,
        mime_type: str,
        content: str | bytes,
    ) -> None:
        if record_id not in self._read(collection, {}):
            raise AttachmentFailure(f"Cannot attach {file_name!r}: no record {record_id} in {collection}")
        target = self._base / "attachments" / collection / record_id / Path(file_name).name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
            index = self._read(_ATTACHMENTS, [])
            index.append(
                {
                    "collection": collection,
                    "record_id": record_id,
                    "file_name": file_name,
                    "mime_type": mime_type,
                    "path": str(target.relative_to(self._base)),
                }
            )
            self._write(_ATTACHMENTS, index)
        except OSError as e:
            raise AttachmentFailure(f"Failed to write attachment {file_name!r}: {e}") from e

    # ── Inspection helpers (not part of the protocol) ────────────────

    def notes(self, record_id: str) -> list[dict[str, Any]]:
        return [n for n in self._read(_JOURNAL, []) if n["record_id"] == record_id]

    def attachments(self, record_id: str) -> list[dict[str, Any]]:
        return [a for a in self._read(_ATTACHMENTS, []) if a["record_id"] == record_id]
