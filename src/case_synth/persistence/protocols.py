"""Record store protocol: the contract every backend implements.

The store is the external collaborator the engine writes synthesized
records into. Backends raise :class:`~case_synth.exceptions.PersistenceFailure`,
:class:`~case_synth.exceptions.RecordNotFound` and
:class:`~case_synth.exceptions.AttachmentFailure`; the engine decides which
of those are fatal.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from case_synth.models import NoteKind


@runtime_checkable
class IRecordStore(Protocol):
    """Protocol for record stores (file, memory, a platform table API, ...)."""

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        """Insert a record and return its id. Raises PersistenceFailure."""
        ...

    def get(self, collection: str, record_id: str) -> dict[str, Any]:
        """Return a copy of a record's fields. Raises RecordNotFound."""
        ...

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into an existing record. Raises PersistenceFailure."""
        ...

    def query(self, collection: str, filter: Mapping[str, Any] | None = None) -> list[str]:
        """Ids of records whose fields equal every ``filter`` item, in insertion order."""
        ...

    def append_note(
        self,
        collection: str,
        record_id: str,
        kind: NoteKind,
        text: str,
        author_id: str,
    ) -> None:
        """Append a journal note to a record. Raises PersistenceFailure."""
        ...

    def attach(
        self,
        collection: str,
        record_id: str,
        file_name: str,
        mime_type: str,
        content: str | bytes,
    ) -> None:
        """Attach a file to a record. Raises AttachmentFailure."""
        ...
