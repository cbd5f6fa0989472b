"""Pluggable record stores for synthesized cases."""

from __future__ import annotations

from case_synth.persistence.factory import create_record_store
from case_synth.persistence.file_backend import FileRecordStore
from case_synth.persistence.memory_backend import MemoryRecordStore
from case_synth.persistence.protocols import IRecordStore

__all__ = ["IRecordStore", "FileRecordStore", "MemoryRecordStore", "create_record_store"]
