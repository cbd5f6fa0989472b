"""Record store factory: resolves a backend from config."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from case_synth.persistence.file_backend import FileRecordStore
from case_synth.persistence.memory_backend import MemoryRecordStore
from case_synth.persistence.protocols import IRecordStore

if TYPE_CHECKING:
    from case_synth.core.config import AppSettings

log = logging.getLogger(__name__)


def create_record_store(settings: AppSettings) -> IRecordStore:
    """Create the record store named by ``settings.persistence.backend``."""
    backend = settings.persistence.backend

    if backend == "memory":
        log.info("Using in-memory record store")
        return MemoryRecordStore()

    log.info("Using file record store at %s", settings.persistence.store_path)
    return FileRecordStore(settings.persistence.store_path)
