"""Cross-cutting hooks: logging, run tracking, note authorship."""

from __future__ import annotations

from case_synth.hooks.authorship import acting_as, current_author, set_caller_identity
from case_synth.hooks.logging_config import setup_logging
from case_synth.hooks.run_tracker import end_run, get_current_run, start_run, track_stage

__all__ = [
    "acting_as",
    "current_author",
    "end_run",
    "get_current_run",
    "set_caller_identity",
    "setup_logging",
    "start_run",
    "track_stage",
]
