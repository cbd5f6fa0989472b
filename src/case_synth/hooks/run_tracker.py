"""Per-call analytics tracker using ContextVars.

One run per ``create_case`` call; each orchestrator stage is a
``track_stage`` block. ``run_id`` and ``stage`` are bound into the structlog
context so every log line of the call carries them.

Usage::

    analytics = start_run(case_type="incident")
    with track_stage("resolving") as stage:
        stage.success_count = 1
    analytics = end_run()
    print(analytics.total_duration_ms)
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Generator

import structlog

from case_synth.models import RunAnalytics, StageMetrics

log = logging.getLogger(__name__)

_current_run: ContextVar[RunAnalytics | None] = ContextVar("case_synth_current_run", default=None)


def get_current_run() -> RunAnalytics | None:
    """Get the active RunAnalytics, or None if no run is active."""
    return _current_run.get()


def start_run(case_type: str = "", run_id: str | None = None) -> RunAnalytics:
    """Create and activate a new RunAnalytics for the current context."""
    analytics = RunAnalytics(
        run_id=run_id or uuid.uuid4().hex[:12],
        case_type=case_type,
        started_at=datetime.now(timezone.utc),
        status="running",
    )
    _current_run.set(analytics)
    structlog.contextvars.bind_contextvars(run_id=analytics.run_id, case_type=case_type)
    return analytics


def end_run(status: str = "completed") -> RunAnalytics | None:
    """Finalize the current run and return its analytics. Returns None if no run is active."""
    analytics = _current_run.get()
    if analytics is None:
        return None

    analytics.finalize(status)
    _current_run.set(None)
    log.info(
        "Run %s (%s) %s in %.1fms over %d stage(s)",
        analytics.run_id,
        analytics.case_type or "-",
        analytics.status,
        analytics.total_duration_ms,
        len(analytics.stages),
    )
    structlog.contextvars.unbind_contextvars("run_id", "case_type")
    return analytics


@contextmanager
def track_stage(name: str) -> Generator[StageMetrics, None, None]:
    """Record a StageMetrics entry on the current run.

    An exception escaping the block counts as a stage failure and is
    re-raised. Nothing is recorded if no run is active.
    """
    analytics = _current_run.get()

    stage = StageMetrics(stage=name, started_at=datetime.now(timezone.utc))
    structlog.contextvars.bind_contextvars(stage=name)

    try:
        yield stage
    except Exception:
        stage.failure_count += 1
        raise
    finally:
        stage.ended_at = datetime.now(timezone.utc)
        if stage.started_at:
            stage.duration_ms = (stage.ended_at - stage.started_at).total_seconds() * 1000

        if analytics is not None:
            analytics.stages.append(stage)

        structlog.contextvars.unbind_contextvars("stage")
