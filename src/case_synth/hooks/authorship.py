"""Scoped note authorship.

Notes are written "as" the requester or the agent. ``acting_as`` switches
the active author for the duration of a block and always restores the
previous identity, including when the block raises.

Usage::

    set_caller_identity("system")
    with acting_as("62826bf0..."):
        store.append_note(..., author_id=current_author())
    assert current_author() == "system"
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator

import structlog

_caller_identity: ContextVar[str] = ContextVar("case_synth_caller_identity", default="system")
_acting_author: ContextVar[str | None] = ContextVar("case_synth_acting_author", default=None)


def set_caller_identity(identity: str) -> None:
    """Set the identity used when no author scope is active."""
    _caller_identity.set(identity)


def current_author() -> str:
    """The author notes are currently attributed to."""
    return _acting_author.get() or _caller_identity.get()


@contextmanager
def acting_as(author_id: str) -> Generator[str, None, None]:
    """Attribute everything inside the block to ``author_id``."""
    token = _acting_author.set(author_id)
    structlog.contextvars.bind_contextvars(author_id=author_id)
    try:
        yield author_id
    finally:
        _acting_author.reset(token)
        previous = _acting_author.get()
        if previous is None:
            structlog.contextvars.unbind_contextvars("author_id")
        else:
            structlog.contextvars.bind_contextvars(author_id=previous)
