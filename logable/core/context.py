"""
Ambient actor context and clock used to compute audit values.

The current actor lives in a ContextVar, so it is isolated per thread and per
asyncio task. Request middleware (or a CLI entry point) sets it once and every
record stamped in that scope picks it up.
"""

import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from logable.core.config import settings

current_actor_var: ContextVar[Optional[Any]] = ContextVar("logable_current_actor", default=None)


def get_current_actor_id() -> Optional[Any]:
    """Get the identifier of the current actor, or None outside an actor scope."""
    return current_actor_var.get()


def set_current_actor(actor_id: Optional[Any]) -> Token:
    """Set the current actor. Returns a token for reset_current_actor()."""
    return current_actor_var.set(actor_id)


def reset_current_actor(token: Token) -> None:
    """Restore the actor that was current before set_current_actor()."""
    current_actor_var.reset(token)


@contextmanager
def acting_as(actor_id: Optional[Any]) -> Iterator[Optional[Any]]:
    """Run the enclosed block with actor_id as the current actor."""
    token = set_current_actor(actor_id)
    try:
        yield actor_id
    finally:
        reset_current_actor(token)


class ContextActorProvider:
    """Actor provider backed by the ambient actor context."""

    def get_actor_id(self) -> Optional[Any]:
        return get_current_actor_id()


class SystemClock:
    """
    Wall-clock time source.

    Returns a timezone-aware UTC datetime, or integer UNIX seconds when the
    timestamp format is "unix".
    """

    def __init__(self, timestamp_format: Optional[str] = None):
        self.timestamp_format = timestamp_format or settings.audit_timestamp_format

    def now(self):
        if self.timestamp_format == "unix":
            return int(time.time())
        return datetime.now(timezone.utc)
