"""Failures raised by LevelFileSink.fire().

All of them derive from SinkError so an embedding pipeline can catch one
type. The original cause, when there is one, is chained as __cause__.
"""

from __future__ import annotations

from typing import Any


class SinkError(Exception):
    """Base class: a single event could not be written."""

    def __init__(self, message: str, *, level: Any = None, path: Any = None) -> None:
        super().__init__(message)
        self.level = level
        self.path = path


class UnroutedLevel(SinkError):
    """The sink was fired for a level it has no destination for."""


class RenderError(SinkError):
    """The event's renderer failed to produce text."""


class OpenError(SinkError):
    """The destination file could not be opened or created."""


class WriteError(SinkError):
    """The destination opened but the payload was not fully written."""
