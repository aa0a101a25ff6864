"""Events the sink consumes.

The sink only needs three things from an event: its level, a renderer slot
it may swap for the duration of one write, and a way to render to text.
RenderableEvent names that capability; LogEvent is the concrete event the
adapters and the CLI build.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from levelsink.levels import Level
from levelsink.renderers import Renderer, TextRenderer


@runtime_checkable
class RenderableEvent(Protocol):
    """What LevelFileSink.fire() reads from an event."""

    level: Level
    renderer: Renderer

    def render(self) -> str: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogEvent:
    """A single structured log event.

    Mutable on purpose: ``renderer`` is the slot a sink may swap while it
    writes. ``timestamp`` may be a datetime or an already formatted string
    (structlog's TimeStamper produces strings).
    """

    level: Level
    message: str
    fields: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | str = field(default_factory=_utcnow)
    renderer: Renderer = field(default_factory=TextRenderer)

    def __post_init__(self) -> None:
        self.level = Level.parse(self.level)

    def event_dict(self) -> dict[str, Any]:
        """Fresh event dict; renderers are free to consume it."""
        ts = self.timestamp
        return {
            "timestamp": ts.isoformat() if isinstance(ts, datetime) else ts,
            "level": self.level.label,
            "event": self.message,
            **self.fields,
        }

    def render(self) -> str:
        """Render through the current renderer, newline terminated."""
        text = self.renderer(None, self.level.label, self.event_dict())
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if not isinstance(text, str):
            raise TypeError(
                f"Renderer {self.renderer!r} returned {type(text).__name__}, expected str"
            )
        if not text.endswith("\n"):
            text += "\n"
        return text
