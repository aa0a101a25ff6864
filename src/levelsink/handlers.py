"""Adapters that attach a LevelFileSink to a logging pipeline.

LevelFileHandler  : stdlib ``logging.Handler``; also receives structlog
                    output bridged through ProcessorFormatter.wrap_for_formatter.
LevelFileProcessor: structlog processor that tees each event dict into
                    the sink and passes it on unchanged.

Both consult sink.levels() before firing, so the sink only ever sees
levels it routes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from levelsink.errors import OpenError, UnroutedLevel
from levelsink.events import LogEvent
from levelsink.levels import Level
from levelsink.renderers import Renderer, TextRenderer
from levelsink.sink import Destination, LevelFileSink, _report

# structlog bookkeeping keys that should not end up in the file
_STRUCTLOG_META = ("_record", "_from_structlog", "_logger", "_name")


def _as_sink(
    target: LevelFileSink | Mapping[Any, Destination],
    formatter: Renderer | None,
) -> LevelFileSink:
    if isinstance(target, LevelFileSink):
        if formatter is not None:
            target.set_formatter(formatter)
        return target
    return LevelFileSink(target, formatter=formatter)


class LevelFileHandler(logging.Handler):
    """Handler that routes records to per-level files.

    ``renderer`` is the renderer events start with; a text-family renderer
    is still written color-free because the sink swaps in its override.
    """

    def __init__(
        self,
        target: LevelFileSink | Mapping[Any, Destination],
        renderer: Renderer | None = None,
        formatter: Renderer | None = None,
    ) -> None:
        super().__init__()
        self.sink = _as_sink(target, formatter)
        self.renderer = renderer if renderer is not None else TextRenderer()

    def filter(self, record: logging.LogRecord) -> bool:
        if Level.from_stdlib(record.levelno) not in self.sink.levels():
            return False
        return bool(super().filter(record))

    def to_event(self, record: logging.LogRecord) -> LogEvent:
        """Build a LogEvent from a record.

        structlog-bridged records carry the event dict as ``record.msg``;
        plain records use getMessage() plus any ``_structured`` extras.
        """
        level = Level.from_stdlib(record.levelno)
        timestamp: datetime | str = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if isinstance(record.msg, dict):
            fields = {k: v for k, v in record.msg.items() if k not in _STRUCTLOG_META}
            message = str(fields.pop("event", ""))
            fields.pop("level", None)
            timestamp = fields.pop("timestamp", timestamp)
        else:
            message = record.getMessage()
            fields = dict(getattr(record, "_structured", {}) or {})
        fields.setdefault("logger", record.name)
        if record.exc_info and record.exc_info[1] is not None:
            fields.setdefault("exception", logging.Formatter().formatException(record.exc_info))
        return LogEvent(
            level=level,
            message=message,
            fields=fields,
            timestamp=timestamp,
            renderer=self.renderer,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.sink.fire(self.to_event(record))
        except Exception:
            self.handleError(record)


class LevelFileProcessor:
    """structlog processor that copies events into a LevelFileSink.

    Place it before the final renderer. The event dict flows on untouched.
    """

    def __init__(
        self,
        target: LevelFileSink | Mapping[Any, Destination],
        renderer: Renderer | None = None,
        formatter: Renderer | None = None,
    ) -> None:
        self.sink = _as_sink(target, formatter)
        self.renderer = renderer if renderer is not None else TextRenderer()

    def __call__(self, logger: Any, method_name: str, event_dict: dict) -> dict:
        try:
            level = Level.parse(event_dict.get("level", method_name))
        except ValueError:
            return event_dict
        if level not in self.sink.levels():
            return event_dict

        try:
            self.sink.fire(self.to_event(level, event_dict))
        except (UnroutedLevel, OpenError):
            # already reported by fire()
            pass
        except Exception as e:
            _report(f"dropped {level.label} event: {e}")
        return event_dict

    def to_event(self, level: Level, event_dict: dict) -> LogEvent:
        fields = {k: v for k, v in event_dict.items() if k not in _STRUCTLOG_META}
        message = str(fields.pop("event", ""))
        fields.pop("level", None)
        timestamp = fields.pop("timestamp", None) or datetime.now(timezone.utc)
        return LogEvent(
            level=level,
            message=message,
            fields=fields,
            timestamp=timestamp,
            renderer=self.renderer,
        )
