"""Process logging bootstrap: formatter × destination, both ending in a LevelFileSink.

    LogFormatter   : picks the renderer and the logger API (structlog or stdlib)
    LogDestination : picks the routing table (stderr for every level, or the
                     configured per-level files)

setup_logging(config) asks the formatter for a renderer, hands it to the
destination, and installs the resulting LevelFileHandler on the root logger.
Either way records go through the sink, so level routing, locking and color
stripping are the same for stderr and for files.

Swapping:
    LEVELSINK_LOG_FORMATTER=structlog   (default) | stdlib
    LEVELSINK_LOG_DESTINATION=stderr    (default) | levelfile
    LEVELSINK_LOG_FORMAT=json           (default) | console | logfmt | keyvalue

    register_formatter() / register_destination() add new names; the class
    is constructed with the SinkConfig.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from levelsink.config import load_path_map
from levelsink.handlers import LevelFileHandler
from levelsink.levels import Level
from levelsink.renderers import Renderer, renderer_for

if TYPE_CHECKING:
    from levelsink.config import SinkConfig


@runtime_checkable
class LogFormatter(Protocol):
    """How events are built and rendered."""

    def renderer(self) -> Renderer: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    """Where rendered events go."""

    def create_handler(self, renderer: Renderer) -> logging.Handler: ...


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructlogFormatter:
    """structlog front end.

    The processor chain stops at wrap_for_formatter, so stdlib records carry
    the event dict itself; LevelFileHandler unpacks it and renders with the
    renderer returned here.
    """

    def __init__(self, config: SinkConfig) -> None:
        import structlog

        self._format = config.log_format
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    def renderer(self) -> Renderer:
        # colors are kept for text renderers; the sink strips them per write
        return renderer_for(self._format, colors=True)

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.get_logger(name, **kwargs)


class StdlibFormatter:
    """Plain stdlib loggers with a kwargs API; structlog only renders."""

    def __init__(self, config: SinkConfig) -> None:
        self._format = config.log_format

    def renderer(self) -> Renderer:
        return renderer_for(self._format)

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return StructuredLogger(logging.getLogger(name))


class StructuredLogger:
    """stdlib logger taking ``logger.info("event", key=value)``.

    Keyword fields travel on the record as ``_structured``, which
    LevelFileHandler turns into event fields.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def log(self, level: int, event: str, **fields: Any) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, event, extra={"_structured": fields}, stacklevel=3)

    def debug(self, event: str, **fields: Any) -> None:
        self.log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log(logging.ERROR, event, **fields)

    def critical(self, event: str, **fields: Any) -> None:
        self.log(logging.CRITICAL, event, **fields)


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


class StderrDestination:
    """Every level to the process stderr stream."""

    def __init__(self, config: SinkConfig) -> None:
        self._stream = sys.stderr

    def create_handler(self, renderer: Renderer) -> logging.Handler:
        return LevelFileHandler({level: self._stream for level in Level}, renderer=renderer)


class LevelFileDestination:
    """Per-level files from the configured routing table."""

    def __init__(self, config: SinkConfig) -> None:
        self._paths = load_path_map(config.paths_file)
        if not self._paths:
            raise ValueError(
                f"No level files configured. Write {config.paths_file} "
                f"or set LEVELSINK_PATH_<LEVEL> variables."
            )

    def create_handler(self, renderer: Renderer) -> logging.Handler:
        return LevelFileHandler(self._paths, renderer=renderer)


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

_FORMATTERS: dict[str, type] = {
    "structlog": StructlogFormatter,
    "stdlib": StdlibFormatter,
}

_DESTINATIONS: dict[str, type] = {
    "stderr": StderrDestination,
    "levelfile": LevelFileDestination,
}


def register_formatter(name: str, cls: type) -> None:
    """Register a custom log formatter. Call before setup_logging()."""
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Register a custom log destination. Call before setup_logging()."""
    _DESTINATIONS[name] = cls


def _lookup(registry: dict[str, type], name: str, kind: str) -> type:
    cls = registry.get(name)
    if cls is None:
        raise ValueError(
            f"Unknown log {kind}: {name!r}. Available: {list(registry)}. "
            f"Register custom ones with register_{kind}()."
        )
    return cls


# ---------------------------------------------------------------------------
# Module state
# ---------------------------------------------------------------------------

_active_formatter: LogFormatter | None = None
_active_handler: logging.Handler | None = None


def setup_logging(config: SinkConfig) -> logging.Handler:
    """Build formatter and destination from config, install on the root logger.

    A handler installed by an earlier call is replaced; handlers installed
    by anyone else (pytest caplog, monitoring agents) are left in place.
    Returns the installed handler.
    """
    global _active_formatter, _active_handler

    formatter_cls = _lookup(_FORMATTERS, config.log_formatter, "formatter")
    dest_cls = _lookup(_DESTINATIONS, config.log_destination, "destination")

    destination = dest_cls(config)
    formatter = formatter_cls(config)
    handler = destination.create_handler(formatter.renderer())

    root_logger = logging.getLogger()
    if _active_handler is not None:
        root_logger.removeHandler(_active_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    _active_formatter = formatter
    _active_handler = handler
    return handler


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """Logger from the active formatter, or a StructuredLogger before setup."""
    if _active_formatter is not None:
        return _active_formatter.get_logger(name, **kwargs)
    return StructuredLogger(logging.getLogger(name))


def shutdown_logging() -> None:
    """Detach the installed handler and forget the active setup."""
    global _active_formatter, _active_handler
    if _active_handler is not None:
        logging.getLogger().removeHandler(_active_handler)
        _active_handler.close()
    _active_formatter = None
    _active_handler = None
