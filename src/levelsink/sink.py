"""LevelFileSink: append each event to the file mapped to its level.

Every fire() runs open-append-close under one lock:

    lookup level -> swap in color-free renderer -> render -> restore renderer
    -> open (append|create, 0o644) -> write -> close

Holding no file open between calls keeps the sink tolerant of files being
rotated or deleted underneath it. Nothing is retried; a failed write raises
and the caller decides.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import IO, Any, Union

from levelsink.errors import OpenError, RenderError, UnroutedLevel, WriteError
from levelsink.events import RenderableEvent
from levelsink.levels import Level
from levelsink.renderers import Renderer, is_text_renderer, plain_text

Destination = Union[str, os.PathLike, IO[str]]

_FLAGS = os.O_WRONLY | os.O_APPEND | os.O_CREAT
_MODE = 0o644


def _report(message: str) -> None:
    """Last-resort diagnostic channel.

    Writes straight to stderr: the sink may be installed as a logging
    handler, so routing this through logging could loop back into it.
    """
    try:
        sys.stderr.write(f"levelsink: {message}\n")
        sys.stderr.flush()
    except (OSError, ValueError):
        pass


def _is_stream(destination: Any) -> bool:
    return hasattr(destination, "write") and not isinstance(destination, (str, bytes))


class LevelFileSink:
    """Route events to files by level.

    ``paths`` maps levels (Level members, names or stdlib numbers) to a
    file path or to an already-open text stream. Several levels may share
    a destination. Streams are written and flushed but never closed; the
    caller owns them.
    """

    def __init__(
        self,
        paths: Mapping[Level | str | int, Destination],
        formatter: Renderer | None = None,
    ) -> None:
        if not paths:
            raise ValueError("LevelFileSink needs at least one level -> destination entry")
        routes: dict[Level, Destination] = {}
        for key, destination in paths.items():
            level = Level.parse(key)
            if level in routes:
                raise ValueError(f"Level {level.name} is mapped more than once")
            if not _is_stream(destination):
                destination = os.fspath(destination)
            routes[level] = destination
        self._paths = MappingProxyType(routes)
        self._levels = frozenset(routes)
        self._lock = threading.Lock()
        self._formatter = plain_text(formatter)

    @property
    def paths(self) -> Mapping[Level, Destination]:
        """Read-only routing table."""
        return self._paths

    @property
    def formatter(self) -> Renderer:
        return self._formatter

    def levels(self) -> frozenset[Level]:
        """Levels this sink has a destination for."""
        return self._levels

    def set_formatter(self, renderer: Renderer) -> None:
        """Replace the override renderer.

        Text-family renderers are stored color-free; anything else is kept
        as given.
        """
        with self._lock:
            self._formatter = plain_text(renderer)

    def fire(self, event: RenderableEvent) -> None:
        """Append the rendered event to its level's destination.

        Raises UnroutedLevel, RenderError, OpenError or WriteError.
        """
        with self._lock:
            level = event.level
            destination = self._paths.get(level)
            if destination is None:
                err = UnroutedLevel(f"no file provided for loglevel: {level!r}", level=level)
                _report(str(err))
                raise err

            text = self._render(event)

            if _is_stream(destination):
                self._write_stream(destination, text, level)
            else:
                self._write_file(destination, text, level)

    def _render(self, event: RenderableEvent) -> str:
        original = event.renderer
        swap = is_text_renderer(original)
        if swap:
            event.renderer = self._formatter
        try:
            return event.render()
        except Exception as e:
            raise RenderError(
                f"failed to generate string for entry: {e}", level=event.level
            ) from e
        finally:
            if swap:
                event.renderer = original

    def _write_file(self, path: str, text: str, level: Level) -> None:
        # lone surrogates (os.fsdecode, surrogateescape) land as \udcff escapes
        data = text.encode("utf-8", errors="backslashreplace")
        try:
            fd = os.open(path, _FLAGS, _MODE)
        except OSError as e:
            err = OpenError(f"failed to open logfile: {path}: {e}", level=level, path=path)
            _report(str(err))
            raise err from e

        try:
            try:
                written = os.write(fd, data)
            finally:
                os.close(fd)
        except OSError as e:
            raise WriteError(f"failed to write logfile: {path}: {e}", level=level, path=path) from e
        if written != len(data):
            raise WriteError(
                f"short write to {path}: {written} of {len(data)} bytes",
                level=level,
                path=path,
            )

    def _write_stream(self, stream: IO[str], text: str, level: Level) -> None:
        name = getattr(stream, "name", repr(stream))
        try:
            written = stream.write(text)
            stream.flush()
        except (OSError, ValueError) as e:
            raise WriteError(f"failed to write to {name}: {e}", level=level, path=name) from e
        if written is not None and written != len(text):
            raise WriteError(
                f"short write to {name}: {written} of {len(text)} characters",
                level=level,
                path=name,
            )

    def __repr__(self) -> str:
        routes = ", ".join(f"{lvl.label}={dest!r}" for lvl, dest in sorted(self._paths.items()))
        return f"LevelFileSink({routes})"
