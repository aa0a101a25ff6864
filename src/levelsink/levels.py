"""Severity levels shared by the sink, the adapters, and the config layer.

Numeric values line up with stdlib ``logging`` so records can be mapped
without a lookup table. TRACE and PANIC sit outside the stdlib range.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Level(IntEnum):
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL
    PANIC = 60

    @property
    def label(self) -> str:
        """Lowercase name used in rendered output."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: Level | str | int) -> Level:
        """Coerce a Level, a level name, or a stdlib level number.

        Names are case-insensitive and accept the usual aliases
        (``warning``, ``critical``, ``exception``).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Not a log level: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown log level number: {value}") from None
        if isinstance(value, str):
            key = value.strip().lower()
            if key.isdigit():
                return cls.parse(int(key))
            level = _ALIASES.get(key)
            if level is None:
                raise ValueError(
                    f"Unknown log level: {value!r}. "
                    f"Available: {sorted(_ALIASES)}."
                )
            return level
        raise ValueError(f"Not a log level: {value!r}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Highest Level not above ``levelno``; TRACE is the floor."""
        match = cls.TRACE
        for level in cls:
            if level <= levelno:
                match = level
        return match


_LABELS = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERROR: "error",
    Level.FATAL: "fatal",
    Level.PANIC: "panic",
}

_ALIASES = {
    **{level.label: level for level in Level},
    "warn": Level.WARN,
    "critical": Level.FATAL,
    "exception": Level.ERROR,
}
