"""Renderer families.

A renderer is any structlog-style final processor:
``renderer(logger, method_name, event_dict) -> str``.

Only the plain-text family (structlog's ConsoleRenderer and the
TextRenderer wrapper below) knows about color. JSON, key=value and logfmt
renderers have nothing to strip and are left alone by the sink.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog

Renderer = Callable[[Any, str, dict], str]


class TextRenderer:
    """ConsoleRenderer that remembers how it was built.

    structlog bakes color styles into a ConsoleRenderer at construction,
    so a color-free twin has to be rebuilt from the same options.
    """

    def __init__(self, colors: bool = True, **options: Any) -> None:
        self.colors = colors
        self.options = options
        self._renderer = structlog.dev.ConsoleRenderer(colors=colors, **options)

    def without_colors(self) -> TextRenderer:
        if not self.colors:
            return self
        return TextRenderer(colors=False, **self.options)

    def __call__(self, logger: Any, method_name: str, event_dict: dict) -> str:
        return self._renderer(logger, method_name, event_dict)

    def __repr__(self) -> str:
        return f"TextRenderer(colors={self.colors!r})"


def is_text_renderer(renderer: Any) -> bool:
    """True for renderers of the plain-text family."""
    return isinstance(renderer, (TextRenderer, structlog.dev.ConsoleRenderer))


def plain_text(renderer: Any = None) -> Any:
    """Color-disabled variant of ``renderer``.

    A bare ConsoleRenderer does not expose its options, so it is replaced
    by a default color-free TextRenderer. Renderers outside the text
    family are returned unchanged.
    """
    if renderer is None:
        return TextRenderer(colors=False)
    if isinstance(renderer, TextRenderer):
        return renderer.without_colors()
    if isinstance(renderer, structlog.dev.ConsoleRenderer):
        return TextRenderer(colors=False)
    return renderer


def renderer_for(fmt: str, colors: bool = False) -> Renderer:
    """Build a renderer by format name: console, json, logfmt or keyvalue."""
    if fmt == "console":
        return TextRenderer(colors=colors)
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "logfmt":
        return structlog.processors.LogfmtRenderer()
    if fmt == "keyvalue":
        return structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "event"]
        )
    raise ValueError(
        f"Unknown log format: {fmt!r}. "
        f"Available: ['console', 'json', 'logfmt', 'keyvalue']."
    )
