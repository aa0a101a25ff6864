"""levelsink: route structured log events to files by severity level.

Public API:
    LevelFileSink(paths)   : level -> file routing sink (fire, levels, set_formatter)
    LogEvent               : concrete event with a swappable renderer slot
    LevelFileHandler       : stdlib logging.Handler adapter
    LevelFileProcessor     : structlog processor adapter

Writes are open-append-close under a per-sink lock. Text renderers are
forced color-free for the write; JSON and other renderers are left alone.
"""

from levelsink.errors import OpenError, RenderError, SinkError, UnroutedLevel, WriteError
from levelsink.events import LogEvent, RenderableEvent
from levelsink.handlers import LevelFileHandler, LevelFileProcessor
from levelsink.levels import Level
from levelsink.renderers import TextRenderer, is_text_renderer, plain_text, renderer_for
from levelsink.sink import LevelFileSink

__all__ = [
    # Core
    "LevelFileSink",
    "Level",
    "LogEvent",
    "RenderableEvent",
    # Renderers
    "TextRenderer",
    "is_text_renderer",
    "plain_text",
    "renderer_for",
    # Adapters
    "LevelFileHandler",
    "LevelFileProcessor",
    # Errors
    "SinkError",
    "UnroutedLevel",
    "RenderError",
    "OpenError",
    "WriteError",
]
