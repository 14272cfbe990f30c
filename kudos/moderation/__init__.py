"""Content checks applied when a kudo is submitted."""

from kudos.moderation.filters import (
    DEFAULT_BANNED_WORDS,
    DEFAULT_DUPLICATE_WINDOW_SECONDS,
    ContentFilter,
    DuplicateGuard,
    escape_html,
    trim_message,
)

__all__ = [
    "DEFAULT_BANNED_WORDS",
    "DEFAULT_DUPLICATE_WINDOW_SECONDS",
    "ContentFilter",
    "DuplicateGuard",
    "escape_html",
    "trim_message",
]
