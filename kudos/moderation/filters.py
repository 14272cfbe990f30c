"""Create-time content checks for kudos messages.

Two checks run before a kudo is stored:

- a deny-list of banned substrings, matched case-insensitively;
- a duplicate-submission guard that rejects an identical message from the
  same sender to the same recipient inside a short time window.

Messages are HTML-escaped before storage so the feed can render them as-is.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from kudos.board.models import Kudo

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BANNED_WORDS: tuple[str, ...] = (
    "spam",
    "test123",
    "inappropriate",
)

DEFAULT_DUPLICATE_WINDOW_SECONDS = 60

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#039;",
    }
)


def escape_html(text: str) -> str:
    """Replace ``& < > " '`` with their HTML entities."""
    return text.translate(_HTML_ESCAPES)


# Whitespace removed from both ends of a message. Matches the browser notion of
# whitespace: includes U+FEFF, excludes the C0 separators U+001C..U+001F and U+0085.
_TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def trim_message(text: str) -> str:
    """Strip leading and trailing whitespace, including the byte-order mark."""
    return text.strip(_TRIM_CHARS)


# ---------------------------------------------------------------------------
# Deny-list
# ---------------------------------------------------------------------------


class ContentFilter:
    """Case-insensitive substring match against a deny-list."""

    def __init__(self, banned_words: Iterable[str] = DEFAULT_BANNED_WORDS) -> None:
        self._banned = tuple(w.strip().lower() for w in banned_words if w and w.strip())

    @property
    def banned_words(self) -> tuple[str, ...]:
        return self._banned

    def find_banned(self, text: str) -> Optional[str]:
        """Return the first banned entry found in *text*, or ``None``."""
        lowered = text.lower()
        for word in self._banned:
            if word in lowered:
                return word
        return None

    def contains_banned(self, text: str) -> bool:
        return self.find_banned(text) is not None


# ---------------------------------------------------------------------------
# Duplicate guard
# ---------------------------------------------------------------------------


class DuplicateGuard:
    """Detects a repeat of the same kudo inside a time window."""

    def __init__(self, window_seconds: float = DEFAULT_DUPLICATE_WINDOW_SECONDS) -> None:
        if window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        self.window_seconds = window_seconds

    def is_duplicate(
        self,
        kudos: Iterable["Kudo"],
        sender_id: str,
        recipient_id: str,
        message: str,
        now: datetime,
        window_seconds: Optional[float] = None,
    ) -> bool:
        """Return True if an identical kudo was created after ``now - window``.

        *message* is compared in its stored (escaped) form, so callers pass
        the escaped text of the new message.
        """
        window = self.window_seconds if window_seconds is None else window_seconds
        cutoff = now - timedelta(seconds=window)
        candidate = trim_message(message)
        return any(
            k.sender_id == sender_id
            and k.recipient_id == recipient_id
            and trim_message(k.message) == candidate
            and k.created_at > cutoff
            for k in kudos
        )
