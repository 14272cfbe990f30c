"""In-memory kudos store and its request-handling rules.

``KudosService`` owns the collection of kudos for the life of the process.
All mutations and snapshot reads happen under one lock so concurrent callers
observe the same serialized behaviour as a single request loop.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from kudos.board.errors import (
    BannedContentError,
    DuplicateSubmissionError,
    EmptyMessageError,
    KudoNotFoundError,
    MessageTooLongError,
    MissingFieldError,
    RecipientNotFoundError,
    SelfRecipientError,
    UnauthorizedError,
)
from kudos.board.models import Kudo, KudoView
from kudos.directory.store import UserDirectory
from kudos.moderation.filters import ContentFilter, DuplicateGuard, escape_html, trim_message
from kudos.security.audit_log import AuditLogger

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_LENGTH = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KudosService:
    """Create, list and moderate kudos."""

    def __init__(
        self,
        directory: UserDirectory,
        audit: Optional[AuditLogger] = None,
        content_filter: Optional[ContentFilter] = None,
        duplicate_guard: Optional[DuplicateGuard] = None,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
        clock: Callable[[], datetime] = _utcnow,
        initial: Iterable[Kudo] = (),
    ) -> None:
        self._directory = directory
        self._audit = audit or AuditLogger()
        self._filter = content_filter or ContentFilter()
        self._duplicates = duplicate_guard or DuplicateGuard()
        self._max_length = max_message_length
        self._clock = clock
        self._lock = threading.Lock()
        self._kudos: dict[str, Kudo] = {}
        self._next_seq = 1
        for kudo in initial:
            if kudo.id in self._kudos:
                raise ValueError(f"Duplicate kudo id: {kudo.id}")
            self._kudos[kudo.id] = kudo.copy()

    @property
    def directory(self) -> UserDirectory:
        return self._directory

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _new_id(self) -> str:
        # Sequence only moves forward, so ids of deleted kudos are never handed out again.
        while f"k{self._next_seq}" in self._kudos:
            self._next_seq += 1
        kudo_id = f"k{self._next_seq}"
        self._next_seq += 1
        return kudo_id

    def _view(self, kudo: Kudo) -> KudoView:
        return KudoView(
            kudo=kudo.copy(),
            sender=self._directory.find_user(kudo.sender_id),
            recipient=self._directory.find_user(kudo.recipient_id),
        )

    def _require_admin(self, acting_user_id: Optional[str]) -> None:
        if not self._directory.is_admin(acting_user_id):
            logger.warning("User %s attempted a moderation action without admin rights", acting_user_id)
            raise UnauthorizedError()

    def _get_or_raise(self, kudo_id: str) -> Kudo:
        kudo = self._kudos.get(kudo_id)
        if kudo is None:
            raise KudoNotFoundError()
        return kudo

    def _audit_action(self, action: str, kudo_id: str, admin_id: str, reason: Optional[str] = None) -> None:
        try:
            self._audit.record(action, kudo_id, admin_id, reason)
        except Exception:
            logger.exception("Failed to record %s audit entry for kudo %s", action, kudo_id)

    def check_message(self, message: Optional[str]) -> str:
        """Run the message-only checks and return the escaped text.

        Raises the same errors ``create`` would for the message itself
        (missing, empty, too long, banned content).
        """
        if message is None:
            raise MissingFieldError()
        trimmed = trim_message(message)
        if not trimmed:
            raise EmptyMessageError()
        if len(trimmed) > self._max_length:
            raise MessageTooLongError(f"Message must be {self._max_length} characters or less.")
        if self._filter.contains_banned(trimmed):
            raise BannedContentError()
        return escape_html(trimmed)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(self, sender_id: Optional[str], recipient_id: Optional[str], message: Optional[str]) -> KudoView:
        """Validate and store a new kudo from *sender_id* to *recipient_id*."""
        if not sender_id or not recipient_id or message is None:
            raise MissingFieldError()
        if recipient_id == sender_id:
            raise SelfRecipientError()
        if self._directory.find_user(recipient_id) is None:
            raise RecipientNotFoundError()
        escaped = self.check_message(message)

        with self._lock:
            now = self._clock()
            if self._duplicates.is_duplicate(self._kudos.values(), sender_id, recipient_id, escaped, now):
                raise DuplicateSubmissionError()
            kudo = Kudo(
                id=self._new_id(),
                sender_id=sender_id,
                recipient_id=recipient_id,
                message=escaped,
                created_at=now,
            )
            self._kudos[kudo.id] = kudo
            view = self._view(kudo)

        logger.info("Kudo %s created from %s to %s", kudo.id, sender_id, recipient_id)
        return view

    def list_kudos(self, viewer_is_admin: bool = False) -> list[KudoView]:
        """Return visible kudos, newest first.

        Hidden kudos are excluded for every caller, admins included.
        """
        with self._lock:
            visible = [self._view(k) for k in self._kudos.values() if k.is_visible]
        visible.sort(key=lambda v: v.kudo.created_at, reverse=True)
        return visible

    def get(self, kudo_id: str) -> KudoView:
        """Return one kudo regardless of visibility."""
        with self._lock:
            return self._view(self._get_or_raise(kudo_id))

    def hide(self, kudo_id: str, acting_user_id: Optional[str], reason: Optional[str] = None) -> KudoView:
        """Hide a kudo from the feed. Admin only."""
        self._require_admin(acting_user_id)
        with self._lock:
            kudo = self._get_or_raise(kudo_id)
            kudo.mark_hidden(acting_user_id, self._clock(), reason)
            self._audit_action("HIDE", kudo_id, acting_user_id, kudo.moderation_reason)
            return self._view(kudo)

    def unhide(self, kudo_id: str, acting_user_id: Optional[str]) -> KudoView:
        """Restore a hidden kudo and clear its moderation fields. Admin only."""
        self._require_admin(acting_user_id)
        with self._lock:
            kudo = self._get_or_raise(kudo_id)
            kudo.mark_visible()
            self._audit_action("UNHIDE", kudo_id, acting_user_id)
            return self._view(kudo)

    def delete(self, kudo_id: str, acting_user_id: Optional[str]) -> None:
        """Remove a kudo permanently. Admin only."""
        self._require_admin(acting_user_id)
        with self._lock:
            self._get_or_raise(kudo_id)
            self._audit_action("DELETE", kudo_id, acting_user_id)
            del self._kudos[kudo_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._kudos)
