"""Data models for kudos and their moderation state."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from kudos.directory.models import User


@dataclass
class Kudo:
    """A stored recognition message.

    ``message`` holds the trimmed, HTML-escaped text. The three moderation
    fields are ``None`` unless the kudo is currently hidden.
    """

    id: str
    sender_id: str
    recipient_id: str
    message: str
    created_at: datetime
    is_visible: bool = True
    moderated_by: Optional[str] = None
    moderated_at: Optional[datetime] = None
    moderation_reason: Optional[str] = None

    @property
    def is_hidden(self) -> bool:
        return not self.is_visible

    def mark_hidden(self, admin_id: str, when: datetime, reason: Optional[str] = None) -> None:
        self.is_visible = False
        self.moderated_by = admin_id
        self.moderated_at = when
        self.moderation_reason = reason or None

    def mark_visible(self) -> None:
        self.is_visible = True
        self.moderated_by = None
        self.moderated_at = None
        self.moderation_reason = None

    def copy(self) -> "Kudo":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "recipient_id": self.recipient_id,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "is_visible": self.is_visible,
            "moderated_by": self.moderated_by,
            "moderated_at": self.moderated_at.isoformat() if self.moderated_at else None,
            "moderation_reason": self.moderation_reason,
        }


@dataclass(frozen=True)
class KudoView:
    """A snapshot of a kudo with its sender and recipient resolved."""

    kudo: Kudo
    sender: Optional[User]
    recipient: Optional[User]

    @property
    def id(self) -> str:
        return self.kudo.id

    def to_dict(self) -> dict:
        d = self.kudo.to_dict()
        d["sender"] = self.sender.to_dict() if self.sender else None
        d["recipient"] = self.recipient.to_dict() if self.recipient else None
        return d
