"""Moderation audit log.

Every admin action on a kudo (hide, unhide, delete) is recorded here. Entries
are kept in memory for the life of the process, written as a log line on the
``kudos.audit`` logger, and optionally appended as newline-delimited JSON to
daily files under ``base_dir``.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger("kudos.audit")


@dataclass
class AuditEntry:
    """A single moderation event."""

    id: str
    timestamp: str
    action: str
    kudo_id: str
    admin_id: str
    reason: Optional[str] = None

    def to_log_line(self) -> str:
        return (
            f"[MODERATION] {self.action} | Kudos: {self.kudo_id} | Admin: {self.admin_id} "
            f"| Reason: {self.reason or 'N/A'} | Time: {self.timestamp}"
        )


class AuditLogger:
    """Best-effort audit trail for moderation actions."""

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._base_dir = Path(base_dir) if base_dir else None
        if self._base_dir is not None:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._entries: list[AuditEntry] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_file_for_date(self, dt: datetime) -> Path:
        return self._base_dir / f"{dt.strftime('%Y-%m-%d')}.jsonl"

    def _append_to_file(self, entry: AuditEntry, when: datetime) -> None:
        try:
            with self._log_file_for_date(when).open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(asdict(entry)) + "\n")
        except OSError as exc:
            logger.warning("Could not write audit entry %s to disk: %s", entry.id, exc)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record(
        self,
        action: str,
        kudo_id: str,
        admin_id: str,
        reason: Optional[str] = None,
    ) -> AuditEntry:
        """Record a moderation event and return the created entry."""
        now = self._clock()
        entry = AuditEntry(
            id=uuid.uuid4().hex[:16],
            timestamp=now.isoformat(),
            action=action,
            kudo_id=kudo_id,
            admin_id=admin_id,
            reason=reason,
        )
        with self._lock:
            self._entries.append(entry)
        logger.info(entry.to_log_line())
        if self._base_dir is not None:
            self._append_to_file(entry, now)
        return entry

    def get_events(
        self,
        *,
        action: Optional[str] = None,
        admin_id: Optional[str] = None,
        kudo_id: Optional[str] = None,
        limit: Optional[int] = 200,
    ) -> list[AuditEntry]:
        """Return filtered audit events, newest first. ``limit=None`` returns all."""
        with self._lock:
            entries = list(self._entries)

        if action:
            entries = [e for e in entries if e.action == action]
        if admin_id:
            entries = [e for e in entries if e.admin_id == admin_id]
        if kudo_id:
            entries = [e for e in entries if e.kudo_id == kudo_id]

        entries.reverse()
        return entries if limit is None else entries[:limit]

    def get_events_for_kudo(self, kudo_id: str) -> list[AuditEntry]:
        """Return all events for a specific kudo."""
        return self.get_events(kudo_id=kudo_id, limit=None)
