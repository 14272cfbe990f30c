"""Demo kudos loaded when the board starts with an empty store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from kudos.board.models import Kudo


def demo_kudos(now: Optional[datetime] = None) -> list[Kudo]:
    """Two sample kudos, created a few hours before *now*."""
    now = now or datetime.now(timezone.utc)
    return [
        Kudo(
            id="k1",
            sender_id="u1",
            recipient_id="u2",
            message="Thanks for the quick turnaround on the prototype updates!",
            created_at=now - timedelta(hours=5),
        ),
        Kudo(
            id="k2",
            sender_id="u3",
            recipient_id="u1",
            message="Appreciate you jumping on the deployment issues last night.",
            created_at=now - timedelta(hours=8),
        ),
    ]
