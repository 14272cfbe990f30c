"""Read-only user directory.

The directory is a fixed lookup table loaded once at start-up. Admin rights
are derived by comparing a user id against the configured admin id.
"""

from __future__ import annotations

from typing import Iterable, Optional

from kudos.directory.models import DEFAULT_ADMIN_USER_ID, DEFAULT_USERS, User


class UserDirectory:
    """In-memory lookup over a static list of users."""

    def __init__(
        self,
        users: Iterable[User] = DEFAULT_USERS,
        admin_id: str = DEFAULT_ADMIN_USER_ID,
    ) -> None:
        self._users: dict[str, User] = {}
        for user in users:
            if user.id in self._users:
                raise ValueError(f"Duplicate user id in directory: {user.id}")
            self._users[user.id] = user
        self._admin_id = admin_id

    @property
    def admin_id(self) -> str:
        return self._admin_id

    @staticmethod
    def _user_from_dict(d: dict) -> User:
        return User(
            id=str(d["id"]),
            name=str(d["name"]),
            title=str(d.get("title", "")),
        )

    @classmethod
    def from_dicts(cls, rows: Iterable[dict], admin_id: str = DEFAULT_ADMIN_USER_ID) -> "UserDirectory":
        """Build a directory from plain mappings (e.g. a YAML ``users`` list)."""
        return cls([cls._user_from_dict(d) for d in rows], admin_id=admin_id)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self._users.get(user_id)

    def is_admin(self, user_id: Optional[str]) -> bool:
        return bool(user_id) and user_id == self._admin_id

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def colleagues_of(self, user_id: str) -> list[User]:
        """Everyone except *user_id*, in directory order."""
        return [u for u in self._users.values() if u.id != user_id]

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
