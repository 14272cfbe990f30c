"""Static user directory consulted by the kudos board."""

from kudos.directory.models import DEFAULT_ADMIN_USER_ID, DEFAULT_CURRENT_USER_ID, DEFAULT_USERS, User
from kudos.directory.store import UserDirectory

__all__ = [
    "DEFAULT_ADMIN_USER_ID",
    "DEFAULT_CURRENT_USER_ID",
    "DEFAULT_USERS",
    "User",
    "UserDirectory",
]
