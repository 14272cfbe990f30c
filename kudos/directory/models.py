"""Directory models for the people who can send and receive kudos."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """An employee listed in the static directory."""

    id: str
    name: str
    title: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "title": self.title}


DEFAULT_ADMIN_USER_ID = "u0"
DEFAULT_CURRENT_USER_ID = "u1"

DEFAULT_USERS: tuple[User, ...] = (
    User(id="u0", name="Alex Morgan", title="Product Manager"),
    User(id="u1", name="Jordan Lee", title="Software Engineer"),
    User(id="u2", name="Priya Desai", title="UX Designer"),
    User(id="u3", name="Chris Johnson", title="DevOps Engineer"),
    User(id="u4", name="Samira Khan", title="QA Analyst"),
    User(id="u5", name="Miguel Alvarez", title="Customer Success Manager"),
)
