"""Settings for the kudos board.

Defaults reproduce the board's fixed behaviour (admin ``u0``, acting user
``u1``, a three-word deny-list and a 60 second duplicate window). Values can
be overridden from a YAML file and then from ``KUDOS_*`` environment
variables::

    # kudos.yaml
    admin_user_id: u0
    banned_words: [spam, test123, inappropriate]
    duplicate_window_seconds: 60
    users:
      - {id: u0, name: Alex Morgan, title: Product Manager}
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import yaml

from kudos.board.seed import demo_kudos
from kudos.board.service import DEFAULT_MAX_MESSAGE_LENGTH, KudosService
from kudos.directory.models import DEFAULT_ADMIN_USER_ID, DEFAULT_CURRENT_USER_ID, DEFAULT_USERS
from kudos.directory.store import UserDirectory
from kudos.moderation.filters import (
    DEFAULT_BANNED_WORDS,
    DEFAULT_DUPLICATE_WINDOW_SECONDS,
    ContentFilter,
    DuplicateGuard,
)
from kudos.security.audit_log import AuditLogger

_ENV_PREFIX = "KUDOS_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _parse_int(name: str, value: Any, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for {name}: {value!r}") from None
    if number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


def _parse_words(value: Any) -> list[str]:
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value or []]
    return [w.strip() for w in items if w.strip()]


@dataclass
class Settings:
    """Runtime configuration for the service, web app and CLI."""

    admin_user_id: str = DEFAULT_ADMIN_USER_ID
    current_user_id: str = DEFAULT_CURRENT_USER_ID
    banned_words: list[str] = field(default_factory=lambda: list(DEFAULT_BANNED_WORDS))
    duplicate_window_seconds: int = DEFAULT_DUPLICATE_WINDOW_SECONDS
    max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH
    log_level: str = "INFO"
    audit_dir: Optional[str] = None
    seed_demo_data: bool = True
    users: list[dict] = field(default_factory=lambda: [u.to_dict() for u in DEFAULT_USERS])

    def __post_init__(self) -> None:
        self.banned_words = _parse_words(self.banned_words)
        self.duplicate_window_seconds = _parse_int("duplicate_window_seconds", self.duplicate_window_seconds)
        self.max_message_length = _parse_int("max_message_length", self.max_message_length, minimum=1)
        self.seed_demo_data = _parse_bool("seed_demo_data", self.seed_demo_data)
        self.log_level = str(self.log_level).upper()
        self.audit_dir = self.audit_dir or None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def with_overrides(self, values: Mapping[str, Any]) -> "Settings":
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(values)
        return Settings(**current)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, base: Optional["Settings"] = None) -> "Settings":
        """Apply ``KUDOS_<FIELD>`` environment variables on top of *base*."""
        environ = os.environ if environ is None else environ
        base = base or cls()
        overrides = {}
        for f in fields(cls):
            if f.name == "users":
                continue
            key = _ENV_PREFIX + f.name.upper()
            if key in environ:
                overrides[f.name] = environ[key]
        return base.with_overrides(overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Read settings from a YAML mapping."""
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls().with_overrides(data)

    @classmethod
    def load(cls, path: Optional[str | Path] = None, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """YAML file (if given) first, then environment overrides."""
        base = cls.from_yaml(path) if path else cls()
        return cls.from_env(environ, base=base)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def build_directory(self) -> UserDirectory:
        return UserDirectory.from_dicts(self.users, admin_id=self.admin_user_id)

    def build_service(self, clock: Optional[Callable[[], datetime]] = None) -> KudosService:
        """Wire a ``KudosService`` from these settings."""
        kwargs: dict[str, Any] = {}
        if clock is not None:
            kwargs["clock"] = clock
        return KudosService(
            directory=self.build_directory(),
            audit=AuditLogger(base_dir=Path(self.audit_dir) if self.audit_dir else None),
            content_filter=ContentFilter(self.banned_words),
            duplicate_guard=DuplicateGuard(self.duplicate_window_seconds),
            max_message_length=self.max_message_length,
            initial=demo_kudos() if self.seed_demo_data else (),
            **kwargs,
        )
