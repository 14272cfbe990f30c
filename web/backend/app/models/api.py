"""Pydantic models for API request/response serialization.

These models mirror the kudos dataclasses and provide JSON serialization for
the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Mirrors kudos.directory.models.User."""

    id: str
    name: str
    title: str = ""


class CurrentUserResponse(UserResponse):
    is_admin: bool = False


class CurrentUserEnvelope(BaseModel):
    user: CurrentUserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Kudos
# ---------------------------------------------------------------------------


class CreateKudoRequest(BaseModel):
    """Request body for submitting a kudo.

    Fields are optional here so that missing values reach the service and
    fail with its own validation error instead of a schema error.
    """

    recipient_id: Optional[str] = None
    message: Optional[str] = None


class HideKudoRequest(BaseModel):
    reason: Optional[str] = None


class KudoResponse(BaseModel):
    """Mirrors kudos.board.models.KudoView."""

    id: str
    sender_id: str
    recipient_id: str
    message: str
    created_at: str
    is_visible: bool = True
    moderated_by: Optional[str] = None
    moderated_at: Optional[str] = None
    moderation_reason: Optional[str] = None
    sender: Optional[UserResponse] = None
    recipient: Optional[UserResponse] = None


class KudoEnvelope(BaseModel):
    kudo: KudoResponse


class KudoListResponse(BaseModel):
    kudos: list[KudoResponse] = Field(default_factory=list)


class DeleteKudoResponse(BaseModel):
    message: str = "Kudos deleted successfully"
