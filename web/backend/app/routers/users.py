"""Users router -- the acting user and the colleagues they can thank."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from kudos.board.service import KudosService
from kudos.directory.models import User
from web.backend.app.middleware.auth import get_current_user, get_service
from web.backend.app.models.api import (
    CurrentUserEnvelope,
    CurrentUserResponse,
    UserListResponse,
    UserResponse,
)

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/current-user", response_model=CurrentUserEnvelope)
async def current_user(
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """Return the acting user with their admin flag."""
    return CurrentUserEnvelope(
        user=CurrentUserResponse(
            **user.to_dict(),
            is_admin=service.directory.is_admin(user.id),
        )
    )


@router.get("/users", response_model=UserListResponse)
async def list_colleagues(
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """List everyone the acting user can send kudos to."""
    return UserListResponse(
        users=[UserResponse(**u.to_dict()) for u in service.directory.colleagues_of(user.id)]
    )
