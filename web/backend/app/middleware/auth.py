"""Caller identity -- FastAPI dependencies for the acting user and the service.

There is no login: the caller names themselves with an ``X-User-Id`` header.
Requests without the header act as the configured current user.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from kudos.board.service import KudosService
from kudos.config import Settings
from kudos.directory.models import User


def get_service(request: Request) -> KudosService:
    """Return the ``KudosService`` owned by the running application."""
    return request.app.state.kudos_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    service: KudosService = Depends(get_service),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the acting user from ``X-User-Id`` or the configured default.

    Raises ``401 Unauthorized`` if the id is not in the directory.
    """
    user_id = x_user_id or settings.current_user_id
    user = service.directory.find_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return user
