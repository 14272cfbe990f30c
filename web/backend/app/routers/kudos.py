"""Kudos router -- submit, list and moderate kudos.

Prefix: ``/api/kudos``
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from kudos.board.errors import KudosError, KudosNotFoundError, UnauthorizedError
from kudos.board.models import KudoView
from kudos.board.service import KudosService
from kudos.directory.models import User
from web.backend.app.middleware.auth import get_current_user, get_service
from web.backend.app.models.api import (
    CreateKudoRequest,
    DeleteKudoResponse,
    HideKudoRequest,
    KudoEnvelope,
    KudoListResponse,
    KudoResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/kudos", tags=["kudos"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _kudo_response(view: KudoView) -> KudoResponse:
    """Convert a domain KudoView to the Pydantic response model."""
    return KudoResponse(**view.to_dict())


def _http_error(exc: KudosError) -> HTTPException:
    """Map a service error family to its HTTP status."""
    if isinstance(exc, UnauthorizedError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, KudosNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=exc.message)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=KudoListResponse)
async def list_kudos(
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """List visible kudos, newest first."""
    views = service.list_kudos(viewer_is_admin=service.directory.is_admin(user.id))
    return KudoListResponse(kudos=[_kudo_response(v) for v in views])


@router.post("", response_model=KudoEnvelope, status_code=status.HTTP_201_CREATED)
async def create_kudo(
    req: CreateKudoRequest,
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """Send a kudo from the current user."""
    try:
        view = service.create(user.id, req.recipient_id, req.message)
    except KudosError as exc:
        logger.info("Rejected kudo from %s: %s", user.id, exc.code)
        raise _http_error(exc)
    return KudoEnvelope(kudo=_kudo_response(view))


@router.patch("/{kudo_id}/hide", response_model=KudoEnvelope)
async def hide_kudo(
    kudo_id: str,
    req: Optional[HideKudoRequest] = None,
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """Hide a kudo from the feed (admin only)."""
    reason = req.reason if req else None
    try:
        view = service.hide(kudo_id, user.id, reason)
    except KudosError as exc:
        raise _http_error(exc)
    return KudoEnvelope(kudo=_kudo_response(view))


@router.patch("/{kudo_id}/unhide", response_model=KudoEnvelope)
async def unhide_kudo(
    kudo_id: str,
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """Restore a hidden kudo (admin only)."""
    try:
        view = service.unhide(kudo_id, user.id)
    except KudosError as exc:
        raise _http_error(exc)
    return KudoEnvelope(kudo=_kudo_response(view))


@router.delete("/{kudo_id}", response_model=DeleteKudoResponse)
async def delete_kudo(
    kudo_id: str,
    user: User = Depends(get_current_user),
    service: KudosService = Depends(get_service),
):
    """Delete a kudo permanently (admin only)."""
    try:
        service.delete(kudo_id, user.id)
    except KudosError as exc:
        raise _http_error(exc)
    return DeleteKudoResponse()
