"""FastAPI application for the kudos board.

Provides REST API endpoints wrapping the kudos package for:
- Submitting kudos to colleagues
- Listing the visible feed
- Admin moderation (hide, unhide, delete)
- Looking up the acting user and their colleagues

``create_app`` builds a fresh application that owns its own ``KudosService``.
Nothing is built at import time; uvicorn calls the factory::

    uvicorn web.backend.app.main:create_app --factory --reload
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kudos import __version__
from kudos.board.service import KudosService
from kudos.config import Settings
from kudos.logging_config import setup_logging
from web.backend.app.routers.kudos import router as kudos_router
from web.backend.app.routers.users import router as users_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, service: Optional[KudosService] = None) -> FastAPI:
    """Create and configure the application.

    *service* may be passed in directly (tests do this to control the clock);
    otherwise one is built from *settings*.
    """
    settings = settings or Settings.load()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Kudos Board API",
        description="REST API for sending and moderating kudos between colleagues.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.kudos_service = service if service is not None else settings.build_service()

    # -----------------------------------------------------------------------
    # CORS middleware (allow all origins for development)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(kudos_router)
    app.include_router(users_router)

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info(
        "Kudos board ready: %d users, admin %s, %d kudos loaded",
        len(app.state.kudos_service.directory),
        settings.admin_user_id,
        len(app.state.kudos_service),
    )
    return app
