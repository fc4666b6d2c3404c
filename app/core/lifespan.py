"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of the store backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.store_factory import StoreFactory
from app.shared.enums import StoreBackend
from app.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, then the repository set for the configured backend
    (Firestore client init, or a fresh in-memory database). Shutdown closes
    the Firestore HTTP client.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    app.state.repositories = None
    if settings.store_backend is StoreBackend.MEMORY:
        from app.infrastructure.memory.store import MemoryDatabase

        app.state.memory_db = getattr(app.state, "memory_db", None) or MemoryDatabase()
        app.state.repositories = StoreFactory.create_repositories(
            settings, memory_db=app.state.memory_db
        )
        logger.info("Using in-memory store backend")
    else:
        from app.infrastructure.firebase.client import get_firestore_client, init_firebase

        if init_firebase():
            app.state.repositories = StoreFactory.create_repositories(
                settings, firestore_client=get_firestore_client()
            )
        else:
            logger.error("Firestore is not configured; store-backed routes return 503")

    yield

    # ---- Shutdown ----
    if settings.store_backend is StoreBackend.FIRESTORE:
        from app.infrastructure.firebase.client import close_firebase

        await close_firebase()
