"""
Application lifecycle management using the FastAPI lifespan pattern.

Handles only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import get_settings
from app.core.container import get_container

logger = logging.getLogger(__name__)
settings = get_settings()


class LifecycleManager:
    """
    Manages application lifecycle events.

    Startup warms the shared collaborators and starts the session cleanup
    loop. Shutdown closes every open booking session so that no redirect
    countdown outlives the application.
    """

    def __init__(self) -> None:
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()

        container = get_container()
        providers = await container.get_provider_directory().list_providers()
        logger.info(f"Provider directory ready with {len(providers)} providers")
        container.get_session_store().start_cleanup()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        store = get_container().get_session_store()
        await store.stop_cleanup()
        open_sessions = len(store)
        await store.close_all()
        logger.info(f"Closed {open_sessions} booking sessions")

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Log configuration that affects booking behavior."""
        if settings.BOOKING_RANDOM_SEED is not None:
            logger.info(f"Simulation seeded with BOOKING_RANDOM_SEED={settings.BOOKING_RANDOM_SEED}")
        if settings.BOOKING_REDIRECT_SECONDS <= 0:
            logger.info("Success redirect countdown is disabled")
        if not settings.SENTRY_DSN:
            logger.warning("SENTRY_DSN not configured - error tracking disabled")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
