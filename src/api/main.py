"""Main FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
)
from infrastructure.database.session import ScopedSession
from infrastructure.logging import configure_logging
from infrastructure.settings import Settings, get_settings
from infrastructure.version import get_version
from shared_kernel.authorization.protocols import SubsiteAccessProvider
from subsites.infrastructure.legacy_migration import run_legacy_migration
from subsites.infrastructure.query_scope import install_group_scoping
from subsites.presentation import router as subsites_router


def create_app(
    access_provider: SubsiteAccessProvider | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        access_provider: Capability lookup for the caller's subsites. Routes
            that check edit rights answer 503 until one is registered on
            ``app.state.subsite_access_provider``.
        settings: Application settings, defaults to the environment

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context.

        Manages:
        - Logging configuration
        - One-time legacy subsite migration (runs before any request)
        - Group scoping listener on ORM sessions
        - Connection pool lifecycle (closed on shutdown)
        """
        configure_logging(debug=settings.debug)

        if settings.subsites.run_legacy_migration_on_startup:
            # Failures propagate and abort startup
            async with get_engine().begin() as connection:
                await connection.run_sync(run_legacy_migration)

        scope = install_group_scoping(ScopedSession, settings.subsites)
        try:
            yield
        finally:
            scope.uninstall(ScopedSession)
            await close_database_connections()

    app = FastAPI(
        title=settings.app_name,
        description="Subsite-aware security groups",
        version=get_version(),
        lifespan=lifespan,
    )
    app.state.subsite_access_provider = access_provider

    # Include Subsites bounded context routes
    app.include_router(subsites_router)

    @app.get("/health")
    def health():
        """Basic health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
