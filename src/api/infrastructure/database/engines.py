"""Async engine factory for the groups database.

The engine serves the request sessions and the startup subsite migration,
which borrows one connection through ``AsyncConnection.run_sync``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "APPLICATION_NAME",
    "build_async_url",
    "create_engine",
]

# Reported to PostgreSQL so pg_stat_activity shows which service holds a connection
APPLICATION_NAME = "subsites-api"


def create_engine(
    settings: DatabaseSettings, application_name: str = APPLICATION_NAME
) -> AsyncEngine:
    """Create the async engine.

    The pool keeps ``pool_min_connections`` open and may grow up to
    ``pool_max_connections`` under load.

    Args:
        settings: Database connection settings
        application_name: Name reported to the server for each connection

    Returns:
        Configured async engine
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_min_connections,
        max_overflow=settings.pool_max_connections - settings.pool_min_connections,
        pool_pre_ping=True,
        connect_args={"server_settings": {"application_name": application_name}},
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Render the asyncpg URL with percent-encoded credentials.

    Alembic's offline mode uses the same URL to render SQL.
    """
    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
