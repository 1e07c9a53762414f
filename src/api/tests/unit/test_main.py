"""Unit tests for the FastAPI application factory and lifespan."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from asgi_lifespan import LifespanManager
from fastapi import status
from fastapi.testclient import TestClient

from infrastructure.database.session import ScopedSession
from infrastructure.settings import Settings, SubsiteSettings
from subsites.infrastructure.legacy_migration import run_legacy_migration


@pytest.fixture
def mock_connection() -> MagicMock:
    """Connection yielded by engine.begin()."""
    connection = MagicMock()
    connection.run_sync = AsyncMock()
    return connection


@pytest.fixture
def mock_engine(mock_connection: MagicMock) -> MagicMock:
    """Engine whose begin() is an async context manager."""
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=mock_connection)
    transaction.__aexit__ = AsyncMock(return_value=None)
    engine = MagicMock()
    engine.begin.return_value = transaction
    return engine


def _settings(monkeypatch: pytest.MonkeyPatch, run_migration: bool) -> Settings:
    subsites = SubsiteSettings(
        _env_file=None, run_legacy_migration_on_startup=run_migration
    )
    monkeypatch.setattr(
        "infrastructure.settings.get_subsite_settings", lambda: subsites
    )
    return Settings(_env_file=None, debug=False)


class TestLifespan:
    """Tests for the application lifespan."""

    @pytest.mark.asyncio
    async def test_startup_migrates_and_installs_scoping(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_engine: MagicMock,
        mock_connection: MagicMock,
    ) -> None:
        """The legacy migration runs before scoping is installed."""
        from main import create_app

        settings = _settings(monkeypatch, run_migration=True)
        scope = MagicMock()

        with (
            patch("main.get_engine", return_value=mock_engine),
            patch("main.configure_logging") as configure_logging,
            patch("main.install_group_scoping", return_value=scope) as install,
            patch("main.close_database_connections", new=AsyncMock()) as close,
        ):
            app = create_app(access_provider=MagicMock(), settings=settings)
            async with LifespanManager(app):
                mock_connection.run_sync.assert_awaited_once_with(run_legacy_migration)
                install.assert_called_once_with(ScopedSession, settings.subsites)

            configure_logging.assert_called_once_with(debug=False)
            scope.uninstall.assert_called_once_with(ScopedSession)
            close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_startup_skips_migration_when_disabled(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_engine: MagicMock,
        mock_connection: MagicMock,
    ) -> None:
        """The migration can be left to alembic."""
        from main import create_app

        settings = _settings(monkeypatch, run_migration=False)

        with (
            patch("main.get_engine", return_value=mock_engine),
            patch("main.configure_logging"),
            patch("main.install_group_scoping"),
            patch("main.close_database_connections", new=AsyncMock()),
        ):
            app = create_app(settings=settings)
            async with LifespanManager(app):
                pass

        mock_engine.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_migration_failure_aborts_startup(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_engine: MagicMock,
        mock_connection: MagicMock,
    ) -> None:
        """Startup fails when the migration fails."""
        from main import create_app

        settings = _settings(monkeypatch, run_migration=True)
        mock_connection.run_sync.side_effect = RuntimeError("column locked")

        with (
            patch("main.get_engine", return_value=mock_engine),
            patch("main.configure_logging"),
            patch("main.install_group_scoping") as install,
            patch("main.close_database_connections", new=AsyncMock()),
        ):
            app = create_app(settings=settings)
            with pytest.raises(RuntimeError, match="column locked"):
                async with app.router.lifespan_context(app):
                    pass

        install.assert_not_called()


class TestApplication:
    """Tests for the assembled application."""

    def test_registers_access_provider_and_routes(self) -> None:
        """The provider is kept on app state and subsite routes are mounted."""
        from main import create_app

        provider = MagicMock()
        app = create_app(access_provider=provider, settings=Settings(_env_file=None))

        paths = {route.path for route in app.routes}
        assert app.state.subsite_access_provider is provider
        assert "/subsites/groups" in paths
        assert "/subsites/groups/{group_id}/access" in paths

    def test_health(self) -> None:
        """Health endpoint answers without touching the database."""
        from main import create_app

        client = TestClient(create_app(settings=Settings(_env_file=None)))

        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}
