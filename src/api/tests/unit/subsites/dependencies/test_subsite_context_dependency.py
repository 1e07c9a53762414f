"""Unit tests for the subsite context FastAPI dependency."""

from typing import Annotated
from unittest.mock import MagicMock

import pytest
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.testclient import TestClient

from shared_kernel.middleware.subsite_context import (
    SubsiteContext,
    current_subsite_context,
)
from subsites.dependencies.subsite_context import (
    get_subsite_context,
    get_subsite_context_probe,
    resolve_subsite_context,
)


@pytest.fixture
def mock_probe():
    """Create mock subsite context probe."""
    return MagicMock()


class TestResolveSubsiteContext:
    """Tests for resolving the context from header values."""

    def test_missing_header_means_no_subsite(self, mock_probe):
        """No header, no subsite context."""
        context = resolve_subsite_context(None, None, mock_probe)

        assert context == SubsiteContext(subsite_id=None, source="none")
        mock_probe.subsite_resolved.assert_called_once_with(
            subsite_id=None, source="none"
        )

    def test_blank_header_means_no_subsite(self, mock_probe):
        """An empty header is treated as missing."""
        assert resolve_subsite_context("  ", None, mock_probe).subsite_id is None

    def test_zero_selects_main_site(self, mock_probe):
        """Subsite 0 is kept apart from no subsite."""
        context = resolve_subsite_context("0", None, mock_probe)

        assert context.subsite_id == 0
        assert context.is_main_site
        assert not context.has_subsite

    def test_positive_id_selects_subsite(self, mock_probe):
        """A positive ID selects that subsite."""
        context = resolve_subsite_context("5", None, mock_probe)

        assert context == SubsiteContext(subsite_id=5, source="header")
        assert context.has_subsite

    @pytest.mark.parametrize("raw", ["-1", "shop", "5.0"])
    def test_invalid_id_is_rejected(self, mock_probe, raw):
        """Invalid IDs answer 400 and are reported."""
        with pytest.raises(HTTPException) as exc_info:
            resolve_subsite_context(raw, None, mock_probe)

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
        mock_probe.invalid_subsite_id.assert_called_once_with(raw_value=raw)

    @pytest.mark.parametrize("raw", ["true", "TRUE", " True "])
    def test_bypass_header(self, mock_probe, raw):
        """X-No-Subsite-Filter: true lifts scoping."""
        context = resolve_subsite_context("5", raw, mock_probe)

        assert context.bypass_filter is True
        mock_probe.filter_bypass_requested.assert_called_once_with(subsite_id=5)

    @pytest.mark.parametrize("raw", [None, "false", "1", "yes"])
    def test_other_bypass_values_keep_scoping(self, mock_probe, raw):
        """Anything but true leaves scoping on."""
        assert resolve_subsite_context("5", raw, mock_probe).bypass_filter is False


class TestGetSubsiteContext:
    """Tests for the dependency inside a request."""

    @pytest.fixture
    def client(self, mock_probe) -> TestClient:
        """App exposing the resolved and the bound context."""
        app = FastAPI()

        @app.get("/context")
        async def read_context(
            context: Annotated[SubsiteContext, Depends(get_subsite_context)],
        ) -> dict:
            bound = current_subsite_context()
            return {
                "subsite_id": context.subsite_id,
                "bypass": context.bypass_filter,
                "bound_subsite_id": bound.subsite_id,
            }

        app.dependency_overrides[get_subsite_context_probe] = lambda: mock_probe
        return TestClient(app)

    def test_headers_are_resolved_and_bound(self, client):
        """The context is returned and bound for the request."""
        response = client.get(
            "/context",
            headers={"X-Subsite-ID": "7", "X-No-Subsite-Filter": "true"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "subsite_id": 7,
            "bypass": True,
            "bound_subsite_id": 7,
        }

    def test_invalid_header_returns_400(self, client):
        """A negative subsite ID is a bad request."""
        response = client.get("/context", headers={"X-Subsite-ID": "-4"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
