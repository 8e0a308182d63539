"""
Unit tests for server exception handlers.

Tests cover domain error rendering, the global fallback handler and
registration on a FastAPI app.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from streamo.core.errors import (
    ConflictError,
    GoneError,
    NotFoundError,
    PayloadTooLargeError,
    ServiceUnavailableError,
    StreamoError,
)
from streamo.server.exception_handlers import setup_exception_handlers
from streamo.server.exception_handlers.global_handler import global_exception_handler, streamo_error_handler


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/releases"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestStreamoErrorHandler:
    @pytest.mark.parametrize(
        "exc,status,detail",
        [
            (NotFoundError("Release", "abc"), 404, "Release 'abc' not found"),
            (NotFoundError("Invitation code"), 404, "Invitation code not found"),
            (ConflictError("Email already exists"), 409, "Email already exists"),
            (GoneError("Invitation code has expired"), 410, "Invitation code has expired"),
            (PayloadTooLargeError(5 * 1024 * 1024), 413, "File too large. Maximum size is 5MB"),
            (ServiceUnavailableError("Email service is not configured"), 503, "Email service is not configured"),
        ],
    )
    async def test_renders_detail(self, mock_request, exc, status, detail):
        response = await streamo_error_handler(mock_request, exc)
        assert response.status_code == status
        assert json.loads(response.body) == {"detail": detail}

    async def test_server_errors_logged_as_errors(self, mock_request):
        with patch("streamo.server.exception_handlers.global_handler.logger") as mock_logger:
            await streamo_error_handler(mock_request, ServiceUnavailableError("down"))
            mock_logger.error.assert_called_once()
            await streamo_error_handler(mock_request, StreamoError("bad input"))
            mock_logger.debug.assert_called_once()


class TestGlobalExceptionHandler:
    async def test_returns_error_id(self, mock_request):
        exc = ValueError("Test error")

        with patch("streamo.server.exception_handlers.global_handler.logger") as mock_logger, patch(
            "streamo.server.exception_handlers.global_handler.log_error"
        ) as mock_log_error:
            response = await global_exception_handler(mock_request, exc)

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body == {"detail": "Internal server error", "error_id": id(exc), "error_type": "ValueError"}
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["extra"]["path"] == "/api/v1/releases"
        mock_log_error.assert_called_once_with("ValueError", "Test error", {"error_id": id(exc), "path": "/api/v1/releases"})

    async def test_missing_client(self, mock_request):
        mock_request.client = None
        with patch("streamo.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("x"))
        assert mock_logger.error.call_args.kwargs["extra"]["client"] == "unknown"


async def test_handlers_registered_on_app():
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Store", "s1")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        missing_response = await client.get("/missing")
        boom_response = await client.get("/boom")

    assert missing_response.status_code == 404
    assert missing_response.json() == {"detail": "Store 's1' not found"}
    assert boom_response.status_code == 500
    assert boom_response.json()["error_type"] == "RuntimeError"
