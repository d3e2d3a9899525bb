"""Unit tests for Error Handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError

from podgate.models.errors import (
    AuthorizationError,
    DaemonTimeout,
    DaemonUnreachable,
    ErrorType,
    GatewayException,
    PodCreateFailed,
    PodNetworkUnready,
    PodProvisionFailed,
)
from podgate.utils.error_handlers import (
    gateway_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)


@pytest.fixture
def mock_request():
    """Create a mock request."""
    request = MagicMock()
    request.url.path = "/pods"
    request.method = "POST"
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    return request


def body(response) -> dict:
    return json.loads(response.body)


class TestGatewayExceptionHandler:
    """Tests for gateway_exception_handler."""

    @pytest.mark.asyncio
    async def test_keeps_existing_request_id(self, mock_request):
        exc = GatewayException("Boom", request_id="req-123")

        response = await gateway_exception_handler(mock_request, exc)

        assert response.status_code == 500
        assert body(response)["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_assigns_request_id(self, mock_request):
        exc = AuthorizationError("This host is misconfigured.")

        response = await gateway_exception_handler(mock_request, exc)

        assert response.status_code == 403
        data = body(response)
        assert data["error"] == "This host is misconfigured."
        assert data["error_type"] == "authorization"
        assert data["request_id"]

    @pytest.mark.parametrize(
        "exc,status_code,error_type",
        [
            (DaemonUnreachable(), 503, "service_unavailable"),
            (DaemonTimeout(), 504, "timeout"),
            (PodCreateFailed("pod1", 2), 503, "service_unavailable"),
            (PodProvisionFailed("pod1"), 503, "service_unavailable"),
            (PodNetworkUnready("pod1"), 409, "resource_conflict"),
        ],
    )
    @pytest.mark.asyncio
    async def test_daemon_errors(self, mock_request, exc, status_code, error_type):
        response = await gateway_exception_handler(mock_request, exc)

        assert response.status_code == status_code
        assert body(response)["error_type"] == error_type


class TestHttpExceptionHandler:
    """Tests for http_exception_handler."""

    @pytest.mark.asyncio
    async def test_not_found(self, mock_request):
        response = await http_exception_handler(mock_request, HTTPException(404, "Not Found"))

        assert response.status_code == 404
        assert body(response)["error_type"] == ErrorType.RESOURCE_NOT_FOUND.value

    @pytest.mark.asyncio
    async def test_unmapped_status(self, mock_request):
        response = await http_exception_handler(mock_request, HTTPException(418, "teapot"))

        assert body(response)["error_type"] == ErrorType.INTERNAL_SERVER.value


class TestValidationExceptionHandler:
    """Tests for validation_exception_handler."""

    @pytest.mark.asyncio
    async def test_reports_fields(self, mock_request):
        exc = RequestValidationError(
            [{"loc": ("query", "limit"), "msg": "Input should be less than or equal to 1000", "type": "less_than_equal"}]
        )

        response = await validation_exception_handler(mock_request, exc)

        assert response.status_code == 422
        data = body(response)
        assert data["error_type"] == "validation"
        assert data["details"][0]["field"] == "query -> limit"
        assert data["details"][0]["code"] == "less_than_equal"


class TestGeneralExceptionHandler:
    """Tests for general_exception_handler."""

    @pytest.mark.asyncio
    async def test_hides_internal_details(self, mock_request):
        response = await general_exception_handler(mock_request, RuntimeError("secret path /etc/x"))

        assert response.status_code == 500
        data = body(response)
        assert data["error"] == "An unexpected error occurred"
        assert "secret" not in response.body.decode()
