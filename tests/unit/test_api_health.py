"""Unit tests for Health API endpoints."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from podgate.api.health import (
    basic_health_check,
    daemon_health_check,
    detailed_health_check,
    rerun_self_test,
)
from podgate.services.health import HealthCheckResult, HealthStatus


@pytest.fixture
def mock_health_result():
    """Create a mock health result."""
    return HealthCheckResult(
        service="hyperd",
        status=HealthStatus.HEALTHY,
        response_time_ms=10.5,
        details={"socket": "/var/run/hyper.sock"},
    )


@pytest.fixture
def mock_health_service(mock_health_result):
    service = MagicMock()
    service.check_all_services = AsyncMock(return_value={"hyperd": mock_health_result})
    service.check_daemon = AsyncMock(return_value=mock_health_result)
    service.get_overall_status.return_value = HealthStatus.HEALTHY
    return service


class TestBasicHealthCheck:
    """Tests for basic_health_check endpoint."""

    @pytest.mark.asyncio
    async def test_returns_healthy(self):
        """Test basic health check returns healthy."""
        result = await basic_health_check()

        assert result["status"] == "healthy"
        assert "version" in result
        assert result["service"] == "podgate"


class TestDetailedHealthCheck:
    """Tests for detailed_health_check endpoint."""

    @pytest.mark.asyncio
    async def test_all_healthy(self, mock_health_service):
        """Test detailed check when all services healthy."""
        response = await detailed_health_check(mock_health_service, use_cache=True)

        assert response.status_code == 200
        body = json.loads(response.body)
        assert body["status"] == "healthy"
        assert body["summary"]["healthy_services"] == 1

    @pytest.mark.asyncio
    async def test_degraded_status(self, mock_health_service):
        """Test degraded status is flagged in a header."""
        mock_health_service.get_overall_status.return_value = HealthStatus.DEGRADED

        response = await detailed_health_check(mock_health_service, use_cache=True)

        assert response.status_code == 200
        assert response.headers["X-Health-Status"] == "degraded"

    @pytest.mark.asyncio
    async def test_unhealthy_status(self, mock_health_service):
        """Test unhealthy status answers 503."""
        mock_health_service.get_overall_status.return_value = HealthStatus.UNHEALTHY

        response = await detailed_health_check(mock_health_service, use_cache=False)

        assert response.status_code == 503
        mock_health_service.check_all_services.assert_awaited_once_with(use_cache=False)

    @pytest.mark.asyncio
    async def test_check_failure(self, mock_health_service):
        """Test a failing health system reports unhealthy."""
        mock_health_service.check_all_services.side_effect = RuntimeError("boom")

        response = await detailed_health_check(mock_health_service, use_cache=True)

        assert response.status_code == 503
        assert json.loads(response.body)["error"] == "Health check system failure"


class TestDaemonHealthCheck:
    """Tests for daemon_health_check endpoint."""

    @pytest.mark.asyncio
    async def test_healthy(self, mock_health_service):
        response = await daemon_health_check(mock_health_service)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_unhealthy(self, mock_health_service):
        mock_health_service.check_daemon.return_value = HealthCheckResult(
            service="hyperd", status=HealthStatus.UNHEALTHY, error="socket missing"
        )

        response = await daemon_health_check(mock_health_service)

        assert response.status_code == 503
        assert json.loads(response.body)["error"] == "socket missing"


class TestRerunSelfTest:
    """Tests for rerun_self_test endpoint."""

    @pytest.mark.asyncio
    async def test_passed(self):
        self_test = MagicMock()
        self_test.run = AsyncMock(return_value=True)
        self_test.self_test_success = True
        self_test.to_dict.return_value = {"success": True, "last_run": None, "checks": []}

        response = await rerun_self_test(self_test)

        assert response.status_code == 200
        self_test.run.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed(self):
        self_test = MagicMock()
        self_test.run = AsyncMock(return_value=False)
        self_test.self_test_success = False
        self_test.to_dict.return_value = {"success": False, "last_run": None, "checks": []}

        response = await rerun_self_test(self_test)

        assert response.status_code == 503
