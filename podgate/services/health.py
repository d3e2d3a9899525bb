"""Health check service for the daemon and the node self-test."""

# Standard library imports
import asyncio
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional

# Third-party imports
import structlog

# Local application imports
from ..models.errors import HyperError
from .hyper import HyperClient
from .selftest import SelfTestService


logger = structlog.get_logger(__name__)

# Daemon answers slower than this are reported as degraded
SLOW_RESPONSE_MS = 1000


class HealthStatus(str, Enum):
    """Health check status enumeration."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


class HealthCheckResult:
    """Health check result container."""

    def __init__(
        self,
        service: str,
        status: HealthStatus,
        response_time_ms: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        self.service = service
        self.status = status
        self.response_time_ms = response_time_ms
        self.details = details or {}
        self.error = error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "service": self.service,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }

        if self.response_time_ms is not None:
            result["response_time_ms"] = round(self.response_time_ms, 2)

        if self.details:
            result["details"] = self.details

        if self.error:
            result["error"] = self.error

        return result


class HealthCheckService:
    """Service for performing health checks on the daemon and self-test."""

    def __init__(
        self,
        hyper_client: HyperClient,
        self_test: SelfTestService,
        cache_ttl_seconds: int = 30,
    ):
        self.hyper_client = hyper_client
        self.self_test = self_test
        self._last_check_time: Optional[datetime] = None
        self._cached_results: Dict[str, HealthCheckResult] = {}
        self._cache_ttl_seconds = cache_ttl_seconds

    async def check_all_services(
        self, use_cache: bool = True
    ) -> Dict[str, HealthCheckResult]:
        """Perform all health checks."""
        now = datetime.now(timezone.utc)

        if (
            use_cache
            and self._last_check_time
            and (now - self._last_check_time).total_seconds() < self._cache_ttl_seconds
        ):
            return self._cached_results

        results = await asyncio.gather(self.check_daemon(), self.check_self_test())
        health_results = {result.service: result for result in results}

        self._cached_results = health_results
        self._last_check_time = now

        return health_results

    async def check_daemon(self) -> HealthCheckResult:
        """Check hyperd connectivity and latency."""
        if self.hyper_client.noop:
            return HealthCheckResult(
                service="hyperd",
                status=HealthStatus.HEALTHY,
                details={"mode": "noop"},
            )

        start_time = time.time()
        try:
            info = await self.hyper_client.get_daemon_info()
        except HyperError as e:
            response_time = (time.time() - start_time) * 1000
            logger.error(
                "hyperd health check failed",
                error=str(e),
                response_time_ms=response_time,
            )
            return HealthCheckResult(
                service="hyperd",
                status=HealthStatus.UNHEALTHY,
                response_time_ms=response_time,
                error=e.message,
            )

        response_time = (time.time() - start_time) * 1000
        status = HealthStatus.HEALTHY
        if response_time > SLOW_RESPONSE_MS:
            status = HealthStatus.DEGRADED

        details = {"socket": getattr(self.hyper_client.transport, "socket_path", None)}
        for key in ("Containers", "Pods", "Images"):
            if key in info:
                details[key.lower()] = info[key]

        return HealthCheckResult(
            service="hyperd",
            status=status,
            response_time_ms=response_time,
            details=details,
        )

    async def check_self_test(self) -> HealthCheckResult:
        """Report the last self-test outcome."""
        if self.self_test.self_test_success:
            status = HealthStatus.HEALTHY
        elif self.self_test.last_run is None:
            status = HealthStatus.UNKNOWN
        else:
            status = HealthStatus.UNHEALTHY

        return HealthCheckResult(
            service="self_test",
            status=status,
            details=self.self_test.to_dict(),
        )

    def get_overall_status(
        self, service_results: Dict[str, HealthCheckResult]
    ) -> HealthStatus:
        """Determine overall system health status."""
        if not service_results:
            return HealthStatus.UNKNOWN

        statuses = [result.status for result in service_results.values()]

        if HealthStatus.UNHEALTHY in statuses:
            return HealthStatus.UNHEALTHY

        if HealthStatus.DEGRADED in statuses:
            return HealthStatus.DEGRADED

        if all(status == HealthStatus.HEALTHY for status in statuses):
            return HealthStatus.HEALTHY

        return HealthStatus.UNKNOWN
