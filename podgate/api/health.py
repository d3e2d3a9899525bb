"""Health check and self-test endpoints."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from .._version import __implementation__, __version__
from ..config import settings
from ..dependencies.services import HealthServiceDep, SelfTestServiceDep
from ..services.health import HealthStatus

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/health", summary="Basic health check")
async def basic_health_check():
    """Basic liveness check; does not contact the daemon."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
        "service": __implementation__,
    }


@router.get("/health/detailed", summary="Detailed health check")
async def detailed_health_check(
    health_service: HealthServiceDep,
    use_cache: bool = Query(True, description="Use cached health check results"),
):
    """Check the daemon and report the self-test outcome."""
    try:
        service_results = await health_service.check_all_services(use_cache=use_cache)
        overall_status = health_service.get_overall_status(service_results)

        response_data = {
            "status": overall_status.value,
            "version": __version__,
            "services": {name: result.to_dict() for name, result in service_results.items()},
            "summary": {
                "total_services": len(service_results),
                "healthy_services": sum(1 for r in service_results.values() if r.status == HealthStatus.HEALTHY),
                "degraded_services": sum(1 for r in service_results.values() if r.status == HealthStatus.DEGRADED),
                "unhealthy_services": sum(1 for r in service_results.values() if r.status == HealthStatus.UNHEALTHY),
            },
        }

        if overall_status == HealthStatus.UNHEALTHY:
            return JSONResponse(status_code=503, content=response_data)
        elif overall_status == HealthStatus.DEGRADED:
            return JSONResponse(
                status_code=200,
                content=response_data,
                headers={"X-Health-Status": "degraded"},
            )
        else:
            return JSONResponse(status_code=200, content=response_data)

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": "Health check system failure",
                "details": str(e) if settings.api_debug else "Internal error",
            },
        )


@router.get("/health/daemon", summary="hyperd health check")
async def daemon_health_check(health_service: HealthServiceDep):
    """Check hyperd connectivity and latency."""
    result = await health_service.check_daemon()
    status_code = 503 if result.status == HealthStatus.UNHEALTHY else 200
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.post("/health/self-test", summary="Re-run the self-test")
async def rerun_self_test(self_test: SelfTestServiceDep):
    """Run the node self-test again and return its outcome."""
    await self_test.run()
    status_code = 200 if self_test.self_test_success else 503
    return JSONResponse(status_code=status_code, content=self_test.to_dict())
