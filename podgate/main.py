"""Main FastAPI application for the pod gateway."""

# Standard library imports
from contextlib import asynccontextmanager

# Third-party imports
import structlog
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

# Local application imports
from ._version import __version__
from .api import health, peers, pods
from .config import settings
from .dependencies.services import (
    get_health_service,
    get_hyper_client,
    get_peer_database,
    get_self_test_service,
)
from .middleware import RequestLoggingMiddleware
from .models.errors import GatewayException
from .utils.error_handlers import (
    gateway_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from .utils.logging import setup_logging


# Setup logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting pod gateway", version=__version__)

    if settings.hyper_noop:
        logger.warning("hyperd dry-run mode is enabled - no pods will be created")

    if settings.api_debug:
        logger.warning("Debug mode is enabled - disable in production")

    # Load peers before the first request
    peer_db = get_peer_database()
    logger.info("Peer registry ready", peers=len(peer_db))

    # The self-test gates peer discovery writes
    self_test = get_self_test_service()
    await self_test.run()

    health_results = await get_health_service().check_all_services(use_cache=False)
    for service_name, result in health_results.items():
        if result.status.value == "healthy":
            logger.info(
                f"{service_name} health check passed",
                response_time_ms=result.response_time_ms,
            )
        else:
            logger.warning(
                f"{service_name} health check failed",
                status=result.status.value,
                error=result.error,
            )

    logger.info("Pod gateway startup completed")

    yield

    logger.info("Shutting down pod gateway")
    await get_hyper_client().close()
    logger.info("Pod gateway shutdown completed")


app = FastAPI(
    title="Pod Gateway",
    description="Provision sandboxed pods on a local hyperd daemon and exchange peers",
    version=__version__,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
    debug=settings.api_debug,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

# Register global error handlers
app.add_exception_handler(GatewayException, gateway_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router, tags=["health"])
app.include_router(peers.router, tags=["peers"])
app.include_router(pods.router, tags=["pods"])


def run_server():
    api_config = settings.api
    logger.info(f"Starting HTTP server on {api_config.host}:{api_config.port}")
    uvicorn.run(
        "podgate.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
