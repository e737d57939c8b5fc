"""FastAPI application entry point for HashSign.

Run with:
    uvicorn hashsign.api.main:app
"""

from dotenv import load_dotenv
from fastapi import FastAPI

from hashsign import __version__
from hashsign.api.dependencies.document import get_hashsign_config
from hashsign.api.middleware.logging_middleware import LoggingMiddleware
from hashsign.api.middleware.metrics_middleware import MetricsMiddleware
from hashsign.api.routes.document import router as document_router
from hashsign.api.routes.health import router as health_router
from hashsign.api.routes.metrics import router as metrics_router
from hashsign.infrastructure.observability import configure_structlog


def create_app() -> FastAPI:
    """Build the application: load .env, configure logging, mount routers."""
    load_dotenv()
    config = get_hashsign_config()
    configure_structlog(environment=config.environment)

    application = FastAPI(
        title="HashSign API",
        description="Multi-party document signing",
        version=__version__,
    )
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(LoggingMiddleware)
    application.include_router(health_router)
    application.include_router(document_router)
    application.include_router(metrics_router)
    return application


app = create_app()
