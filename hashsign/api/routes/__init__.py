"""
API routes for HashSign.

Available routers:
- document: Account, document and content endpoints
- health: Health check endpoints
- metrics: Prometheus scrape endpoint
"""

from hashsign.api.routes.document import router as document_router
from hashsign.api.routes.health import router as health_router
from hashsign.api.routes.metrics import router as metrics_router

__all__: list[str] = ["document_router", "health_router", "metrics_router"]
