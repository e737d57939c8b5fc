"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        backend: Wiring in use ("memory" or "remote").
    """

    status: str
    backend: str
