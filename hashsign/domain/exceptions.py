"""Base exception classes for the HashSign domain layer."""

from __future__ import annotations

from typing import Any


class HashSignError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application.

    Subclasses override the class attributes below so that the API edge can
    render any error as an RFC 7807 problem document without knowing the
    concrete type.

    Attributes:
        problem_type: Stable URN identifying the error kind.
        title: Short human-readable summary of the error kind.
        status: HTTP status code the API edge should use.
        abort_code: Ledger abort name for errors raised by a transition,
            None for errors that never cross the ledger boundary.
    """

    problem_type: str = "urn:hashsign:error"
    title: str = "HashSign Error"
    status: int = 500
    abort_code: str | None = None

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        """Return error-specific fields added to the problem document."""
        return {}

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        result: dict[str, Any] = {
            "type": self.problem_type,
            "title": self.title,
            "status": self.status,
            "detail": str(self),
        }
        result.update(self.problem_extensions())
        return result
