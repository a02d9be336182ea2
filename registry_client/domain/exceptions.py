"""Domain exceptions for the schema registry client.

The resolution cache never catches these: transport failures reach the
caller that triggered the miss exactly as the transport raised them.
"""

from typing import Any


class SchemaRegistryException(Exception):
    """Base exception for all schema registry client errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. status, subject).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class TransportError(SchemaRegistryException):
    """The registry answered with a non-success status (e.g. 404, 409, 422)."""

    def __init__(self, status: int, body: Any = None) -> None:
        """Initialize with HTTP status and decoded (or raw) response body.

        Args:
            status: HTTP status code returned by the registry.
            body: Response body; registry errors are usually
                {"error_code": ..., "message": ...}.
        """
        self.status = status
        self.body = body
        super().__init__(
            f"HTTP error: {status} - {body}",
            "TRANSPORT_ERROR",
            {"status": status, "body": body},
        )

    @property
    def registry_error_code(self) -> int | None:
        """Registry-specific error code from the body, when present (e.g. 40401)."""
        if isinstance(self.body, dict):
            code = self.body.get("error_code")
            return code if isinstance(code, int) else None
        return None


class NetworkError(SchemaRegistryException):
    """The registry could not be reached (connection refused, timeout, DNS)."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Network error: {reason}",
            "NETWORK_ERROR",
            {"reason": reason},
        )


class KeyEncodingError(SchemaRegistryException):
    """Input could not be canonicalized into a cache key (e.g. circular metadata)."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Cannot encode cache key: {reason}",
            "KEY_ENCODING_ERROR",
            {"reason": reason},
        )
