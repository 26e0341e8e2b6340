"""Error types raised while fetching and normalizing cloud resources.

Every failure surfaced by a fetcher derives from :class:`FetchError` so
callers can catch one type and still inspect what went wrong.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from botocore.exceptions import ClientError


class FetchError(Exception):
    """Base exception for fetch failures.

    Usage:
        raise FetchError("Listing failed")
        raise FetchError("Listing failed", details={"bucket": "logs"})
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        response: Dict[str, Any] = {"error": self.message, "type": type(self).__name__}
        if self.details:
            response["details"] = self.details
        return response


class RemoteCallError(FetchError):
    """Raised when a listing or location call against AWS fails."""

    def __init__(self, operation: str, error_code: str = "Unknown", message: Optional[str] = None):
        self.operation = operation
        self.error_code = error_code
        super().__init__(
            message or f"{operation} failed: {error_code}",
            details={"operation": operation, "error_code": error_code},
        )

    @classmethod
    def from_exception(cls, operation: str, exc: Exception) -> "RemoteCallError":
        """Build from a botocore exception, keeping its error code."""
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code", "Unknown")
            return cls(operation, code, f"{operation} failed: {exc}")
        return cls(operation, type(exc).__name__, f"{operation} failed: {exc}")


class NormalizationError(FetchError):
    """Raised when a raw item cannot be mapped to a graph node."""

    def __init__(self, kind: str, reason: str = "unsupported resource kind"):
        self.kind = kind
        super().__init__(f"cannot normalize '{kind}': {reason}", details={"kind": kind})


class SharedFetchError(FetchError):
    """Raised to every caller of a shared fetch whose single execution failed."""

    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        super().__init__(
            f"shared fetch '{name}' failed: {cause}",
            details={"name": name, "cause": type(cause).__name__},
        )
