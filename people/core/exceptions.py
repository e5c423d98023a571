"""Application exception hierarchy."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ApplicationError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    status_code: int = 500

    def __init__(
        self,
        *,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    @property
    def code(self) -> str:
        return self.error_code

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class StorageError(ApplicationError):
    """Raised when the document store fails to serve a request."""


class StorageConnectionError(StorageError):
    """The document store cannot be reached. Fatal for the calling flow."""

    status_code = 503

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(error_code="STORAGE_UNAVAILABLE", message=message, details=details)


class OperationError(StorageError):
    """A single storage operation failed; sibling operations are unaffected."""

    def __init__(self, operation: str, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            error_code="OPERATION_FAILED",
            message=message,
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation


__all__ = [
    "ApplicationError",
    "OperationError",
    "StorageConnectionError",
    "StorageError",
]
