"""
Store-level errors raised by repository implementations.

Adapters translate driver exceptions into these so use cases never
import SQLAlchemy.
"""

from typing import Any, Dict, Optional


class RepositoryError(Exception):
    """Base class for failures raised by the identity store."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class DuplicateRecordError(RepositoryError):
    """Raised when a uniqueness constraint rejects a write."""


class StoreUnavailableError(RepositoryError):
    """Raised when the store cannot be reached or the connection was lost."""


__all__ = ["RepositoryError", "DuplicateRecordError", "StoreUnavailableError"]
