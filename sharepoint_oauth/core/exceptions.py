"""Exception hierarchy raised by the SharePoint OAuth client."""

from __future__ import annotations

from typing import Any, Optional


class SharePointError(Exception):
    """Base exception for SharePoint client errors."""


class ConfigurationError(SharePointError):
    """Raised when a required site configuration value is missing or invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class DecodeError(SharePointError):
    """Raised when a context token cannot be decoded."""


class TransportError(SharePointError):
    """Raised when the HTTP request could not be completed."""


class ProtocolError(SharePointError):
    """Raised when the remote endpoint answers with an error or an unusable payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class MissingFieldError(SharePointError):
    """Raised when strict hydration cannot resolve a mapped path."""

    def __init__(self, field: str, path: str) -> None:
        super().__init__(f"Missing property '{field}' (path '{path}') in document")
        self.field = field
        self.path = path


class InvalidCredentialError(SharePointError):
    """Raised when a credential is requested before one was acquired."""


class ExpiredCredentialError(SharePointError):
    """Raised when a credential is past its expiry."""


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "ExpiredCredentialError",
    "InvalidCredentialError",
    "MissingFieldError",
    "ProtocolError",
    "SharePointError",
    "TransportError",
]
