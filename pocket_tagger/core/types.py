"""
Core Type Definitions and Exceptions

Service-specific exceptions following fail-fast patterns. Only TaggingError is
ever absorbed (by the tagging stage); everything else propagates to the caller.
"""
from __future__ import annotations

from typing import Any, Optional


class PocketTaggerError(Exception):
    """Base exception for all pocket tagger errors."""

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(PocketTaggerError):
    """Raised when required configuration is missing or invalid."""


class CredentialError(PocketTaggerError):
    """Raised when an account's Pocket credentials cannot be resolved."""

    def __init__(
        self,
        message: str,
        account: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        if account is not None:
            ctx["account"] = account
        super().__init__(message, ctx)
        self.account = account


class AuthenticationError(PocketTaggerError):
    """Raised when the remote service rejects the credentials."""

    def __init__(
        self,
        message: str,
        service: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["service"] = service
        super().__init__(message, ctx)
        self.service = service


class FetchError(PocketTaggerError):
    """Raised when retrieving articles from Pocket fails."""


class TaggingError(PocketTaggerError):
    """Raised when the tagging engine fails for a single article."""

    def __init__(
        self,
        message: str,
        item_id: str,
        url: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["item_id"] = item_id
        ctx["url"] = url
        super().__init__(message, ctx)
        self.item_id = item_id
        self.url = url


class PersistError(PocketTaggerError):
    """Raised when a send call to Pocket fails."""

    def __init__(
        self,
        message: str,
        batch_size: int,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["batch_size"] = batch_size
        super().__init__(message, ctx)
        self.batch_size = batch_size
