"""
Collaborator Protocol Definitions

Interfaces the pipeline depends on. The concrete Pocket client and credential
store satisfy these, and so do the AsyncMock doubles used in tests. The tagging
engine is always supplied from outside.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from pocket_tagger.models.credentials import Credentials


@runtime_checkable
class PocketService(Protocol):
    """Remote read-it-later service."""

    async def get(
        self,
        count: int,
        state: str = "unread",
        sort: str = "newest",
    ) -> dict[str, Any]:
        """
        Retrieve saved items.

        Returns the raw response; items live under "list", keyed by item id.
        """
        ...

    async def send(self, actions: Sequence[dict[str, Any]]) -> dict[str, Any]:
        """Apply a batch of modify actions. The acknowledgement is not inspected."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class TaggingEngine(Protocol):
    """Rule-matching engine that maps a URL to an ordered list of tags."""

    async def run(self, url: str) -> Sequence[str]:
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Resolves an account name to its Pocket credentials."""

    async def get(self, account: str) -> Credentials:
        ...
