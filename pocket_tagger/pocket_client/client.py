"""
Pocket API Client

Async client for the Pocket v3 retrieve ("get") and modify ("send") endpoints.
One session per client; every call carries the consumer key and access token
in its JSON body.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import aiohttp

from pocket_tagger.config import DEFAULT_API_URL, DEFAULT_TIMEOUT_S
from pocket_tagger.core.types import AuthenticationError, FetchError, PersistError
from pocket_tagger.models.credentials import Credentials

logger = logging.getLogger(__name__)

_AUTH_FAILURE_STATUSES = (401, 403)

_STAGES = {"get": "fetch", "send": "persist"}


def _error_context(endpoint: str, error: BaseException) -> dict[str, Any]:
    """Pull status and Pocket's X-Error header out of a failed request."""
    ctx: dict[str, Any] = {"endpoint": endpoint}
    if isinstance(error, aiohttp.ClientResponseError):
        ctx["status"] = error.status
        if error.headers and error.headers.get("X-Error"):
            ctx["x_error"] = error.headers["X-Error"]
    return ctx


class PocketClient:
    """
    Pocket v3 API client.

    Usage:
        async with PocketClient(credentials) as client:
            response = await client.get(count=10)
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session: aiohttp.ClientSession | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> None:
        """Open the HTTP session. Calling it twice is a no-op."""
        if self._session is not None:
            return
        self._session = aiohttp.ClientSession(
            headers={"X-Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self._timeout_s),
        )
        logger.debug("PocketClient session opened", extra={"base_url": self._base_url})

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("PocketClient session closed")

    async def __aenter__(self) -> PocketClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    # ── Endpoints ─────────────────────────────────────────────────────────────

    async def get(
        self,
        count: int,
        state: str = "unread",
        sort: str = "newest",
    ) -> dict[str, Any]:
        """
        Retrieve saved items.

        Raises:
            AuthenticationError: If Pocket rejects the credentials.
            FetchError: On any other HTTP or transport failure.
        """
        payload = {
            "count": count,
            "state": state,
            "sort": sort,
            "detailType": "simple",
        }
        try:
            return await self._post("get", payload)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(
                f"Failed to retrieve articles: {e}",
                context=_error_context("get", e),
            ) from e

    async def send(self, actions: Sequence[dict[str, Any]]) -> dict[str, Any]:
        """
        Apply a batch of modify actions.

        Raises:
            AuthenticationError: If Pocket rejects the credentials.
            PersistError: On any other HTTP or transport failure.
        """
        try:
            return await self._post("send", {"actions": list(actions)})
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise PersistError(
                f"Failed to send actions: {e}",
                batch_size=len(actions),
                context=_error_context("send", e),
            ) from e

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        if self._session is None:
            raise RuntimeError("PocketClient is not connected — call connect() first")

        body = {
            "consumer_key": self._credentials.consumer_key,
            "access_token": self._credentials.access_token,
            **payload,
        }
        url = f"{self._base_url}/{endpoint}"

        async with self._session.post(url, json=body) as resp:
            if resp.status in _AUTH_FAILURE_STATUSES:
                raise AuthenticationError(
                    "Pocket rejected the credentials",
                    service="pocket",
                    context={
                        "endpoint": endpoint,
                        "stage": _STAGES.get(endpoint, endpoint),
                        "status": resp.status,
                        "x_error": resp.headers.get("X-Error", ""),
                    },
                )
            resp.raise_for_status()
            # Malformed bodies surface as ValueError (json.JSONDecodeError)
            data: dict[str, Any] = await resp.json()

        logger.debug(f"Pocket {endpoint} ok", extra={"status": resp.status})
        return data
