"""
Tests for pocket_tagger.pocket_client.client

aiohttp.ClientSession is replaced with a MagicMock — no live Pocket API.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from pocket_tagger.core.types import AuthenticationError, FetchError, PersistError
from pocket_tagger.models import Credentials
from pocket_tagger.pocket_client import PocketClient


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_session():
    """
    Patch aiohttp.ClientSession so that session.post() is an async context
    manager yielding a mock response. Yields (session, response).
    """
    with patch("pocket_tagger.pocket_client.client.aiohttp.ClientSession") as mock_cls:
        response = MagicMock()
        response.status = 200
        response.headers = {}
        response.raise_for_status = MagicMock()
        response.json = AsyncMock(return_value={"status": 1, "list": {}})

        session = MagicMock()
        session.close = AsyncMock()
        session.post.return_value.__aenter__.return_value = response
        session.post.return_value.__aexit__.return_value = False

        mock_cls.return_value = session
        yield session, response


@pytest.fixture
async def client(mock_session):
    client = PocketClient(
        Credentials("consumer", "access"), base_url="https://pocket.test/v3/"
    )
    await client.connect()
    yield client
    await client.close()


def _response_error(status: int, x_error: str = "") -> aiohttp.ClientResponseError:
    return aiohttp.ClientResponseError(
        request_info=MagicMock(),
        history=(),
        status=status,
        message="error",
        headers={"X-Error": x_error} if x_error else {},
    )


# ── connect() / close() ───────────────────────────────────────────────────────

async def test_connect_sets_accept_header():
    with patch("pocket_tagger.pocket_client.client.aiohttp.ClientSession") as mock_cls:
        client = PocketClient(Credentials("consumer", "access"))
        await client.connect()

    headers = mock_cls.call_args.kwargs["headers"]
    assert headers["X-Accept"] == "application/json"
    assert client.connected


async def test_connect_twice_opens_one_session():
    with patch("pocket_tagger.pocket_client.client.aiohttp.ClientSession") as mock_cls:
        client = PocketClient(Credentials("consumer", "access"))
        await client.connect()
        await client.connect()

    mock_cls.assert_called_once()


async def test_request_before_connect_raises():
    client = PocketClient(Credentials("consumer", "access"))
    with pytest.raises(RuntimeError, match="not connected"):
        await client.get(count=1)


async def test_context_manager_closes_session(mock_session):
    session, _ = mock_session

    async with PocketClient(Credentials("consumer", "access")) as client:
        assert client.connected

    session.close.assert_awaited_once()
    assert not client.connected


# ── get() ─────────────────────────────────────────────────────────────────────

async def test_get_posts_credentials_and_filters(client, mock_session):
    session, response = mock_session
    response.json.return_value = {"list": {"1": {"resolved_url": "http://a"}}}

    result = await client.get(count=25)

    assert result == {"list": {"1": {"resolved_url": "http://a"}}}
    url = session.post.call_args.args[0]
    body = session.post.call_args.kwargs["json"]
    assert url == "https://pocket.test/v3/get"
    assert body == {
        "consumer_key": "consumer",
        "access_token": "access",
        "count": 25,
        "state": "unread",
        "sort": "newest",
        "detailType": "simple",
    }


async def test_get_http_error_raises_fetch_error(client, mock_session):
    _, response = mock_session
    response.status = 503
    response.raise_for_status.side_effect = _response_error(503, "Pocket server issue")

    with pytest.raises(FetchError) as exc_info:
        await client.get(count=1)

    assert exc_info.value.context["status"] == 503
    assert exc_info.value.context["x_error"] == "Pocket server issue"


async def test_get_transport_error_raises_fetch_error(client, mock_session):
    session, _ = mock_session
    session.post.side_effect = aiohttp.ClientConnectionError("refused")

    with pytest.raises(FetchError, match="refused"):
        await client.get(count=1)


async def test_get_timeout_raises_fetch_error(client, mock_session):
    session, _ = mock_session
    session.post.side_effect = asyncio.TimeoutError()

    with pytest.raises(FetchError):
        await client.get(count=1)


async def test_unauthorized_raises_authentication_error(client, mock_session):
    _, response = mock_session
    response.status = 401
    response.headers = {"X-Error": "Invalid consumer key."}

    with pytest.raises(AuthenticationError) as exc_info:
        await client.get(count=1)

    assert exc_info.value.context["x_error"] == "Invalid consumer key."
    assert exc_info.value.context["stage"] == "fetch"
    response.raise_for_status.assert_not_called()


async def test_get_malformed_body_raises_fetch_error(client, mock_session):
    _, response = mock_session
    response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

    with pytest.raises(FetchError, match="Expecting value"):
        await client.get(count=1)


# ── send() ────────────────────────────────────────────────────────────────────

async def test_send_posts_actions(client, mock_session):
    session, response = mock_session
    response.json.return_value = {"status": 1, "action_results": [True]}
    actions = [{"action": "tags_clear", "item_id": "1"}]

    result = await client.send(actions)

    assert result["status"] == 1
    url = session.post.call_args.args[0]
    body = session.post.call_args.kwargs["json"]
    assert url == "https://pocket.test/v3/send"
    assert body["actions"] == actions
    assert body["consumer_key"] == "consumer"


async def test_send_http_error_raises_persist_error(client, mock_session):
    _, response = mock_session
    response.status = 400
    response.raise_for_status.side_effect = _response_error(400)
    actions = [{"action": "tags_clear", "item_id": str(i)} for i in range(3)]

    with pytest.raises(PersistError) as exc_info:
        await client.send(actions)

    assert exc_info.value.batch_size == 3
    assert exc_info.value.context["status"] == 400


async def test_send_forbidden_raises_authentication_error(client, mock_session):
    _, response = mock_session
    response.status = 403

    with pytest.raises(AuthenticationError) as exc_info:
        await client.send([{"action": "tags_clear", "item_id": "1"}])

    assert exc_info.value.context["stage"] == "persist"


async def test_send_malformed_body_raises_persist_error(client, mock_session):
    _, response = mock_session
    response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)

    with pytest.raises(PersistError) as exc_info:
        await client.send([{"action": "tags_clear", "item_id": "1"}])

    assert exc_info.value.batch_size == 1
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
