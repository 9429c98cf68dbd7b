"""
Tests for pocket_tagger.credentials.store
"""
import pytest

from pocket_tagger.core.types import CredentialError
from pocket_tagger.credentials import LocalCredentials
from pocket_tagger.models import Credentials


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "credentials"
    path.write_text(
        "[default]\n"
        "consumer_key = 1234-abcd\n"
        "access_token = 5678-efgh\n"
        "\n"
        "[work]\n"
        "consumer_key = 9999-work\n"
        "access_token = 50%-off\n"
        "\n"
        "[broken]\n"
        "consumer_key = only-a-key\n",
        encoding="utf-8",
    )
    return path


async def test_get_reads_default_account(credentials_file):
    store = LocalCredentials(credentials_file)

    assert await store.get("default") == Credentials("1234-abcd", "5678-efgh")


async def test_get_reads_named_account_without_interpolation(credentials_file):
    store = LocalCredentials(credentials_file)

    creds = await store.get("work")

    assert creds.consumer_key == "9999-work"
    assert creds.access_token == "50%-off"


async def test_unknown_account_raises(credentials_file):
    with pytest.raises(CredentialError, match="No credentials") as exc_info:
        await LocalCredentials(credentials_file).get("nobody")
    assert exc_info.value.account == "nobody"


async def test_missing_key_raises(credentials_file):
    with pytest.raises(CredentialError, match="access_token"):
        await LocalCredentials(credentials_file).get("broken")


async def test_missing_file_raises(tmp_path):
    with pytest.raises(CredentialError, match="Cannot read"):
        await LocalCredentials(tmp_path / "nope").get("default")


async def test_malformed_file_raises(tmp_path):
    path = tmp_path / "credentials"
    path.write_text("consumer_key = no section header\n", encoding="utf-8")

    with pytest.raises(CredentialError, match="Malformed"):
        await LocalCredentials(path).get("default")


def test_path_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    store = LocalCredentials("~/.pocket/credentials")

    assert store.path == tmp_path / ".pocket" / "credentials"


def test_credentials_repr_hides_token():
    assert "5678" not in repr(Credentials("1234", "5678"))
