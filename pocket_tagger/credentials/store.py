"""
Local Credential Store

Reads Pocket credentials from an INI file, one section per account:

    [default]
    consumer_key = 1234-abcd
    access_token = 5678-efgh
"""
from __future__ import annotations

import asyncio
import configparser
import logging
from pathlib import Path

from pocket_tagger.config import DEFAULT_CREDENTIALS_PATH
from pocket_tagger.core.types import CredentialError
from pocket_tagger.models.credentials import Credentials

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("consumer_key", "access_token")


class LocalCredentials:
    """Credential store backed by a local INI file."""

    def __init__(self, path: str | Path = DEFAULT_CREDENTIALS_PATH) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, account: str) -> Credentials:
        """
        Resolve an account name to its credentials.

        Raises:
            CredentialError: If the file is unreadable, or the account or
                one of its keys is missing.
        """
        return await asyncio.to_thread(self._read, account)

    def _read(self, account: str) -> Credentials:
        parser = configparser.ConfigParser(interpolation=None)
        try:
            with self._path.open(encoding="utf-8") as fh:
                parser.read_file(fh)
        except OSError as e:
            raise CredentialError(
                f"Cannot read credentials file: {e.strerror or e}",
                account=account,
                context={"path": str(self._path)},
            ) from e
        except configparser.Error as e:
            raise CredentialError(
                "Malformed credentials file",
                account=account,
                context={"path": str(self._path)},
            ) from e

        if not parser.has_section(account):
            raise CredentialError(
                "No credentials for account",
                account=account,
                context={"path": str(self._path)},
            )

        section = parser[account]
        missing = [key for key in _REQUIRED_KEYS if not section.get(key)]
        if missing:
            raise CredentialError(
                f"Credentials missing {', '.join(missing)}",
                account=account,
                context={"path": str(self._path)},
            )

        logger.debug(
            "Loaded Pocket credentials",
            extra={"account": account, "path": str(self._path)},
        )
        return Credentials(
            consumer_key=section["consumer_key"],
            access_token=section["access_token"],
        )
