"""
Credential Store Module

Resolves account names to Pocket credentials from a local file.
"""
from pocket_tagger.credentials.store import LocalCredentials

__all__ = [
    "LocalCredentials",
]
