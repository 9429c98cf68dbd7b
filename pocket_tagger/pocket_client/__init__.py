"""
Pocket Client Module

HTTP client for the Pocket v3 API.
"""
from pocket_tagger.pocket_client.client import PocketClient

__all__ = [
    "PocketClient",
]
