"""
Pocket credential pair.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    consumer_key: str
    access_token: str

    def __post_init__(self) -> None:
        if not self.consumer_key:
            raise ValueError("consumer_key must be non-empty")
        if not self.access_token:
            raise ValueError("access_token must be non-empty")

    def __repr__(self) -> str:
        return f"Credentials(consumer_key={self.consumer_key!r}, access_token='***')"
