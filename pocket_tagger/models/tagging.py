"""
Tagging Data Models

Data structures for one tagging run: the per-article outcome of the tagging
engine, the persist action derived from it, and the aggregate stats.
All outcome and action models are frozen dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

# Written to Pocket in place of real tags when the engine fails for an article
SENTINEL_TAG = "error-fetching"


@dataclass(frozen=True)
class Tagged:
    """The engine produced a (possibly empty) tag list."""

    tags: tuple[str, ...]


@dataclass(frozen=True)
class Failed:
    """The engine raised for this article."""

    cause: Exception


TagOutcome = Union[Tagged, Failed]


@dataclass(frozen=True)
class ClearTags:
    """Remove every tag from an item."""

    item_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"action": "tags_clear", "item_id": self.item_id}


@dataclass(frozen=True)
class ReplaceTags:
    """Replace an item's tags with the given ordered list."""

    item_id: str
    tags: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.tags:
            raise ValueError("tags must be non-empty, use ClearTags instead")

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": "tags_replace",
            "item_id": self.item_id,
            "tags": ",".join(self.tags),
        }


TagAction = Union[ClearTags, ReplaceTags]


@dataclass
class TagStats:
    """Counts over successfully tagged articles only."""

    urls: int = 0
    tags: int = 0
