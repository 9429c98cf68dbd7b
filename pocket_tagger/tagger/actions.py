"""
Persist Action Derivation

Pure functions that turn tagging outcomes into Pocket modify actions and
split them into send-sized chunks. No I/O.
"""
from __future__ import annotations

from typing import Mapping, Sequence, TypeVar

from pocket_tagger.models.tagging import (
    SENTINEL_TAG,
    ClearTags,
    Failed,
    ReplaceTags,
    TagAction,
    Tagged,
    TagOutcome,
    TagStats,
)

T = TypeVar("T")


def to_action(item_id: str, outcome: TagOutcome) -> TagAction:
    """Map one outcome to its action. Failures become the sentinel tag."""
    if isinstance(outcome, Failed):
        return ReplaceTags(item_id, (SENTINEL_TAG,))
    if not outcome.tags:
        return ClearTags(item_id)
    return ReplaceTags(item_id, tuple(outcome.tags))


def build_actions(
    outcomes: Mapping[str, TagOutcome],
) -> tuple[list[TagAction], TagStats]:
    """
    Derive one action per article, in the mapping's iteration order.

    Stats count only Tagged outcomes: urls is how many there were, tags is the
    sum of their tag-list lengths.
    """
    stats = TagStats()
    actions: list[TagAction] = []

    for item_id, outcome in outcomes.items():
        actions.append(to_action(item_id, outcome))
        if isinstance(outcome, Tagged):
            stats.urls += 1
            stats.tags += len(outcome.tags)

    return actions, stats


def chunked(items: Sequence[T], size: int) -> list[Sequence[T]]:
    """Contiguous slices of at most `size` items, order preserved."""
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    return [items[i:i + size] for i in range(0, len(items), size)]
