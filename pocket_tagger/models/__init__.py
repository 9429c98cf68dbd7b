"""
Pocket Tagger Data Models

Frozen dataclasses shared by the pipeline stages.
"""
from pocket_tagger.models.credentials import Credentials
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

__all__ = [
    "SENTINEL_TAG",
    "ClearTags",
    "Credentials",
    "Failed",
    "ReplaceTags",
    "TagAction",
    "Tagged",
    "TagOutcome",
    "TagStats",
]
