"""
Core types, exceptions and collaborator interfaces.
"""
from pocket_tagger.core.types import (
    AuthenticationError,
    ConfigurationError,
    CredentialError,
    FetchError,
    PersistError,
    PocketTaggerError,
    TaggingError,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "CredentialError",
    "FetchError",
    "PersistError",
    "PocketTaggerError",
    "TaggingError",
]
