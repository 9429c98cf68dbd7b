"""
Pocket Tagger Configuration

Centralized configuration. All environment variables MUST be read here;
no os.getenv() calls elsewhere. Settings are built once at startup by
load_settings() and passed explicitly into the pipeline.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from pocket_tagger.core.types import ConfigurationError

DEFAULT_FETCH_COUNT = 500
DEFAULT_CHUNK_SIZE = 20
DEFAULT_API_URL = "https://getpocket.com/v3"
DEFAULT_CREDENTIALS_PATH = "~/.pocket/credentials"
DEFAULT_TIMEOUT_S = 30.0


def _optional_env(name: str, default: str = "") -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(name, default)


def _optional_env_int(name: str, default: int) -> int:
    """Get an optional integer environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: {value}")


def _optional_env_float(name: str, default: float) -> float:
    """Get an optional float environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid number value for {name}: {value}")


def _optional_env_bool(name: str, default: bool) -> bool:
    """Get an optional boolean environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class PipelineConfig:
    """Tuning for the fetch and persist stages."""
    fetch_count: int = DEFAULT_FETCH_COUNT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    sequential_persist: bool = False

    def __post_init__(self) -> None:
        if self.fetch_count < 1:
            raise ConfigurationError(
                f"fetch_count must be positive, got {self.fetch_count}"
            )
        if self.chunk_size < 1:
            raise ConfigurationError(
                f"chunk_size must be positive, got {self.chunk_size}"
            )


@dataclass(frozen=True)
class PocketConfig:
    """Pocket API and credential location."""
    api_url: str = DEFAULT_API_URL
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    timeout_s: float = DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be positive, got {self.timeout_s}"
            )


@dataclass(frozen=True)
class EngineConfig:
    """Tagging engine factory, as a 'module:callable' import path."""
    factory: str = ""


@dataclass(frozen=True)
class Settings:
    """Root configuration container."""
    pocket: PocketConfig = field(default_factory=PocketConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)


def load_settings() -> Settings:
    """Load all settings from environment variables.

    Every value has a default, so an empty environment yields a usable
    Settings apart from the engine factory, which the CLI can also supply.
    """
    pocket = PocketConfig(
        api_url=_optional_env("POCKET_API_URL", DEFAULT_API_URL).rstrip("/"),
        credentials_path=_optional_env(
            "POCKET_CREDENTIALS_PATH", DEFAULT_CREDENTIALS_PATH
        ),
        timeout_s=_optional_env_float("POCKET_TIMEOUT_S", DEFAULT_TIMEOUT_S),
    )

    pipeline = PipelineConfig(
        fetch_count=_optional_env_int(
            "POCKET_TAGGER_FETCH_COUNT", DEFAULT_FETCH_COUNT
        ),
        chunk_size=_optional_env_int(
            "POCKET_TAGGER_CHUNK_SIZE", DEFAULT_CHUNK_SIZE
        ),
        sequential_persist=_optional_env_bool("POCKET_TAGGER_SEQUENTIAL", False),
    )

    engine = EngineConfig(
        factory=_optional_env("POCKET_TAGGER_ENGINE", ""),
    )

    return Settings(
        pocket=pocket,
        pipeline=pipeline,
        engine=engine,
    )
