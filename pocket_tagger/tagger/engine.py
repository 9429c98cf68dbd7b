"""
Tagging engine loading.

The engine itself (rule syntax and evaluation) lives outside this project.
It is built by a factory called as factory(regexes, rules, cache) and found
by a "module:callable" import path.
"""
from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping, Optional

from pocket_tagger.core.interfaces import TaggingEngine
from pocket_tagger.core.types import ConfigurationError

logger = logging.getLogger(__name__)

EngineFactory = Callable[
    [Mapping[str, Any], Mapping[str, Any], Optional[Any]], TaggingEngine
]


def load_engine_factory(path: str) -> EngineFactory:
    """
    Import the engine factory named by `path`.

    Raises:
        ConfigurationError: If the path is empty, malformed, or does not
            resolve to a callable.
    """
    if not path:
        raise ConfigurationError(
            "No tagging engine configured",
            context={"setting": "POCKET_TAGGER_ENGINE"},
        )

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Engine path must look like 'module:callable', got {path!r}"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import engine module {module_name!r}: {e}"
        ) from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(
            f"Engine factory {path!r} is missing or not callable"
        )

    logger.debug("Loaded tagging engine factory", extra={"engine": path})
    return factory
