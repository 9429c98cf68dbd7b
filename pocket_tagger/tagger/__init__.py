"""
Pocket Tagger Pipeline

Re-exports:
    - PocketTagger: Fetch -> tag -> persist orchestrator
    - create_tagger: Builds a PocketTagger from an account name
    - build_actions: Outcome -> action derivation
    - load_engine_factory: Resolves a "module:callable" engine factory

Usage:
    from pocket_tagger.tagger import create_tagger

    async with await create_tagger("default", regexes, rules) as tagger:
        stats = await tagger.run()
"""
from pocket_tagger.tagger.actions import build_actions, chunked, to_action
from pocket_tagger.tagger.engine import EngineFactory, load_engine_factory
from pocket_tagger.tagger.pipeline import PocketTagger, create_tagger

__all__ = [
    "EngineFactory",
    "PocketTagger",
    "build_actions",
    "chunked",
    "create_tagger",
    "load_engine_factory",
    "to_action",
]
