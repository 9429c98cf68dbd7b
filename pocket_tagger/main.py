"""
pocket-tagger — command line entry point

Fetches unread Pocket articles for an account, tags each one with the
configured tagging engine, and writes the tags back.

Usage:
    pocket-tagger --rules rules.json
    pocket-tagger --rules rules.json --account work --count 50 --sequential
    python -m pocket_tagger --rules rules.json --engine mytags.engine:build

The rules file is JSON with two keys, "regex" and "rules", passed to the
engine factory unchanged.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from pocket_tagger.config import load_settings
from pocket_tagger.core.types import ConfigurationError, PocketTaggerError
from pocket_tagger.models.tagging import TagStats
from pocket_tagger.tagger import create_tagger, load_engine_factory

logger = logging.getLogger("pocket_tagger")

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s — %(message)s"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pocket-tagger",
        description="Tag unread Pocket articles using URL and content rules",
    )
    parser.add_argument("--account", default="default", help="Credential section to use")
    parser.add_argument("--rules", required=True, type=Path, help="JSON file with 'regex' and 'rules'")
    parser.add_argument("--count", type=_positive_int, help="Number of unread articles to fetch")
    parser.add_argument("--chunk-size", type=_positive_int, help="Actions per send request")
    parser.add_argument("--sequential", action="store_true", help="Send chunks one at a time")
    parser.add_argument("--engine", help="Engine factory as module:callable")
    parser.add_argument("--cache", help="Cache handle passed through to the engine")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def load_rules(path: Path) -> tuple[dict[str, Any], dict[str, Any]]:
    """Read the (regexes, rules) pair from a JSON rules file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read rules file: {e.strerror or e}", context={"path": str(path)}
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Rules file is not valid JSON: {e}", context={"path": str(path)}
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Rules file must hold a JSON object", context={"path": str(path)})

    regexes = data.get("regex", {})
    rules = data.get("rules", {})
    if not isinstance(regexes, dict) or not isinstance(rules, dict):
        raise ConfigurationError(
            "'regex' and 'rules' must both be JSON objects", context={"path": str(path)}
        )
    return regexes, rules


async def run(args: argparse.Namespace) -> TagStats:
    settings = load_settings()

    pipeline = settings.pipeline
    if args.count is not None:
        pipeline = replace(pipeline, fetch_count=args.count)
    if args.chunk_size is not None:
        pipeline = replace(pipeline, chunk_size=args.chunk_size)
    if args.sequential:
        pipeline = replace(pipeline, sequential_persist=True)
    settings = replace(settings, pipeline=pipeline)

    regexes, rules = load_rules(args.rules)
    engine_factory = load_engine_factory(args.engine or settings.engine.factory)

    tagger = await create_tagger(
        args.account,
        regexes,
        rules,
        args.cache,
        engine_factory=engine_factory,
        settings=settings,
    )
    async with tagger:
        return await tagger.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(".env")

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        stats = asyncio.run(run(args))
    except PocketTaggerError as e:
        logger.error(f"Tagging run failed: {e}")
        return 1

    logger.info(f"Final — urls tagged: {stats.urls}, tags applied: {stats.tags}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
