"""
Pocket Tagger Pipeline

Main orchestrator: fetch unread articles, tag each URL, and write the tags
back to Pocket, replacing whatever was there.

    fetch_articles -> fetch_tags -> build_actions -> persist

Each stage materializes its full output before the next one starts. Only
tagging failures are recovered (as Failed outcomes, persisted with the
sentinel tag); every other error aborts the run.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import math
from typing import Any, Mapping, Optional, Sequence

from pocket_tagger.config import PipelineConfig, Settings, load_settings
from pocket_tagger.core.interfaces import CredentialStore, PocketService, TaggingEngine
from pocket_tagger.core.types import ConfigurationError, TaggingError
from pocket_tagger.credentials import LocalCredentials
from pocket_tagger.models.tagging import Failed, TagAction, Tagged, TagOutcome, TagStats
from pocket_tagger.pocket_client import PocketClient
from pocket_tagger.tagger.actions import build_actions, chunked
from pocket_tagger.tagger.engine import EngineFactory, load_engine_factory

logger = logging.getLogger(__name__)


class PocketTagger:
    """
    Tagging pipeline over an injected Pocket client and tagging engine.

    Holds no state between runs. The client and engine are shared by all
    concurrent calls within a run and are assumed safe for that.
    """

    def __init__(
        self,
        client: PocketService,
        engine: TaggingEngine,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        if not inspect.iscoroutinefunction(getattr(engine, "run", None)):
            raise ConfigurationError(
                "Tagging engine run() must be a coroutine function",
                context={"engine": type(engine).__name__},
            )
        self._client = client
        self._engine = engine
        self._config = config or PipelineConfig()

    @property
    def client(self) -> PocketService:
        return self._client

    @property
    def engine(self) -> TaggingEngine:
        return self._engine

    @property
    def config(self) -> PipelineConfig:
        return self._config

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> PocketTagger:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    # ── Fetch ─────────────────────────────────────────────────────────────────

    async def fetch_articles(self, count: Optional[int] = None) -> dict[str, str]:
        """Retrieve unread articles, newest first, as an item id -> URL map."""
        if count is None:
            count = self._config.fetch_count
        elif count < 1:
            raise ValueError(f"count must be positive, got {count}")

        response = await self._client.get(count=count, state="unread", sort="newest")

        # Pocket sends "list": [] rather than {} when nothing matches
        items = response.get("list") or {}
        articles = {
            item_id: item.get("resolved_url") or item.get("given_url", "")
            for item_id, item in items.items()
        }

        logger.info(
            f"Fetched {len(articles)} unread articles",
            extra={"requested": count, "fetched": len(articles)},
        )
        return articles

    # ── Tag ───────────────────────────────────────────────────────────────────

    async def fetch_tags(self, articles: Mapping[str, str]) -> dict[str, TagOutcome]:
        """
        Run the engine on every article concurrently.

        All invocations start before any is awaited, and the call returns only
        once every one has finished. Exactly one outcome per article.
        """
        if not articles:
            return {}

        item_ids = list(articles)
        outcomes = await asyncio.gather(
            *(self._tag_one(item_id, articles[item_id]) for item_id in item_ids)
        )
        return dict(zip(item_ids, outcomes))

    async def _tag_one(self, item_id: str, url: str) -> TagOutcome:
        try:
            tags = tuple(await self._engine.run(url))
        except Exception as e:
            logger.warning(
                f"Tagging failed for {url}: {e}",
                extra={"item_id": item_id, "url": url, "error": str(e)},
            )
            error = TaggingError(f"Failed to tag article: {e}", item_id=item_id, url=url)
            error.__cause__ = e
            return Failed(error)

        logger.debug(
            f"Tagged {url}",
            extra={"item_id": item_id, "tag_count": len(tags)},
        )
        return Tagged(tags)

    # ── Build ─────────────────────────────────────────────────────────────────

    @staticmethod
    def build_actions(
        outcomes: Mapping[str, TagOutcome],
    ) -> tuple[list[TagAction], TagStats]:
        return build_actions(outcomes)

    # ── Persist ───────────────────────────────────────────────────────────────

    async def persist(self, actions: Sequence[TagAction]) -> None:
        """
        Send actions to Pocket in chunks of at most chunk_size.

        Sequential mode sends one chunk at a time and stops at the first
        failure. Concurrent mode starts every send, waits for all of them, then
        raises the first failure in chunk order. Chunks already applied are
        not rolled back in either mode.
        """
        if not actions:
            logger.debug("No tag actions to persist")
            return

        chunks = chunked(actions, self._config.chunk_size)

        if self._config.sequential_persist:
            for chunk in chunks:
                await self._send_chunk(chunk)
        else:
            results = await asyncio.gather(
                *(self._send_chunk(chunk) for chunk in chunks),
                return_exceptions=True,
            )
            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                logger.error(
                    f"{len(failures)} of {len(chunks)} chunk sends failed",
                    extra={"failed_chunks": len(failures), "chunks": len(chunks)},
                )
                raise failures[0]

        logger.info(
            f"Persisted {len(actions)} tag actions in {len(chunks)} chunk(s)",
            extra={
                "actions": len(actions),
                "chunks": len(chunks),
                "sequential": self._config.sequential_persist,
            },
        )

    async def _send_chunk(self, chunk: Sequence[TagAction]) -> Any:
        return await self._client.send([action.to_dict() for action in chunk])

    # ── Run ───────────────────────────────────────────────────────────────────

    async def run(self, count: Optional[int] = None) -> TagStats:
        """Fetch, tag and persist once. Returns stats over tagged articles."""
        articles = await self.fetch_articles(count)
        outcomes = await self.fetch_tags(articles)
        actions, stats = self.build_actions(outcomes)
        await self.persist(actions)

        logger.info(
            f"Tagging run complete — urls: {stats.urls}, tags: {stats.tags}",
            extra={
                "articles": len(articles),
                "urls": stats.urls,
                "tags": stats.tags,
                "failed": len(outcomes) - stats.urls,
                "chunks": math.ceil(len(actions) / self._config.chunk_size),
            },
        )
        return stats


async def create_tagger(
    account: str,
    regexes: Mapping[str, Any],
    rules: Mapping[str, Any],
    cache: Optional[Any] = None,
    *,
    credentials: Optional[CredentialStore] = None,
    engine_factory: Optional[EngineFactory] = None,
    settings: Optional[Settings] = None,
) -> PocketTagger:
    """
    Build a ready-to-run PocketTagger for `account`.

    This is the only place credentials are resolved.

    Raises:
        CredentialError: If the account's credentials cannot be resolved.
        ConfigurationError: If no usable engine factory is available, or the
            engine it builds has a synchronous run().
    """
    settings = settings or load_settings()
    store = credentials or LocalCredentials(settings.pocket.credentials_path)
    creds = await store.get(account)

    if engine_factory is None:
        engine_factory = load_engine_factory(settings.engine.factory)
    engine = engine_factory(regexes, rules, cache)

    client = PocketClient(
        creds,
        base_url=settings.pocket.api_url,
        timeout_s=settings.pocket.timeout_s,
    )
    tagger = PocketTagger(client, engine, settings.pipeline)
    await client.connect()

    logger.info(
        "PocketTagger initialized",
        extra={
            "account": account,
            "fetch_count": settings.pipeline.fetch_count,
            "chunk_size": settings.pipeline.chunk_size,
            "sequential_persist": settings.pipeline.sequential_persist,
        },
    )
    return tagger
