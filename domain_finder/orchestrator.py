"""
Throttled batch runner.

Names are looked up in batches of ``concurrency``: lookups inside a batch run
concurrently, each on its own browser page, and batches run one after another
with a fixed pause in between to stay under the search engine's rate limit.
"""

import asyncio
import logging
from collections import Counter
from typing import Any, Callable, List, Optional, Sequence

from domain_finder.batching import batch
from domain_finder.browser_service import BrowserEngine
from domain_finder.config import Config, ConfigurationError
from domain_finder.lookup import lookup
from domain_finder.models import Failed, Outcome
from domain_finder.search import DUCKDUCKGO, SearchProvider

# Initialize logger
log = logging.getLogger(__name__)


class BatchRunner:
    """Runs lookups batch by batch over one shared browser engine."""

    def __init__(self, concurrency: int, delay_ms: int,
                 engine_factory: Optional[Callable[[], Any]] = None,
                 provider: SearchProvider = DUCKDUCKGO):
        """
        Initialize the runner.

        Args:
            concurrency: Number of lookups per batch
            delay_ms: Pause between two batches, in milliseconds
            engine_factory: Callable returning an async context manager that
                yields an engine with ``new_session()``; defaults to a
                headless BrowserEngine
            provider: Search provider to query

        Raises:
            ConfigurationError: If concurrency or delay are out of range
        """
        if concurrency < 1:
            raise ConfigurationError(f"Concurrency must be at least 1, got {concurrency}")
        if delay_ms < 0:
            raise ConfigurationError(f"Delay must not be negative, got {delay_ms}")
        self.concurrency = concurrency
        self.delay_ms = delay_ms
        self.engine_factory = engine_factory or BrowserEngine
        self.provider = provider
        self.stats = Counter()

    @classmethod
    def from_config(cls, config: Config) -> "BatchRunner":
        def engine_factory() -> BrowserEngine:
            return BrowserEngine(
                headless=config.headless,
                nav_timeout_ms=config.nav_timeout_ms,
                user_agent=config.user_agent,
            )

        return cls(config.concurrency, config.delay_ms, engine_factory=engine_factory)

    async def run(self, names: Sequence[str]) -> List[Outcome]:
        """
        Look up every name and return one outcome per name, in input order.

        Per-name failures end up as Failed outcomes; only errors starting or
        stopping the browser engine propagate.
        """
        self.stats.clear()
        self.stats["names"] = len(names)
        results: List[Outcome] = []
        batches = batch(names, self.concurrency)

        async with self.engine_factory() as engine:
            for i, chunk in enumerate(batches, start=1):
                log.info("Processing batch %d of %d...", i, len(batches))
                results.extend(await self._run_batch(engine, chunk))
                self.stats["batches"] += 1

                if i < len(batches):
                    log.info("Batch %d done. Waiting %.1f seconds...", i, self.delay_ms / 1000)
                    await asyncio.sleep(self.delay_ms / 1000)

        for outcome in results:
            if outcome.resolved:
                self.stats["resolved"] += 1
            elif outcome.not_found:
                self.stats["not_found"] += 1
            else:
                self.stats["failed"] += 1
        return results

    async def _run_batch(self, engine, chunk: List[str]) -> List[Outcome]:
        sessions = await asyncio.gather(
            *(engine.new_session() for _ in chunk), return_exceptions=True
        )
        try:
            outcomes = await asyncio.gather(
                *(self._lookup(session, name) for session, name in zip(sessions, chunk))
            )
        finally:
            await self._close_sessions(sessions)
        return list(outcomes)

    async def _lookup(self, session, name: str) -> Outcome:
        if isinstance(session, BaseException):
            log.error('Could not open a browser page for "%s": %s', name, session)
            return Outcome(name, Failed(str(session)))
        return await lookup(session, name, self.provider)

    async def _close_sessions(self, sessions) -> None:
        opened = [s for s in sessions if not isinstance(s, BaseException)]
        closed = await asyncio.gather(*(s.close() for s in opened), return_exceptions=True)
        for result in closed:
            if isinstance(result, Exception):
                log.warning("Error closing browser page: %s", result)
