"""
Market Analysis Orchestrator - Sequential Multi-Market Runs
===========================================================

ARCHITECTURAL DECISION:
- One task per target market, consumed in order by a single worker
- A fixed pause between tasks (not after the last) keeps the upstream API
  under its rate limit
- Each market gets its own future, so a later version can run several
  workers under a concurrency cap without changing the result mapping

Provider calls are blocking (requests), so they run in a worker thread and
the event loop keeps serving other requests meanwhile. There is no overall
timeout: a run always finishes every market, even when the caller stops
waiting (a client that disconnects cancels only its own futures).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from goglobal.domain.models import MarketAnalysisResult, ProductInput
from goglobal.domain.provider import AnalysisProvider

logger = logging.getLogger(__name__)


@dataclass
class MarketTask:
    """One market waiting to be analyzed."""

    market: str
    future: asyncio.Future


class MarketAnalysisOrchestrator:
    """
    Runs one provider over every target market of a product.

    USAGE:
        orchestrator = MarketAnalysisOrchestrator(provider, delay_seconds=1.0)
        results = await orchestrator.analyze_product(product)
        print(results["Germany"].overall_score)
    """

    def __init__(
        self,
        provider: AnalysisProvider,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._provider = provider
        self._delay = max(0.0, delay_seconds)
        self._sleep = sleep
        self._workers: set[asyncio.Task] = set()

    @property
    def provider(self) -> AnalysisProvider:
        return self._provider

    def schedule(self, product: ProductInput) -> dict[str, asyncio.Future]:
        """
        Queue every target market and start the worker.

        Returns:
            market name -> future resolving to that market's result.
            Duplicate market names are analyzed once.
        """
        loop = asyncio.get_running_loop()
        markets = list(dict.fromkeys(product.target_markets))
        tasks = [MarketTask(market, loop.create_future()) for market in markets]

        worker = loop.create_task(self._work(product, tasks))
        self._workers.add(worker)
        worker.add_done_callback(self._workers.discard)

        return {task.market: task.future for task in tasks}

    async def analyze_product(self, product: ProductInput) -> dict[str, MarketAnalysisResult]:
        """
        Analyze every target market and return results keyed by market.

        Cancelling this coroutine cancels only the future it is awaiting;
        the worker keeps analyzing the remaining markets.
        """
        logger.info(
            f"Starting {self._provider.name} analysis of '{product.product_name}' "
            f"for {len(product.target_markets)} markets"
        )
        futures = self.schedule(product)

        results: dict[str, MarketAnalysisResult] = {}
        for market, future in futures.items():
            results[market] = await future

        logger.info(f"Completed analysis for all {len(results)} markets")
        return results

    async def _work(self, product: ProductInput, tasks: list[MarketTask]) -> None:
        try:
            for index, task in enumerate(tasks):
                result = await self._analyze_one(product, task.market)
                # Already cancelled when the caller gave up waiting
                if not task.future.done():
                    task.future.set_result(result)

                if index < len(tasks) - 1 and self._delay > 0:
                    await self._sleep(self._delay)
        except asyncio.CancelledError:
            for task in tasks:
                task.future.cancel()
            raise
        except Exception as e:
            # Waiters must not hang on markets the worker never reached
            for task in tasks:
                if not task.future.done():
                    task.future.set_exception(e)

    async def _analyze_one(self, product: ProductInput, market: str) -> MarketAnalysisResult:
        logger.info(f"Analyzing market: {market}")
        try:
            return await asyncio.to_thread(self._provider.analyze_market, product, market)
        except Exception as e:
            logger.exception(f"Provider {self._provider.name} failed for {market}: {e}")
            return MarketAnalysisResult.fallback(market)
