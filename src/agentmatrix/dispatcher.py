"""Concurrent fan-out of one task across framework x model combinations.

Every combination runs on its own worker thread. The batch returns only
once every combination has settled, and results are materialized into an
index-aligned sequence: position ``i`` always belongs to combination ``i``,
whatever order the workers finish in.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

import httpx

from agentmatrix.exceptions import UnknownFrameworkError
from agentmatrix.frameworks import FrameworkRegistry, default_registry
from agentmatrix.models.config import MatrixConfig
from agentmatrix.models.records import (
    BatchRequest,
    BatchResult,
    Combination,
    CombinationRun,
    ResultRecord,
)
from agentmatrix.pricing import PricingTable
from agentmatrix.providers.adapter import ProviderAdapter, build_adapters

logger = logging.getLogger(__name__)

SettledCallback = Callable[[CombinationRun], None]


class Dispatcher:
    """Run a batch of combinations concurrently without letting one failure
    block the others.

    Usage::

        dispatcher = Dispatcher(build_adapters(config, registry, pricing))
        batch = dispatcher.run_batch("Summarize AI agents", ["langgraph"], ["gpt-41"])
        for run in batch:
            print(run.combination.key, run.record.tokens)
    """

    def __init__(
        self,
        adapters: Mapping[str, ProviderAdapter],
        *,
        max_workers: int | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            adapters: Framework id -> adapter. Read-only during a batch.
            max_workers: Cap on concurrent combinations. None runs every
                combination of a batch at once.
            clock: Monotonic clock used to measure per-combination latency.
        """
        self._adapters = dict(adapters)
        self._max_workers = max_workers
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: MatrixConfig | None = None,
        *,
        registry: FrameworkRegistry | None = None,
        pricing: PricingTable | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> Dispatcher:
        """Wire adapters for every registered framework from one config value.

        Args:
            config: Engine configuration. Defaults to an empty config, which
                sends every combination down the mock path.
            registry: Frameworks to serve. Defaults to the built-in four.
            pricing: Pricing table. Defaults to the built-in catalog with
                ``config.pricing`` layered on top.
            transport: Optional httpx transport shared by every adapter.
        """
        config = config or MatrixConfig()
        registry = registry or default_registry()
        if pricing is None:
            pricing = PricingTable.from_mapping(
                config.pricing,
                fallback_rate=config.fallback_rate,
                base=PricingTable.default(),
            )
        adapters = build_adapters(config, registry, pricing, transport=transport)
        return cls(adapters, max_workers=config.max_workers)

    @property
    def framework_ids(self) -> list[str]:
        return list(self._adapters)

    def run(self, request: BatchRequest, on_settled: SettledCallback | None = None) -> BatchResult:
        """Run a validated BatchRequest."""
        combinations = request.combinations()
        if not combinations:
            return BatchResult(request=request)

        workers = len(combinations)
        if self._max_workers is not None:
            workers = min(workers, self._max_workers)

        runs: list[CombinationRun | None] = [None] * len(combinations)
        logger.debug("Dispatching %d combinations on %d workers", len(combinations), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="agentmatrix") as pool:
            futures: dict[Future[CombinationRun], int] = {
                pool.submit(self._run_one, index, request.task, combination): index
                for index, combination in enumerate(combinations)
            }
            for future in as_completed(futures):
                index = futures[future]
                run = self._settle(future, index, combinations[index])
                runs[index] = run
                if on_settled is not None:
                    self._notify(on_settled, run)

        return BatchResult(request=request, runs=tuple(r for r in runs if r is not None))

    def run_batch(
        self,
        task: str,
        framework_ids: Iterable[str],
        model_ids: Iterable[str],
        on_settled: SettledCallback | None = None,
    ) -> BatchResult:
        """Run ``task`` on every (framework, model) pair.

        Returns exactly one CombinationRun per combination, ordered
        framework-major, model-minor. Never raises for per-combination
        failures.
        """
        request = BatchRequest(
            task=task,
            framework_ids=list(framework_ids),
            model_ids=list(model_ids),
        )
        return self.run(request, on_settled=on_settled)

    def _run_one(self, index: int, task: str, combination: Combination) -> CombinationRun:
        adapter = self._adapters.get(combination.framework_id)
        if adapter is None:
            raise UnknownFrameworkError(combination.framework_id)
        start = self._clock()
        record = adapter.execute(task, combination.model_id)
        latency = round(self._clock() - start, 3)
        return CombinationRun(index=index, combination=combination, record=record, latency=latency)

    @staticmethod
    def _settle(
        future: Future[CombinationRun],
        index: int,
        combination: Combination,
    ) -> CombinationRun:
        try:
            return future.result()
        except Exception as exc:  # dispatch boundary: one combination, one record
            logger.exception("Combination %s failed", combination.key)
            return CombinationRun(
                index=index,
                combination=combination,
                record=ResultRecord.unavailable(str(exc) or "Failed"),
                latency=0.0,
            )

    @staticmethod
    def _notify(callback: SettledCallback, run: CombinationRun) -> None:
        try:
            callback(run)
        except Exception as exc:
            logger.warning("on_settled callback error: %s", exc)
