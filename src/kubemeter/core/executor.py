# src/kubemeter/core/executor.py
"""
Runs one backend query per named metric concurrently and merges the
results. The first failure cancels the in-flight siblings and fails the
whole batch.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional

from kubemeter.collectors.base_collector import TimeSeriesBackend
from kubemeter.core.exceptions import BackendQueryError
from kubemeter.core.telemetry import backend_queries, batch_size, failed_batches, tracer
from kubemeter.models.metrics import Metric, MetricData

logger = logging.getLogger(__name__)

INVALID_METRIC_ERROR = "invalid metric name"


class QueryExecutor:
    """
    Fans out expressions to a TimeSeriesBackend. Results come back in
    completion order; any caller-visible order is imposed by sorting.
    """

    def __init__(self, backend: TimeSeriesBackend):
        self.backend = backend

    async def get_named_metrics(self, exprs: Dict[str, str], time: datetime) -> List[Metric]:
        """Runs an instant query at ``time`` for every (name, expression) pair."""

        def _query(expr: str) -> Awaitable[MetricData]:
            return self.backend.instant_query(expr, time)

        return await self._run(exprs, _query, "instant")

    async def get_named_metrics_over_time(
        self,
        exprs: Dict[str, str],
        start: datetime,
        end: datetime,
        step: timedelta,
    ) -> List[Metric]:
        """Runs a range query over [start, end] for every (name, expression) pair."""

        def _query(expr: str) -> Awaitable[MetricData]:
            return self.backend.range_query(expr, start, end, step)

        return await self._run(exprs, _query, "range")

    async def _run(
        self,
        exprs: Dict[str, str],
        query: Callable[[str], Awaitable[MetricData]],
        kind: str,
    ) -> List[Metric]:
        results: List[Metric] = []
        lock = asyncio.Lock()

        async def _fetch(name: str, expr: str):
            with tracer.start_as_current_span("kubemeter.query") as span:
                span.set_attribute("kubemeter.metric", name)
                span.set_attribute("kubemeter.query_kind", kind)
                backend_queries.add(1, {"kind": kind})
                data = await query(expr)
            async with lock:
                results.append(Metric(name=name, data=data))

        tasks = []
        for name, expr in exprs.items():
            if not expr:
                # Unknown templates never reach the backend.
                results.append(Metric(name=name, error=INVALID_METRIC_ERROR))
                continue
            tasks.append(asyncio.create_task(_fetch(name, expr), name=name))

        if not tasks:
            return results
        batch_size.record(len(tasks), {"kind": kind})

        first_error: Optional[BaseException] = None
        failed_metric = None
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                first_error = task.exception()
                failed_metric = task.get_name()
                break

        if pending:
            if first_error is not None:
                logger.debug("Cancelling %d in-flight queries after a failure", len(pending))
                for task in pending:
                    task.cancel()
            # Join the remaining tasks so none outlives the batch.
            await asyncio.gather(*pending, return_exceptions=True)

        if first_error is not None:
            failed_batches.add(1, {"kind": kind})
            logger.error("Query for metric '%s' failed: %s", failed_metric, first_error)
            if isinstance(first_error, BackendQueryError):
                raise first_error
            raise BackendQueryError(f"Query for metric '{failed_metric}' failed: {first_error}") from first_error

        return results
