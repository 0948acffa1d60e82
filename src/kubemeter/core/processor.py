# src/kubemeter/core/processor.py
import dataclasses
import logging
import re
from typing import Dict, List, Optional, Tuple

from ..collectors.base_collector import ResourceMetadataProvider, TimeSeriesBackend
from ..core.aggregator import aggregate_result
from ..core.catalog import TemplateCatalog, default_catalog, is_meter
from ..core.compiler import ExpressionCompiler
from ..core.exceptions import NoHit, ParseError, QueryParameterError
from ..core.executor import QueryExecutor
from ..core.sorter import page_metrics, sort_metrics
from ..core.time_range import resolve_query_options
from ..models.level import Level
from ..models.metrics import Metric, MetricData, MetricResult
from ..models.options import LevelOption, QueryOptions
from ..models.params import QueryParams
from ..models.pricing import PriceInfo

logger = logging.getLogger(__name__)

CUSTOM_QUERY_NAME = "custom_query"

GROUPED_LEVELS = (Level.APPLICATION, Level.OPENPITRIX, Level.SERVICE)


class MonitoringProcessor:
    """Orchestrates option resolution, compilation, execution and post-processing."""

    def __init__(
        self,
        backend: TimeSeriesBackend,
        metadata_provider: Optional[ResourceMetadataProvider] = None,
        catalog: Optional[TemplateCatalog] = None,
        compiler: Optional[ExpressionCompiler] = None,
        executor: Optional[QueryExecutor] = None,
    ):
        self.backend = backend
        self.metadata_provider = metadata_provider
        self.catalog = catalog or default_catalog()
        self.compiler = compiler or ExpressionCompiler(self.catalog)
        self.executor = executor or QueryExecutor(backend)

    async def query_named_metrics(self, params: QueryParams, level: Level) -> MetricResult:
        """
        Queries every catalog metric of ``level`` matching the metrics filter.
        Meters are never part of a metric query.
        """
        try:
            q = await resolve_query_options(params, level, self.catalog, self.metadata_provider)
        except NoHit:
            return self._no_hit(level, params, meters=False)

        names = self._select(q, meters=False)
        if not names:
            return MetricResult()

        exprs = {name: self.compiler.make_expr(name, q.option) for name in names}
        result = MetricResult(results=await self._execute(q, exprs))
        if not q.is_range_query() and q.should_sort():
            sort_metrics(result, q.target, q.order, q.identifier)
            page_metrics(result, q.page, q.limit)
        return result

    async def query_named_meters(
        self,
        params: QueryParams,
        level: Level,
        price_info: PriceInfo,
        scaling_map: Optional[Dict[str, int]] = None,
    ) -> MetricResult:
        """
        Queries the meters of ``level`` and prices them with ``price_info``.

        Application, release and service meters run once per group; the group
        results are merged by meter name.
        """
        try:
            q = await resolve_query_options(
                params, level, self.catalog, self.metadata_provider, price_info=price_info
            )
        except NoHit:
            return self._no_hit(level, params, meters=True)

        names = self._select(q, meters=True)
        if not names:
            return MetricResult()

        if level in GROUPED_LEVELS:
            options = await self._group_options(q.option, params)
        else:
            options = [q.option]

        result = MetricResult()
        index: Dict[str, int] = {}
        for option in options:
            exprs = {name: self.compiler.make_expr(name, option, q.meter_options) for name in names}
            self._merge(result, index, await self._execute(q, exprs))

        if not q.is_range_query() and q.should_sort():
            sort_metrics(result, q.target, q.order, q.identifier)
            page_metrics(result, q.page, q.limit)

        return aggregate_result(result, price_info, scaling_map)

    async def query_expression(self, expr: str, params: QueryParams) -> MetricResult:
        """Runs an ad-hoc PromQL expression with the same time resolution as named queries."""
        try:
            q = await resolve_query_options(params, Level.CLUSTER, self.catalog, self.metadata_provider)
        except NoHit:
            return MetricResult(results=[Metric(name=CUSTOM_QUERY_NAME)])
        return MetricResult(results=await self._execute(q, {CUSTOM_QUERY_NAME: expr}))

    def _select(self, q: QueryOptions, meters: bool) -> List[str]:
        try:
            pattern = re.compile(q.metric_filter)
        except re.error as e:
            raise ParseError(f"Invalid metrics filter '{q.metric_filter}': {e}") from e
        return [name for name in q.named_metrics if is_meter(name) == meters and pattern.search(name)]

    def _no_hit(self, level: Level, params: QueryParams, meters: bool) -> MetricResult:
        """Every selected name with no data: the window precedes the namespace."""
        names = self.catalog.named_metrics(level, params.component)
        results = [Metric(name=name, data=MetricData()) for name in names if is_meter(name) == meters]
        logger.info("Query window precedes namespace '%s'; returning empty metrics", params.namespace)
        return MetricResult(results=results)

    async def _execute(self, q: QueryOptions, exprs: Dict[str, str]) -> List[Metric]:
        if q.is_range_query():
            return await self.executor.get_named_metrics_over_time(exprs, q.start, q.end, q.step)
        return await self.executor.get_named_metrics(exprs, q.time)

    async def _group_options(self, option: LevelOption, params: QueryParams) -> List[LevelOption]:
        """Expands an application, release or service option into one option per group."""
        if not params.namespace:
            raise QueryParameterError(f"Parameter 'namespace' is required for {option.level.value} meters.")
        if self.metadata_provider is None:
            raise QueryParameterError(f"No metadata provider to resolve {option.level.value} members.")

        if option.level == Level.SERVICE:
            groups = await self._lookup(
                params.service_list, "services", self.metadata_provider.get_service_pods, params.namespace
            )
            return [dataclasses.replace(option, service_name=name, pods=tuple(pods)) for name, pods in groups]

        if option.level == Level.OPENPITRIX:
            groups = await self._lookup(
                params.openpitrix_list, "openpitrix_ids", self.metadata_provider.get_release_components, params.namespace
            )
        else:
            groups = await self._lookup(
                params.application_list, "applications", self.metadata_provider.get_app_components, params.namespace
            )
        return [
            dataclasses.replace(option, application_name=name, components=tuple(components))
            for name, components in groups
        ]

    @staticmethod
    async def _lookup(names: List[str], param: str, lookup, namespace: str) -> List[Tuple[str, List[str]]]:
        if not names:
            raise QueryParameterError(f"Parameter '{param}' must name at least one group.")
        members = await lookup(namespace, names)
        groups = []
        for name in names:
            if not members.get(name):
                # An empty alternation would select every series without the label.
                logger.warning("Skipping '%s' in namespace '%s': no members found", name, namespace)
                continue
            groups.append((name, members[name]))
        return groups

    @staticmethod
    def _merge(result: MetricResult, index: Dict[str, int], metrics: List[Metric]):
        """Merges one group's metrics into ``result`` by metric name."""
        for metric in metrics:
            pos = index.get(metric.name)
            if pos is None:
                index[metric.name] = len(result.results)
                result.results.append(metric)
                continue
            existing = result.results[pos]
            if existing.data.type is None:
                existing.data.type = metric.data.type
            existing.data.values.extend(metric.values)

    async def close(self):
        """Closes the backend and metadata clients."""
        await self.backend.close()
        if self.metadata_provider is not None:
            await self.metadata_provider.close()
