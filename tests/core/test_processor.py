# tests/core/test_processor.py
"""
Tests for the MonitoringProcessor orchestration with a mocked backend and
metadata provider.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubemeter.core.catalog import default_catalog
from kubemeter.core.exceptions import BackendQueryError, ParseError, QueryParameterError
from kubemeter.core.processor import CUSTOM_QUERY_NAME, MonitoringProcessor
from kubemeter.data.named_metrics import NODE_METRICS
from kubemeter.models.level import Level
from kubemeter.models.metrics import MetricData, MetricType, MetricValue
from kubemeter.models.params import QueryParams
from kubemeter.models.pricing import PriceInfo

NS_CREATED = datetime.fromtimestamp(1585836666, tz=timezone.utc)


def _node_vector(expr, time):
    # Two nodes, with values that depend on the query so sort has work to do.
    base = 2.0 if "cpu" in expr else 1.0
    return MetricData(
        type=MetricType.VECTOR,
        values=[
            MetricValue(labels={"node": "node-a"}, sample=(time.timestamp(), base)),
            MetricValue(labels={"node": "node-b"}, sample=(time.timestamp(), base * 3)),
        ],
    )


@pytest.fixture
def backend():
    mock = MagicMock()
    mock.instant_query = AsyncMock(side_effect=_node_vector)
    mock.range_query = AsyncMock(return_value=MetricData(type=MetricType.MATRIX))
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def provider():
    mock = MagicMock()
    mock.get_creation_time = AsyncMock(return_value=NS_CREATED)
    mock.get_app_components = AsyncMock(
        return_value={"shop": ["Deployment:web", "StatefulSet:db"], "blog": ["Deployment:ghost"], "empty": []}
    )
    mock.get_release_components = AsyncMock(return_value={"rel-1": ["Deployment:rel-1-api"]})
    mock.get_service_pods = AsyncMock(return_value={"front": ["web-1", "web-2"]})
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def processor(backend, provider):
    return MonitoringProcessor(backend=backend, metadata_provider=provider, catalog=default_catalog())


@pytest.mark.asyncio
async def test_named_metrics_skip_meters(processor, backend):
    result = await processor.query_named_metrics(QueryParams(time="1585840000", metrics_filter="node_cpu"), Level.NODE)

    names = {m.name for m in result.results}
    assert names
    assert all(not n.startswith("meter_") for n in names)
    assert all("node_cpu" in n for n in names)
    assert backend.instant_query.await_count == len(names)


@pytest.mark.asyncio
async def test_named_metrics_sorted_and_paged(processor):
    params = QueryParams(
        time="1585840000",
        metrics_filter="^node_cpu_usage$|^node_memory_usage_wo_cache$",
        sort_metric="node_cpu_usage",
        limit="1",
    )
    result = await processor.query_named_metrics(params, Level.NODE)

    assert result.total_items == 2
    assert result.total_pages == 2
    assert result.current_page == 1
    for metric in result.results:
        assert [v.labels["node"] for v in metric.values] == ["node-b"]


@pytest.mark.asyncio
async def test_range_query_is_not_sorted(processor, backend):
    params = QueryParams(start="1585830000", end="1585839999", metrics_filter="^node_cpu_usage$", sort_metric="x")
    result = await processor.query_named_metrics(params, Level.NODE)

    assert result.total_items is None
    backend.range_query.assert_awaited_once()


@pytest.mark.asyncio
async def test_no_hit_returns_named_empty_metrics(processor, backend):
    params = QueryParams(time="1585830000", namespace="dev")
    result = await processor.query_named_metrics(params, Level.NAMESPACE)

    names = [m.name for m in result.results]
    assert names
    assert all(not n.startswith("meter_") for n in names)
    assert all(m.values == [] and m.error is None for m in result.results)
    backend.instant_query.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_filter_match_returns_empty(processor, backend):
    result = await processor.query_named_metrics(QueryParams(metrics_filter="^nothing$"), Level.NODE)
    assert result.results == []
    backend.instant_query.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_metric_filter(processor):
    with pytest.raises(ParseError):
        await processor.query_named_metrics(QueryParams(metrics_filter="node_(cpu"), Level.NODE)


@pytest.mark.asyncio
async def test_backend_failure_fails_batch(processor, backend):
    backend.instant_query.side_effect = BackendQueryError("down")
    with pytest.raises(BackendQueryError):
        await processor.query_named_metrics(QueryParams(), Level.CLUSTER)


@pytest.mark.asyncio
async def test_meters_are_priced(processor, backend):
    price = PriceInfo(currency_unit="USD", cpu_per_core_per_hour=3)
    params = QueryParams(time="1585840000", metrics_filter="cpu_usage")
    result = await processor.query_named_meters(params, Level.NODE, price)

    assert [m.name for m in result.results] == ["meter_node_cpu_usage"]
    fees = sorted(v.fee for v in result.results[0].values)
    assert fees == [6.0, 18.0]
    assert all(v.currency_unit == "USD" and v.resource_unit == "cores" for v in result.results[0].values)
    assert NODE_METRICS.index("meter_node_cpu_usage") > NODE_METRICS.index("node_cpu_usage")


@pytest.mark.asyncio
async def test_application_meters_fan_out_and_merge(processor, backend, provider):
    params = QueryParams(
        time="1585840000", namespace="dev", applications="shop,blog,empty", metrics_filter="cpu_usage"
    )
    result = await processor.query_named_meters(params, Level.APPLICATION, PriceInfo())

    provider.get_app_components.assert_awaited_once_with("dev", ["shop", "blog", "empty"])
    # One batch per application with members; 'empty' is skipped.
    assert backend.instant_query.await_count == 2
    exprs = [c.args[0] for c in backend.instant_query.await_args_list]
    assert any('workload=~"Deployment:web|StatefulSet:db"' in e for e in exprs)
    assert any('workload=~"Deployment:ghost"' in e for e in exprs)

    assert [m.name for m in result.results] == ["meter_application_cpu_usage"]
    assert len(result.results[0].values) == 4


@pytest.mark.asyncio
async def test_service_meters_use_service_pods(processor, backend, provider):
    params = QueryParams(time="1585840000", namespace="dev", services="front", metrics_filter="cpu_usage")
    await processor.query_named_meters(params, Level.SERVICE, PriceInfo())

    provider.get_service_pods.assert_awaited_once_with("dev", ["front"])
    expr = backend.instant_query.await_args.args[0]
    assert 'pod=~"web-1|web-2"' in expr
    assert '"front"' in expr


@pytest.mark.asyncio
async def test_openpitrix_meters_use_release_components(processor, provider):
    params = QueryParams(time="1585840000", namespace="dev", openpitrix_ids="rel-1", metrics_filter="cpu_usage")
    result = await processor.query_named_meters(params, Level.OPENPITRIX, PriceInfo())

    provider.get_release_components.assert_awaited_once_with("dev", ["rel-1"])
    assert [m.name for m in result.results] == ["meter_application_cpu_usage"]


@pytest.mark.asyncio
async def test_grouped_meters_require_namespace_and_names(processor):
    with pytest.raises(QueryParameterError):
        await processor.query_named_meters(QueryParams(applications="shop"), Level.APPLICATION, PriceInfo())
    with pytest.raises(QueryParameterError):
        await processor.query_named_meters(QueryParams(namespace="dev"), Level.SERVICE, PriceInfo())


@pytest.mark.asyncio
async def test_query_expression(processor, backend):
    result = await processor.query_expression("sum(up)", QueryParams(time="1585840000"))

    assert [m.name for m in result.results] == [CUSTOM_QUERY_NAME]
    backend.instant_query.assert_awaited_once()
    assert backend.instant_query.await_args.args[0] == "sum(up)"


@pytest.mark.asyncio
async def test_query_expression_no_hit(processor, backend):
    result = await processor.query_expression("sum(up)", QueryParams(time="1585830000", namespace="dev"))

    assert [m.name for m in result.results] == [CUSTOM_QUERY_NAME]
    assert result.results[0].values == []
    backend.instant_query.assert_not_awaited()


@pytest.mark.asyncio
async def test_close_closes_collaborators(processor, backend, provider):
    await processor.close()
    backend.close.assert_awaited_once()
    provider.close.assert_awaited_once()


GROUP_USAGE = {"shop": 1.0, "blog": 3.0, "rel-1": 2.0, "rel-2": 0.5, "front": 4.0, "back": 1.5}


def _group_vector(expr, time):
    # Grouped meters relabel their series with the group name.
    label = "service" if '"service"' in expr else "application"
    name = next(n for n in GROUP_USAGE if f'"{n}"' in expr)
    return MetricData(
        type=MetricType.VECTOR,
        values=[MetricValue(labels={"namespace": "dev", label: name}, sample=(time.timestamp(), GROUP_USAGE[name]))],
    )


@pytest.mark.asyncio
async def test_sorted_application_meters_are_paged_by_application(processor, backend):
    backend.instant_query.side_effect = _group_vector
    params = QueryParams(
        time="1585840000",
        namespace="dev",
        applications="shop,blog,empty",
        metrics_filter="cpu_usage|memory_usage_wo_cache",
        sort_metric="meter_application_cpu_usage",
        limit="1",
    )
    result = await processor.query_named_meters(params, Level.APPLICATION, PriceInfo(cpu_per_core_per_hour=3))

    assert result.total_items == 2
    assert result.total_pages == 2
    assert {m.name for m in result.results} == {
        "meter_application_cpu_usage",
        "meter_application_memory_usage_wo_cache",
    }
    for metric in result.results:
        assert [v.labels["application"] for v in metric.values] == ["blog"]


@pytest.mark.asyncio
async def test_sorted_openpitrix_meters_keep_every_meter(processor, backend, provider):
    backend.instant_query.side_effect = _group_vector
    provider.get_release_components.return_value = {
        "rel-1": ["Deployment:rel-1-api"],
        "rel-2": ["StatefulSet:rel-2-db"],
    }
    params = QueryParams(
        time="1585840000",
        namespace="dev",
        openpitrix_ids="rel-1,rel-2",
        metrics_filter="cpu_usage|memory_usage_wo_cache",
        sort_metric="meter_application_cpu_usage",
        page="2",
        limit="1",
    )
    result = await processor.query_named_meters(params, Level.OPENPITRIX, PriceInfo())

    assert result.total_items == 2
    assert result.current_page == 2
    assert len(result.results) == 2
    for metric in result.results:
        assert [v.labels["application"] for v in metric.values] == ["rel-2"]
        assert metric.values[0].sum == 0.5


@pytest.mark.asyncio
async def test_sorted_service_meters_are_paged_by_service(processor, backend, provider):
    backend.instant_query.side_effect = _group_vector
    provider.get_service_pods.return_value = {"front": ["web-1"], "back": ["api-1"]}
    params = QueryParams(
        time="1585840000",
        namespace="dev",
        services="front,back",
        metrics_filter="cpu_usage|memory_usage_wo_cache",
        sort_metric="meter_service_cpu_usage",
        sort_type="asc",
        limit="1",
    )
    result = await processor.query_named_meters(params, Level.SERVICE, PriceInfo())

    assert result.total_items == 2
    assert result.total_pages == 2
    assert len(result.results) == 2
    for metric in result.results:
        assert [v.labels["service"] for v in metric.values] == ["back"]
