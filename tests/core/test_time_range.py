# tests/core/test_time_range.py
"""
Tests for resolve_query_options: time window, namespace bounds and paging.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubemeter.core.catalog import default_catalog
from kubemeter.core.exceptions import (
    InvalidComponent,
    InvalidLimit,
    InvalidPage,
    InvalidStartEnd,
    NoHit,
    ParamConflict,
    ParseError,
    QueryParameterError,
)
from kubemeter.core.time_range import build_level_option, resolve_query_options
from kubemeter.data.named_metrics import ETCD_METRICS
from kubemeter.models.level import Level
from kubemeter.models.options import NamespaceOption, PodOption
from kubemeter.models.params import QueryParams
from kubemeter.models.pricing import PriceInfo

NS_CREATED = datetime.fromtimestamp(1585836666, tz=timezone.utc)


def _ts(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


@pytest.fixture
def provider():
    mock = MagicMock()
    mock.get_creation_time = AsyncMock(return_value=NS_CREATED)
    return mock


@pytest.mark.asyncio
async def test_instant_query_defaults_to_now():
    now = _ts(1585840000)
    q = await resolve_query_options(QueryParams(), Level.CLUSTER, default_catalog(), now=now)
    assert q.time == now
    assert not q.is_range_query()
    assert q.metric_filter == ".*"


@pytest.mark.asyncio
async def test_range_query_resolution():
    params = QueryParams(start="1585830000", end="1585839999", step="1m")
    q = await resolve_query_options(params, Level.NODE, default_catalog())
    assert q.is_range_query()
    assert q.start == _ts(1585830000)
    assert q.end == _ts(1585839999)
    assert q.step == timedelta(minutes=1)


@pytest.mark.asyncio
async def test_range_query_default_step():
    params = QueryParams(start="1585830000", end="1585839999")
    q = await resolve_query_options(params, Level.NODE, default_catalog())
    assert q.step == timedelta(minutes=10)


@pytest.mark.asyncio
async def test_meter_query_attaches_meter_options():
    price = PriceInfo(cpu_per_core_per_hour=3)
    params = QueryParams(start="1585830000", end="1585839999")
    q = await resolve_query_options(params, Level.NODE, default_catalog(), price_info=price)
    assert q.step == timedelta(hours=1)
    assert q.meter_options.hours == 1
    assert q.meter_options.price_info is price


@pytest.mark.asyncio
async def test_time_and_start_conflict():
    params = QueryParams(time="1585831995", start="1585830000")
    with pytest.raises(ParamConflict):
        await resolve_query_options(params, Level.CLUSTER, default_catalog())


@pytest.mark.asyncio
async def test_start_without_end_conflicts():
    with pytest.raises(ParamConflict):
        await resolve_query_options(QueryParams(start="1585830000"), Level.CLUSTER, default_catalog())


@pytest.mark.asyncio
async def test_start_after_end():
    params = QueryParams(start="1585839999", end="1585830000")
    with pytest.raises(InvalidStartEnd):
        await resolve_query_options(params, Level.CLUSTER, default_catalog())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [QueryParams(time="yesterday"), QueryParams(start="1", end="x"), QueryParams(step="ten minutes")],
)
async def test_malformed_values_raise_parse_error(params):
    with pytest.raises(ParseError):
        await resolve_query_options(params, Level.CLUSTER, default_catalog())


@pytest.mark.asyncio
async def test_no_hit_when_instant_precedes_namespace(provider):
    params = QueryParams(time="1585830000", namespace="dev")
    with pytest.raises(NoHit):
        await resolve_query_options(params, Level.NAMESPACE, default_catalog(), provider)
    provider.get_creation_time.assert_awaited_once_with("dev")


@pytest.mark.asyncio
async def test_no_hit_when_range_ends_before_namespace(provider):
    params = QueryParams(start="1585820000", end="1585830000", namespace="dev")
    with pytest.raises(NoHit):
        await resolve_query_options(params, Level.POD, default_catalog(), provider)


@pytest.mark.asyncio
async def test_range_start_clamped_to_namespace_creation(provider):
    params = QueryParams(start="1585830000", end="1585839999", step="1m", namespace="dev")
    q = await resolve_query_options(params, Level.NAMESPACE, default_catalog(), provider)
    assert q.start == _ts(1585836666)
    assert q.end == _ts(1585839999)


@pytest.mark.asyncio
async def test_range_after_creation_untouched(provider):
    params = QueryParams(start="1585837000", end="1585839999", namespace="dev")
    q = await resolve_query_options(params, Level.NAMESPACE, default_catalog(), provider)
    assert q.start == _ts(1585837000)


@pytest.mark.asyncio
async def test_component_etcd_catalog():
    q = await resolve_query_options(QueryParams(component="etcd"), Level.COMPONENT, default_catalog())
    assert q.named_metrics == ETCD_METRICS
    assert q.metric_filter == ".*"


@pytest.mark.asyncio
async def test_invalid_component():
    with pytest.raises(InvalidComponent):
        await resolve_query_options(QueryParams(component="kubelet"), Level.COMPONENT, default_catalog())


@pytest.mark.asyncio
async def test_sort_defaults_apply_with_target():
    params = QueryParams(sort_metric="node_cpu_usage")
    q = await resolve_query_options(params, Level.NODE, default_catalog())
    assert q.target == "node_cpu_usage"
    assert q.order == "desc"
    assert (q.page, q.limit) == (1, 5)
    assert q.should_sort()


@pytest.mark.asyncio
async def test_sort_params_ignored_without_target():
    params = QueryParams(page="0", limit="abc", sort_type="asc")
    q = await resolve_query_options(params, Level.NODE, default_catalog())
    assert q.target is None
    assert q.page is None
    assert not q.should_sort()


@pytest.mark.asyncio
async def test_ascending_order():
    params = QueryParams(sort_metric="node_cpu_usage", sort_type="asc", page="2", limit="10")
    q = await resolve_query_options(params, Level.NODE, default_catalog())
    assert q.order == "asc"
    assert (q.page, q.limit) == (2, 10)


@pytest.mark.asyncio
@pytest.mark.parametrize("page", ["0", "-1", "one"])
async def test_invalid_page(page):
    params = QueryParams(sort_metric="node_cpu_usage", page=page)
    with pytest.raises(InvalidPage):
        await resolve_query_options(params, Level.NODE, default_catalog())


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", ["0", "x"])
async def test_invalid_limit(limit):
    params = QueryParams(sort_metric="node_cpu_usage", limit=limit)
    with pytest.raises(InvalidLimit):
        await resolve_query_options(params, Level.NODE, default_catalog())


def test_build_level_option_maps_params():
    params = QueryParams(namespace="dev", workspace="ws", resources_filter="api.*")
    option = build_level_option(Level.NAMESPACE, params)
    assert option == NamespaceOption(resource_filter="api.*", workspace_name="ws", namespace_name="dev")

    pod = build_level_option(Level.POD, QueryParams(node="n1", kind="deployment", workload="api"))
    assert isinstance(pod, PodOption)
    assert pod.node_name == "n1"
    assert pod.workload_name == "api"


@pytest.mark.asyncio
@pytest.mark.parametrize("step", ["0s", "0m", "0h"])
async def test_zero_range_step_is_rejected(step):
    params = QueryParams(start="1585830000", end="1585839999", step=step)
    with pytest.raises(ParseError):
        await resolve_query_options(params, Level.CLUSTER, default_catalog())


@pytest.mark.asyncio
@pytest.mark.parametrize("step", ["30m", "90m", "1h30m", "3599s"])
async def test_meter_step_must_be_whole_hours(step):
    params = QueryParams(start="1585830000", end="1585839999", step=step)
    with pytest.raises(ParseError):
        await resolve_query_options(params, Level.CLUSTER, default_catalog(), price_info=PriceInfo())


@pytest.mark.asyncio
async def test_meter_step_in_hours_is_accepted():
    params = QueryParams(start="1585830000", end="1585839999", step="120m")
    q = await resolve_query_options(params, Level.CLUSTER, default_catalog(), price_info=PriceInfo())
    assert q.meter_options.hours == 2


@pytest.mark.asyncio
async def test_sub_hour_step_is_fine_for_metrics():
    params = QueryParams(start="1585830000", end="1585839999", step="30m")
    q = await resolve_query_options(params, Level.CLUSTER, default_catalog())
    assert q.step == timedelta(minutes=30)


def test_workload_name_is_rejected_at_workload_level():
    with pytest.raises(QueryParameterError, match="resources_filter"):
        build_level_option(Level.WORKLOAD, QueryParams(namespace="dev", workload="web"))
