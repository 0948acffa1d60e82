# src/kubemeter/core/time_range.py
"""
Resolves raw request parameters into QueryOptions: the level option, the
instant or range window (bounded by the namespace creation time) and the
sort/page parameters.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from kubemeter.core.catalog import TemplateCatalog
from kubemeter.core.config import config
from kubemeter.core.exceptions import (
    InvalidLimit,
    InvalidPage,
    InvalidStartEnd,
    NoHit,
    ParamConflict,
    ParseError,
    QueryParameterError,
)
from kubemeter.core.sorter import ORDER_ASCENDING, ORDER_DESCENDING
from kubemeter.models.level import Level
from kubemeter.models.options import (
    ApplicationOption,
    ClusterOption,
    ComponentOption,
    ContainerOption,
    LevelOption,
    MeterOptions,
    NamespaceOption,
    NodeOption,
    OpenPitrixOption,
    PodOption,
    PVCOption,
    QueryOptions,
    ServiceOption,
    WorkloadOption,
    WorkspaceOption,
)
from kubemeter.models.params import QueryParams
from kubemeter.models.pricing import PriceInfo
from kubemeter.utils.date_utils import parse_duration, parse_unix_timestamp

logger = logging.getLogger(__name__)

METER_STEP_UNIT = timedelta(hours=1)


def build_level_option(level: Level, params: QueryParams) -> LevelOption:
    """Builds the option variant of ``level`` from the request parameters."""
    rf = params.resources_filter or config.DEFAULT_FILTER

    if level == Level.CLUSTER:
        return ClusterOption(resource_filter=rf)
    if level == Level.NODE:
        return NodeOption(
            resource_filter=rf,
            node_name=params.node,
            pvc_filter=params.pvc_filter,
            storage_class_name=params.storageclass,
        )
    if level == Level.WORKSPACE:
        return WorkspaceOption(
            resource_filter=rf,
            workspace_name=params.workspace,
            pvc_filter=params.pvc_filter,
            storage_class_name=params.storageclass,
        )
    if level == Level.NAMESPACE:
        return NamespaceOption(
            resource_filter=rf,
            workspace_name=params.workspace,
            namespace_name=params.namespace,
            pvc_filter=params.pvc_filter,
            storage_class_name=params.storageclass,
        )
    if level == Level.WORKLOAD:
        if params.workload:
            raise QueryParameterError(
                "Parameter 'workload' is not supported at the workload level; use 'resources_filter'."
            )
        return WorkloadOption(resource_filter=rf, namespace_name=params.namespace, workload_kind=params.kind)
    if level == Level.POD:
        return PodOption(
            resource_filter=rf,
            namespace_name=params.namespace,
            node_name=params.node,
            workload_kind=params.kind,
            workload_name=params.workload,
            pod_name=params.pod,
        )
    if level == Level.CONTAINER:
        return ContainerOption(
            resource_filter=rf,
            namespace_name=params.namespace,
            pod_name=params.pod,
            container_name=params.container,
        )
    if level == Level.PVC:
        return PVCOption(
            resource_filter=rf,
            namespace_name=params.namespace,
            storage_class_name=params.storageclass,
            pvc_name=params.pvc,
        )
    if level == Level.COMPONENT:
        return ComponentOption(resource_filter=rf, component_type=params.component)
    # Grouped levels get their members filled in per group by the processor.
    if level == Level.APPLICATION:
        return ApplicationOption(
            resource_filter=rf,
            namespace_name=params.namespace,
            pvc_filter=params.pvc_filter,
            storage_class_name=params.storageclass,
        )
    if level == Level.OPENPITRIX:
        return OpenPitrixOption(
            resource_filter=rf,
            namespace_name=params.namespace,
            pvc_filter=params.pvc_filter,
            storage_class_name=params.storageclass,
        )
    if level == Level.SERVICE:
        return ServiceOption(resource_filter=rf, namespace_name=params.namespace)
    raise ValueError(f"Unsupported level '{level}'")


def _parse_positive(value: Optional[str], default: int, error) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise error() from None
    if parsed <= 0:
        raise error()
    return parsed


async def resolve_query_options(
    params: QueryParams,
    level: Level,
    catalog: TemplateCatalog,
    metadata_provider=None,
    now: Optional[datetime] = None,
    price_info: Optional[PriceInfo] = None,
) -> QueryOptions:
    """
    Validates the request and resolves it into QueryOptions.

    Passing ``price_info`` marks a meter query: it attaches MeterOptions
    whose window defaults to ``DEFAULT_METER_STEP``.

    Raises:
        ParseError: A timestamp, duration or integer is malformed, or a step is
            zero, or a meter step is not a whole number of hours.
        ParamConflict: 'time' is mixed with 'start'/'end', or only one of them is set.
        InvalidStartEnd: 'start' is after 'end'.
        InvalidPage, InvalidLimit: Paging values are not positive integers.
        InvalidComponent: The component type has no catalog.
        NoHit: The window precedes the namespace creation time.
        ResourceNotFound: The namespace does not exist.
    """
    option = build_level_option(level, params)
    q = QueryOptions(
        option=option,
        metric_filter=params.metrics_filter or config.DEFAULT_FILTER,
        named_metrics=catalog.named_metrics(level, params.component),
    )

    has_start, has_end = bool(params.start), bool(params.end)
    if params.time and (has_start or has_end):
        raise ParamConflict()

    default_step = config.DEFAULT_METER_STEP if price_info is not None else config.DEFAULT_STEP
    raw_step = params.step or default_step
    step = parse_duration(raw_step)
    if step <= timedelta(0):
        raise ParseError(f"Invalid parameter 'step': {raw_step!r} must be positive.")
    if price_info is not None and (step < METER_STEP_UNIT or step % METER_STEP_UNIT):
        # Meter templates bill whole hours.
        raise ParseError(f"Invalid parameter 'step': {raw_step!r} must be a whole number of hours for meters.")

    if has_start and has_end:
        q.start = parse_unix_timestamp(params.start, "start")
        q.end = parse_unix_timestamp(params.end, "end")
        q.step = step
        if q.start > q.end:
            raise InvalidStartEnd()
    elif not has_start and not has_end:
        if params.time:
            q.time = parse_unix_timestamp(params.time, "time")
        else:
            q.time = now or datetime.now(timezone.utc)
    else:
        raise ParamConflict()

    if price_info is not None:
        q.meter_options = MeterOptions(step=step, price_info=price_info)

    if params.namespace and metadata_provider is not None:
        cts = await metadata_provider.get_creation_time(params.namespace)
        if not q.is_range_query():
            if q.time < cts:
                raise NoHit()
        else:
            if q.end < cts:
                raise NoHit()
            if q.start < cts:
                # The window starts on the creation boundary, never before it.
                logger.debug("Moving range start %s to namespace creation time %s", q.start, cts)
                q.start = cts

    if params.sort_metric:
        q.target = params.sort_metric
        q.order = ORDER_ASCENDING if params.sort_type == ORDER_ASCENDING else ORDER_DESCENDING
        q.page = _parse_positive(params.page, config.DEFAULT_PAGE, InvalidPage)
        q.limit = _parse_positive(params.limit, config.DEFAULT_LIMIT, InvalidLimit)

    return q
