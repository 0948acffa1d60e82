# src/kubemeter/core/aggregator.py
"""
Reduces meter results to min/max/avg/sum statistics and prices the summed
usage.

Pricing rules by meter name suffix:
- ``*cpu_usage``: core-hours, price per core and hour, 3 decimals.
- ``*memory_usage*``: bytes converted to GiB, price per GiB and hour, 1 decimal.
- ``*net_bytes_received`` / ``*net_bytes_transmitted``: bytes converted to
  MiB, price per MiB and hour, whole numbers.
- ``*pvc_bytes_total``: bytes converted to GiB, price per GiB and hour, 1 decimal.
"""

import logging
import math
from enum import Enum
from typing import Dict, List, Optional

from kubemeter.models.metrics import Metric, MetricResult, MetricType, MetricValue, Point
from kubemeter.models.pricing import PriceInfo

logger = logging.getLogger(__name__)

UNKNOWN_FEE = -1.0

GIB = 1024**3
MIB = 1024**2


class ResourceType(str, Enum):
    CPU = "cpu"
    MEMORY = "memory"
    NET_INGRESS = "net_ingress"
    NET_EGRESS = "net_egress"
    PVC = "pvc"


RESOURCE_UNITS = {
    ResourceType.CPU: "cores",
    ResourceType.MEMORY: "bytes",
    ResourceType.NET_INGRESS: "bytes",
    ResourceType.NET_EGRESS: "bytes",
    ResourceType.PVC: "bytes",
}


def classify_meter(name: str) -> Optional[ResourceType]:
    """Returns the resource type a meter name bills for, or None."""
    if name.endswith("cpu_usage"):
        return ResourceType.CPU
    if "memory_usage" in name:
        return ResourceType.MEMORY
    if name.endswith("net_bytes_received"):
        return ResourceType.NET_INGRESS
    if name.endswith("net_bytes_transmitted"):
        return ResourceType.NET_EGRESS
    if name.endswith("pvc_bytes_total"):
        return ResourceType.PVC
    return None


def _round_fee(amount: float, digits: int) -> float:
    # NaN and infinite usage cannot be rounded and is passed through.
    if not math.isfinite(amount):
        return amount
    return float(round(amount, digits)) if digits else float(round(amount))


def compute_fee(name: str, total: float, price_info: PriceInfo) -> float:
    """
    Prices ``total`` units of the meter ``name``.
    Unknown meters get UNKNOWN_FEE.
    """
    resource = classify_meter(name)
    if resource is None:
        logger.warning("Cannot price unknown meter '%s'", name)
        return UNKNOWN_FEE

    if resource == ResourceType.CPU:
        return _round_fee(total * price_info.cpu_per_core_per_hour, 3)
    if resource == ResourceType.MEMORY:
        return _round_fee(total / GIB * price_info.mem_per_gigabytes_per_hour, 1)
    if resource == ResourceType.NET_INGRESS:
        return _round_fee(total / MIB * price_info.ingress_network_traffic_per_megabytes_per_hour, 0)
    if resource == ResourceType.NET_EGRESS:
        return _round_fee(total / MIB * price_info.egress_network_traffic_per_megabytes_per_hour, 0)
    return _round_fee(total / GIB * price_info.pvc_per_gigabytes_per_hour, 1)


def squash_points(points: List[Point], factor: int) -> List[Point]:
    """
    Groups ``points`` into blocks of ``factor`` counted from the most recent
    point and sums the values of each block. A block keeps the timestamp of
    its latest point.
    """
    if factor <= 0:
        raise ValueError("factor should be positive")
    if factor == 1:
        return list(points)

    squashed: List[Point] = []
    for i, (ts, value) in enumerate(reversed(points)):
        if i % factor == 0:
            squashed.append((ts, value))
        else:
            last_ts, last_value = squashed[-1]
            squashed[-1] = (last_ts, last_value + value)
    squashed.reverse()
    return squashed


def _update_stats(value: MetricValue, metric: Metric, factor: int, price_info: PriceInfo):
    if metric.type == MetricType.MATRIX:
        points = value.series or []
    else:
        points = [value.sample] if value.sample is not None else []
    if not points:
        # Holes left by sort carry nothing to aggregate.
        return

    samples = [p[1] for p in points]
    value.min = min(samples)
    value.max = max(samples)
    value.avg = sum(samples) / len(samples)

    if metric.type == MetricType.MATRIX:
        value.series = squash_points(points, factor)
        samples = [p[1] for p in value.series]

    value.sum = sum(samples)
    value.fee = compute_fee(metric.name, value.sum, price_info)
    value.currency_unit = price_info.currency_unit
    resource = classify_meter(metric.name)
    value.resource_unit = RESOURCE_UNITS[resource] if resource else ""


def aggregate_result(
    result: MetricResult,
    price_info: PriceInfo,
    scaling_map: Optional[Dict[str, int]] = None,
) -> MetricResult:
    """
    Fills in min/max/avg/sum, fee and units for every value of every
    non-error metric of ``result``, in place.

    ``scaling_map`` optionally maps a meter name to a squash factor used to
    re-bucket its points before summing (e.g. 24 turns hourly points into
    daily ones).
    """
    for metric in result.results:
        if metric.error:
            continue
        factor = int((scaling_map or {}).get(metric.name, 1))
        for value in metric.values:
            _update_stats(value, metric, factor, price_info)
    return result
