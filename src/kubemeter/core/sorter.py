# src/kubemeter/core/sorter.py
"""
Sorting and paging of instant query results.

Sorting ranks the series of a target metric and lines up every other vector
metric on the same ranking, so that page N of each metric describes the same
resources.
"""

import logging
import math
from functools import cmp_to_key
from typing import Dict, List, Optional, Set

from kubemeter.models.metrics import Metric, MetricResult, MetricType, MetricValue

logger = logging.getLogger(__name__)

ORDER_ASCENDING = "asc"
ORDER_DESCENDING = "desc"


def _is_pageable(metric: Metric) -> bool:
    return not metric.error and metric.type == MetricType.VECTOR


def _compare_values(a: MetricValue, b: MetricValue, order: str, identifier: str) -> int:
    """
    Total order over target values:
    missing sample last, NaN after numbers, then by value in the requested
    order, with the identifier label ascending as tie-break.
    """
    if a.sample is None and b.sample is not None:
        return 1
    if a.sample is not None and b.sample is None:
        return -1

    if a.sample is not None and b.sample is not None:
        va, vb = a.sample[1], b.sample[1]
        a_nan, b_nan = math.isnan(va), math.isnan(vb)
        if a_nan != b_nan:
            return 1 if a_nan else -1
        if not a_nan and va != vb:
            if order == ORDER_ASCENDING:
                return -1 if va < vb else 1
            return -1 if va > vb else 1

    ia = a.labels.get(identifier, "")
    ib = b.labels.get(identifier, "")
    if ia == ib:
        return 0
    return -1 if ia < ib else 1


def sort_metrics(result: MetricResult, target: str, order: Optional[str], identifier: str) -> MetricResult:
    """
    Sorts ``result`` in place by the values of ``target``.

    Every other non-error vector metric is rewritten into a list of length
    ``total_items`` positioned by the target's ranking; resources the target
    does not know come after it in lexical order. Missing entries are empty
    MetricValues.
    """
    order = order or ORDER_DESCENDING
    if not target or not identifier:
        return result

    identifiers: Set[str] = set()
    target_metric: Optional[Metric] = None
    for metric in result.results:
        if not _is_pageable(metric):
            continue
        if metric.name == target and target_metric is None:
            target_metric = metric
        for value in metric.values:
            if identifier in value.labels:
                identifiers.add(value.labels[identifier])

    ranks: Dict[str, int] = {}
    if target_metric is not None:
        key = cmp_to_key(lambda a, b: _compare_values(a, b, order, identifier))
        # Values without the identifier cannot be lined up with other metrics.
        keyed = [v for v in target_metric.values if identifier in v.labels]
        dropped = len(target_metric.values) - len(keyed)
        if dropped:
            logger.debug("Dropping %d '%s' values without label '%s'", dropped, target, identifier)
        target_metric.data.values = sorted(keyed, key=key)
        for value in target_metric.values:
            ranks.setdefault(value.labels[identifier], len(ranks))
    else:
        logger.warning("Sort target '%s' is not part of the result; ranking by %s only", target, identifier)

    for ident in sorted(identifiers - set(ranks)):
        ranks[ident] = len(ranks)

    total = len(ranks)
    for metric in result.results:
        if metric is target_metric or not _is_pageable(metric):
            continue
        aligned: List[MetricValue] = [MetricValue() for _ in range(total)]
        for value in metric.values:
            if identifier in value.labels:
                aligned[ranks[value.labels[identifier]]] = value
        metric.data.values = aligned

    result.current_page = 1
    result.total_pages = 1
    result.total_items = total
    return result


def page_metrics(result: MetricResult, page: Optional[int], limit: Optional[int]) -> MetricResult:
    """
    Slices every non-error vector metric to the requested page.

    A page or limit below 1 leaves the result untouched. A page past the end
    gives empty value lists.
    """
    if page is None or limit is None or page < 1 or limit < 1:
        return result

    start = (page - 1) * limit
    for metric in result.results:
        if not _is_pageable(metric):
            continue
        values = metric.values
        if start >= len(values):
            metric.data.values = []
            continue
        metric.data.values = values[start : min(page * limit, len(values))]

    result.current_page = page
    result.total_pages = math.ceil((result.total_items or 0) / limit)
    return result
