# src/kubemeter/models/metrics.py
"""
This module defines the Pydantic data models flowing between the executor,
the post-processors and the reporters. Serialization follows the shape of
the Prometheus HTTP API: points are ``[timestamp, "value"]`` pairs so that
NaN and infinite values stay JSON-safe.
"""

import math
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_serializer, field_validator

Point = Tuple[float, float]


class MetricType(str, Enum):
    """Result types returned by the backend."""

    VECTOR = "vector"
    MATRIX = "matrix"


def format_value(value: float) -> str:
    """Formats a sample value the way Prometheus does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value)) if value != int(value) else str(int(value))


def _parse_point(raw) -> Point:
    ts, val = raw
    return float(ts), float(val)


def _dump_point(point: Point) -> list:
    return [point[0], format_value(point[1])]


class MetricValue(BaseModel):
    """
    A single series of a metric. Exactly one of ``sample`` (vector) and
    ``series`` (matrix) is populated; an empty value is a hole left by sort.
    """

    labels: Dict[str, str] = Field(
        default_factory=dict, serialization_alias="metric", description="The series label set."
    )
    sample: Optional[Point] = Field(None, serialization_alias="value", description="Instant sample.")
    series: Optional[List[Point]] = Field(None, serialization_alias="values", description="Range points.")

    min: Optional[float] = Field(None, serialization_alias="min_value")
    max: Optional[float] = Field(None, serialization_alias="max_value")
    avg: Optional[float] = Field(None, serialization_alias="avg_value")
    sum: Optional[float] = Field(None, serialization_alias="sum_value")
    fee: Optional[float] = Field(None, description="Price of the summed usage.")
    currency_unit: Optional[str] = None
    resource_unit: Optional[str] = None

    @field_validator("sample", mode="before")
    @classmethod
    def _coerce_sample(cls, v):
        if v is None:
            return None
        return _parse_point(v)

    @field_validator("series", mode="before")
    @classmethod
    def _coerce_series(cls, v):
        if v is None:
            return None
        return [_parse_point(p) for p in v]

    @field_serializer("sample")
    def _serialize_sample(self, sample: Optional[Point]):
        return _dump_point(sample) if sample is not None else None

    @field_serializer("series")
    def _serialize_series(self, series: Optional[List[Point]]):
        return [_dump_point(p) for p in series] if series is not None else None

    @field_serializer("min", "max", "avg", "sum", "fee")
    def _serialize_stat(self, value: Optional[float]):
        # Non-finite stats use the string forms of sample values.
        if value is None or math.isfinite(value):
            return value
        return format_value(value)


class MetricData(BaseModel):
    """The typed result list of one query."""

    type: Optional[MetricType] = Field(None, serialization_alias="resultType")
    values: List[MetricValue] = Field(default_factory=list, serialization_alias="result")


class Metric(BaseModel):
    """
    The outcome of one named metric query. A non-empty ``error`` marks a
    metric that could not be queried without affecting its siblings.
    """

    name: str = Field(..., serialization_alias="metric_name")
    data: MetricData = Field(default_factory=MetricData)
    error: Optional[str] = None

    @property
    def type(self) -> Optional[MetricType]:
        return self.data.type

    @property
    def values(self) -> List[MetricValue]:
        return self.data.values


class MetricResult(BaseModel):
    """The merged results of a batch, with paging state."""

    results: List[Metric] = Field(default_factory=list)
    current_page: Optional[int] = Field(None, serialization_alias="page")
    total_pages: Optional[int] = Field(None, serialization_alias="total_page")
    total_items: Optional[int] = Field(None, serialization_alias="total_item")

    def to_dict(self) -> dict:
        """Returns the API shape of the result."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
