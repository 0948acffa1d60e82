# tests/models/test_metrics.py

import json
import math

from kubemeter.core.aggregator import aggregate_result
from kubemeter.exporters.json_exporter import JSONExporter
from kubemeter.models.metrics import Metric, MetricData, MetricResult, MetricType, MetricValue, format_value
from kubemeter.models.pricing import PriceInfo


def test_format_value():
    assert format_value(3.0) == "3"
    assert format_value(0.25) == "0.25"
    assert format_value(float("nan")) == "NaN"
    assert format_value(float("inf")) == "+Inf"
    assert format_value(float("-inf")) == "-Inf"


def test_points_are_parsed_from_prometheus_strings():
    value = MetricValue(sample=[1585836666, "NaN"], series=[[1, "1.5"]])
    assert value.sample[0] == 1585836666.0
    assert math.isnan(value.sample[1])
    assert value.series == [(1.0, 1.5)]


def test_result_serializes_to_api_shape():
    result = MetricResult(
        results=[
            Metric(
                name="meter_node_cpu_usage",
                data=MetricData(
                    type=MetricType.VECTOR,
                    values=[
                        MetricValue(
                            labels={"node": "n1"},
                            sample=(1585836666, 0.5),
                            min=0.5,
                            max=0.5,
                            avg=0.5,
                            sum=0.5,
                            fee=1.5,
                            currency_unit="USD",
                            resource_unit="cores",
                        )
                    ],
                ),
            ),
            Metric(name="node_bad", error="invalid metric name"),
        ],
        current_page=1,
        total_pages=1,
        total_items=1,
    )

    assert result.to_dict() == {
        "results": [
            {
                "metric_name": "meter_node_cpu_usage",
                "data": {
                    "resultType": "vector",
                    "result": [
                        {
                            "metric": {"node": "n1"},
                            "value": [1585836666.0, "0.5"],
                            "min_value": 0.5,
                            "max_value": 0.5,
                            "avg_value": 0.5,
                            "sum_value": 0.5,
                            "fee": 1.5,
                            "currency_unit": "USD",
                            "resource_unit": "cores",
                        }
                    ],
                },
            },
            {"metric_name": "node_bad", "data": {"result": []}, "error": "invalid metric name"},
        ],
        "page": 1,
        "total_page": 1,
        "total_item": 1,
    }


def test_matrix_values_serialize_as_values():
    metric = Metric(
        name="m",
        data=MetricData(type=MetricType.MATRIX, values=[MetricValue(series=[(1, float("nan")), (2, 2)])]),
    )
    dumped = MetricResult(results=[metric]).to_dict()
    assert dumped["results"][0]["data"]["result"][0]["values"] == [[1.0, "NaN"], [2.0, "2"]]
    assert "page" not in dumped


def test_non_finite_stats_serialize_as_strings():
    result = MetricResult(
        results=[
            Metric(
                name="meter_cluster_cpu_usage",
                data=MetricData(type=MetricType.VECTOR, values=[MetricValue(sample=(1585836666, "NaN"))]),
            ),
            Metric(
                name="meter_node_cpu_usage",
                data=MetricData(type=MetricType.VECTOR, values=[MetricValue(sample=(1585836666, "+Inf"))]),
            ),
        ]
    )
    aggregate_result(result, PriceInfo(cpu_per_core_per_hour=3))

    text = JSONExporter.dumps(result.to_dict())

    def _reject(constant):
        raise ValueError(f"non-JSON constant {constant}")

    data = json.loads(text, parse_constant=_reject)
    nan_value = data["results"][0]["data"]["result"][0]
    assert nan_value["sum_value"] == "NaN"
    assert nan_value["fee"] == "NaN"
    inf_value = data["results"][1]["data"]["result"][0]
    assert inf_value["max_value"] == "+Inf"
    assert inf_value["fee"] == "+Inf"


def test_finite_stats_stay_numbers():
    value = MetricValue(sample=(1, 2), min=2.0, fee=6.0)
    dumped = MetricResult(results=[Metric(name="m", data=MetricData(values=[value]))]).to_dict()
    entry = dumped["results"][0]["data"]["result"][0]
    assert entry["min_value"] == 2.0
    assert entry["fee"] == 6.0
