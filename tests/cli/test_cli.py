import json
from unittest.mock import AsyncMock, MagicMock

from typer.testing import CliRunner

import kubemeter.cli.utils as utils_mod
from kubemeter import __version__
from kubemeter.cli import app
from kubemeter.core.exceptions import BackendQueryError, InvalidStartEnd
from kubemeter.models.level import Level
from kubemeter.models.metrics import Metric, MetricData, MetricResult, MetricType, MetricValue

runner = CliRunner()


def make_result():
    return MetricResult(
        results=[
            Metric(
                name="node_cpu_usage",
                data=MetricData(
                    type=MetricType.VECTOR,
                    values=[MetricValue(labels={"node": "node-1"}, sample=(1585836666, 0.25))],
                ),
            )
        ]
    )


def make_dummy_processor(result=None):
    proc = MagicMock()
    proc.query_named_metrics = AsyncMock(return_value=result or make_result())
    proc.query_named_meters = AsyncMock(return_value=result or make_result())
    proc.query_expression = AsyncMock(return_value=result or make_result())
    proc.close = AsyncMock()
    return proc


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_metrics_table(monkeypatch):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["metrics", "node", "--metrics-filter", "cpu", "--time", "1585836666"])

    assert result.exit_code == 0, result.output
    assert "node-1" in result.stdout
    params, level = proc.query_named_metrics.await_args.args
    assert level is Level.NODE
    assert params.metrics_filter == "cpu"
    assert params.time == "1585836666"
    proc.close.assert_awaited_once()


def test_metrics_json_to_stdout(monkeypatch):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["metrics", "node", "-o", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["results"][0]["metric_name"] == "node_cpu_usage"
    assert data["results"][0]["data"]["result"][0]["value"] == [1585836666.0, "0.25"]


def test_metrics_json_to_file(monkeypatch, tmp_path):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)
    out = tmp_path / "out.json"

    result = runner.invoke(app, ["metrics", "cluster", "-o", "json", "--output-path", str(out)])

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["results"][0]["metric_name"] == "node_cpu_usage"


def test_invalid_output_format(monkeypatch):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["metrics", "node", "-o", "xml"])

    assert result.exit_code == 2
    proc.query_named_metrics.assert_not_awaited()


def test_parameter_error_exits_with_2(monkeypatch):
    proc = make_dummy_processor()
    proc.query_named_metrics.side_effect = InvalidStartEnd()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["metrics", "node", "--start", "20", "--end", "10"])

    assert result.exit_code == 2
    proc.close.assert_awaited_once()


def test_backend_error_exits_with_1(monkeypatch):
    proc = make_dummy_processor()
    proc.query_named_metrics.side_effect = BackendQueryError("Prometheus is unreachable")
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["metrics", "node"])

    assert result.exit_code == 1


def test_meters_pass_price_info(monkeypatch):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["meters", "application", "-n", "dev", "--applications", "shop,blog"])

    assert result.exit_code == 0, result.output
    params, level, price_info = proc.query_named_meters.await_args.args
    assert level is Level.APPLICATION
    assert params.namespace == "dev"
    assert params.applications == "shop,blog"
    assert price_info.currency_unit == "USD"
    assert price_info.cpu_per_core_per_hour == 3.0


def test_expr(monkeypatch):
    proc = make_dummy_processor()
    monkeypatch.setattr(utils_mod, "get_processor", lambda: proc)

    result = runner.invoke(app, ["expr", "sum(up)", "--time", "1585836666"])

    assert result.exit_code == 0, result.output
    expression, params = proc.query_expression.await_args.args
    assert expression == "sum(up)"
    assert params.time == "1585836666"


def test_unknown_level_is_rejected():
    result = runner.invoke(app, ["metrics", "galaxy"])
    assert result.exit_code == 2


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"kubemeter version: {__version__}" in result.stdout


def test_catalog_lists_level_names():
    result = runner.invoke(app, ["catalog", "node"])
    assert result.exit_code == 0
    lines = result.stdout.split()
    assert "node_cpu_usage" in lines
    assert "meter_node_cpu_usage" in lines


def test_catalog_meters_only():
    result = runner.invoke(app, ["catalog", "node", "--meters"])
    assert result.exit_code == 0
    assert all(name.startswith("meter_") for name in result.stdout.split())


def test_catalog_component_requires_known_type():
    assert runner.invoke(app, ["catalog", "component", "--component", "etcd"]).exit_code == 0
    result = runner.invoke(app, ["catalog", "component", "--component", "coredns"])
    assert result.exit_code == 2
