import json

import pytest

from kubemeter.exporters.json_exporter import JSONExporter


@pytest.mark.asyncio
async def test_json_exporter_writes_file(tmp_path):
    data = {"results": [{"metric_name": "node_cpu_usage", "data": {"resultType": "vector", "result": []}}]}
    exporter = JSONExporter()
    out = tmp_path / "nested" / "result.json"

    written = await exporter.export(data, str(out))

    assert written == str(out)
    assert json.loads(out.read_text(encoding="utf-8")) == data


@pytest.mark.asyncio
async def test_json_exporter_default_filename(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    written = await JSONExporter().export({})
    assert written == JSONExporter.DEFAULT_FILENAME
    assert json.loads((tmp_path / JSONExporter.DEFAULT_FILENAME).read_text()) == {}


def test_dumps_keeps_non_ascii():
    assert "é" in JSONExporter.dumps({"label": "café"})
