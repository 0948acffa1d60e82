# tests/core/test_factory.py

from unittest.mock import patch

import pytest
import typer

from kubemeter.collectors.metadata_collector import KubernetesMetadataCollector
from kubemeter.collectors.prometheus_collector import PrometheusCollector
from kubemeter.core.catalog import default_catalog
from kubemeter.core.factory import get_processor
from kubemeter.core.processor import MonitoringProcessor


def test_get_processor_wires_collectors():
    processor = get_processor()

    assert isinstance(processor, MonitoringProcessor)
    assert isinstance(processor.backend, PrometheusCollector)
    assert isinstance(processor.metadata_provider, KubernetesMetadataCollector)
    assert processor.catalog is default_catalog()
    assert processor.compiler.catalog is processor.catalog
    assert processor.executor.backend is processor.backend


def test_get_processor_is_cached():
    assert get_processor() is get_processor()


def test_get_processor_failure_exits():
    with patch("kubemeter.core.factory.PrometheusCollector", side_effect=RuntimeError("bad config")):
        with pytest.raises(typer.Exit):
            get_processor()
