# tests/core/test_catalog.py

import pytest

from kubemeter.core.catalog import TemplateCatalog, default_catalog, is_meter, normalize_template
from kubemeter.core.exceptions import InvalidComponent
from kubemeter.data.named_metrics import ETCD_METRICS, SCHEDULER_METRICS
from kubemeter.models.level import Level


def test_normalize_template_collapses_whitespace():
    assert normalize_template("sum(\n    up{$1}\n)  ") == "sum( up{$1} )"


def test_every_catalog_name_has_a_template():
    catalog = default_catalog()
    for level in Level:
        if level == Level.COMPONENT:
            continue
        for name in catalog.named_metrics(level):
            assert catalog.get_template(name), f"{level.value}: {name}"
    for component in catalog.component_types:
        for name in catalog.named_metrics(Level.COMPONENT, component):
            assert catalog.get_template(name)


def test_metric_catalogs_list_metrics_before_meters():
    names = default_catalog().named_metrics(Level.NODE)
    kinds = [is_meter(n) for n in names]
    assert kinds == sorted(kinds)
    assert "node_cpu_usage" in names
    assert "meter_node_cpu_usage" in names


def test_component_catalog_by_type():
    catalog = default_catalog()
    assert catalog.named_metrics(Level.COMPONENT, "etcd") == ETCD_METRICS
    assert catalog.named_metrics(Level.COMPONENT, "scheduler") == SCHEDULER_METRICS


@pytest.mark.parametrize("component", [None, "", "kubelet"])
def test_unknown_component_raises(component):
    with pytest.raises(InvalidComponent):
        default_catalog().named_metrics(Level.COMPONENT, component)


def test_catalog_is_read_only():
    catalog = TemplateCatalog(metric_templates={"x_up": "up"}, meter_templates={})
    with pytest.raises(TypeError):
        catalog._metric_templates["x_down"] = "down"
    assert catalog.get_template("x_up") == "up"
    assert catalog.get_template("x_down") is None


def test_default_catalog_is_shared():
    assert default_catalog() is default_catalog()
