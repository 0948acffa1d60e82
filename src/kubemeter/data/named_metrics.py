# src/kubemeter/data/named_metrics.py
"""
Ordered catalogs of the named metrics and meters valid at each level.

Catalog order follows template declaration order: plain metrics first,
then meters.
"""

from types import MappingProxyType

from kubemeter.data.meter_templates import METER_TEMPLATES
from kubemeter.data.promql_templates import METRIC_TEMPLATES
from kubemeter.models.level import COMPONENT_APISERVER, COMPONENT_ETCD, COMPONENT_SCHEDULER, Level


def _names(prefix, templates):
    return tuple(name for name in templates if name.startswith(prefix))


CLUSTER_METRICS = _names("cluster_", METRIC_TEMPLATES) + _names("meter_cluster_", METER_TEMPLATES)
NODE_METRICS = _names("node_", METRIC_TEMPLATES) + _names("meter_node_", METER_TEMPLATES)
WORKSPACE_METRICS = _names("workspace_", METRIC_TEMPLATES) + _names("meter_workspace_", METER_TEMPLATES)
NAMESPACE_METRICS = _names("namespace_", METRIC_TEMPLATES) + _names("meter_namespace_", METER_TEMPLATES)
WORKLOAD_METRICS = _names("workload_", METRIC_TEMPLATES) + _names("meter_workload_", METER_TEMPLATES)
POD_METRICS = _names("pod_", METRIC_TEMPLATES) + _names("meter_pod_", METER_TEMPLATES)
CONTAINER_METRICS = _names("container_", METRIC_TEMPLATES)
PVC_METRICS = _names("pvc_", METRIC_TEMPLATES)
APPLICATION_METRICS = _names("meter_application_", METER_TEMPLATES)
SERVICE_METRICS = _names("meter_service_", METER_TEMPLATES)

ETCD_METRICS = _names("etcd_", METRIC_TEMPLATES)
APISERVER_METRICS = _names("apiserver_", METRIC_TEMPLATES)
SCHEDULER_METRICS = _names("scheduler_", METRIC_TEMPLATES)

LEVEL_CATALOGS = MappingProxyType(
    {
        Level.CLUSTER: CLUSTER_METRICS,
        Level.NODE: NODE_METRICS,
        Level.WORKSPACE: WORKSPACE_METRICS,
        Level.NAMESPACE: NAMESPACE_METRICS,
        Level.WORKLOAD: WORKLOAD_METRICS,
        Level.POD: POD_METRICS,
        Level.CONTAINER: CONTAINER_METRICS,
        Level.PVC: PVC_METRICS,
        Level.APPLICATION: APPLICATION_METRICS,
        Level.SERVICE: SERVICE_METRICS,
        # Helm releases are billed with the application meters.
        Level.OPENPITRIX: APPLICATION_METRICS,
    }
)

COMPONENT_CATALOGS = MappingProxyType(
    {
        COMPONENT_ETCD: ETCD_METRICS,
        COMPONENT_APISERVER: APISERVER_METRICS,
        COMPONENT_SCHEDULER: SCHEDULER_METRICS,
    }
)
