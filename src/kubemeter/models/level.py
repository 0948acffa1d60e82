# src/kubemeter/models/level.py
"""
The query scopes a named metric or meter can be bound to.
"""

from enum import Enum
from typing import Optional


class Level(str, Enum):
    """Enumeration of the resource scopes a query is bound to."""

    CLUSTER = "cluster"
    NODE = "node"
    WORKSPACE = "workspace"
    NAMESPACE = "namespace"
    WORKLOAD = "workload"
    POD = "pod"
    CONTAINER = "container"
    PVC = "pvc"
    COMPONENT = "component"
    APPLICATION = "application"
    SERVICE = "service"
    OPENPITRIX = "openpitrix"

    @property
    def identifier(self) -> Optional[str]:
        """The label used to key sort and page operations across metrics."""
        return IDENTIFIERS.get(self)


IDENTIFIERS = {
    Level.NODE: "node",
    Level.WORKSPACE: "workspace",
    Level.NAMESPACE: "namespace",
    Level.WORKLOAD: "workload",
    Level.POD: "pod",
    Level.CONTAINER: "container",
    Level.PVC: "persistentvolumeclaim",
    Level.APPLICATION: "application",
    Level.SERVICE: "service",
    # Releases are billed through the application meters.
    Level.OPENPITRIX: "application",
}

# Component types with a dedicated metric catalog.
COMPONENT_ETCD = "etcd"
COMPONENT_APISERVER = "apiserver"
COMPONENT_SCHEDULER = "scheduler"
