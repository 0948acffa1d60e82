# src/kubemeter/models/options.py
"""
Level-scoped query options.

Each level has its own frozen option variant. ``apply(metric)`` is a pure
function turning the option into the selector fragments substituted into
the metric and meter templates of that level. An exact resource name always
wins over the ``resource_filter`` regex.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import ClassVar, List, Mapping, Optional, Tuple

from kubemeter.models.level import Level
from kubemeter.models.pricing import PriceInfo

DEFAULT_FILTER = ".*"

DEPLOYMENT = "Deployment"
STATEFULSET = "StatefulSet"
DAEMONSET = "DaemonSet"

_WORKLOAD_KINDS = {
    "deployment": DEPLOYMENT,
    "statefulset": STATEFULSET,
    "daemonset": DAEMONSET,
}


def normalize_workload_kind(kind: Optional[str]) -> Optional[str]:
    """Maps a workload kind to its canonical name, or None when unknown."""
    if not kind:
        return None
    return _WORKLOAD_KINDS.get(kind.lower())


def _match(label: str, exact: Optional[str], pattern: str) -> str:
    if exact:
        return f'{label}="{exact}"'
    return f'{label}=~"{pattern}"'


def _pvc_conditions(scope: List[str], pvc_filter: Optional[str], storage_class: Optional[str]) -> str:
    conditions = list(scope)
    if pvc_filter:
        conditions.append(f'persistentvolumeclaim=~"{pvc_filter}"')
    if storage_class:
        conditions.append(f'storageclass="{storage_class}"')
    return ",".join(conditions)


@dataclass(frozen=True)
class ResolvedSelectors:
    """
    Substitution values for one template. ``metric`` feeds metric
    templates, ``meter`` feeds meter templates (named tokens plus the
    positional selectors meters reuse).
    """

    metric: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    meter: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


def _resolved(metric: dict, meter: dict) -> ResolvedSelectors:
    return ResolvedSelectors(metric=MappingProxyType(metric), meter=MappingProxyType(meter))


@dataclass(frozen=True)
class LevelOption:
    """Base of the option variants."""

    level: ClassVar[Level]

    resource_filter: str = DEFAULT_FILTER

    def apply(self, metric: str = "") -> ResolvedSelectors:
        raise NotImplementedError


@dataclass(frozen=True)
class ClusterOption(LevelOption):
    level: ClassVar[Level] = Level.CLUSTER

    def apply(self, metric: str = "") -> ResolvedSelectors:
        return _resolved({}, {})


@dataclass(frozen=True)
class NodeOption(LevelOption):
    level: ClassVar[Level] = Level.NODE

    node_name: Optional[str] = None
    pvc_filter: Optional[str] = None
    storage_class_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        node = _match("node", self.node_name, self.resource_filter)
        meter = {
            "nodeSelector": node,
            "instanceSelector": _match("instance", self.node_name, self.resource_filter),
            "pvc": _pvc_conditions([node], self.pvc_filter, self.storage_class_name),
        }
        return _resolved({"1": node}, meter)


@dataclass(frozen=True)
class WorkspaceOption(LevelOption):
    level: ClassVar[Level] = Level.WORKSPACE

    workspace_name: Optional[str] = None
    pvc_filter: Optional[str] = None
    storage_class_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        if self.workspace_name:
            selector = f'workspace="{self.workspace_name}"'
        else:
            selector = f'workspace=~"{self.resource_filter}", workspace!=""'
        scope = [f'workspace="{self.workspace_name}"'] if self.workspace_name else []
        meter = {"1": selector, "pvc": _pvc_conditions(scope, self.pvc_filter, self.storage_class_name)}
        return _resolved({"1": selector}, meter)


@dataclass(frozen=True)
class NamespaceOption(LevelOption):
    level: ClassVar[Level] = Level.NAMESPACE

    workspace_name: Optional[str] = None
    namespace_name: Optional[str] = None
    pvc_filter: Optional[str] = None
    storage_class_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        if self.namespace_name:
            selector = f'namespace="{self.namespace_name}"'
        elif self.workspace_name:
            selector = f'workspace="{self.workspace_name}", namespace=~"{self.resource_filter}"'
        else:
            selector = f'namespace=~"{self.resource_filter}"'
        scope = [f'namespace="{self.namespace_name}"'] if self.namespace_name else []
        meter = {"1": selector, "pvc": _pvc_conditions(scope, self.pvc_filter, self.storage_class_name)}
        return _resolved({"1": selector}, meter)


@dataclass(frozen=True)
class WorkloadOption(LevelOption):
    level: ClassVar[Level] = Level.WORKLOAD

    namespace_name: Optional[str] = None
    workload_kind: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        kind = normalize_workload_kind(self.workload_kind) or ".*"
        ns = self.namespace_name or ""
        workload = f'namespace="{ns}", workload=~"{kind}:({self.resource_filter})"'

        kind_selector = ""
        for label in ("deployment", "statefulset", "daemonset"):
            if label in metric:
                kind_selector = f'namespace="{ns}", {label}!="", {label}=~"{self.resource_filter}"'

        selectors = {"1": workload, "2": kind_selector}
        return _resolved(selectors, dict(selectors))


@dataclass(frozen=True)
class PodOption(LevelOption):
    level: ClassVar[Level] = Level.POD

    namespace_name: Optional[str] = None
    node_name: Optional[str] = None
    workload_kind: Optional[str] = None
    workload_name: Optional[str] = None
    pod_name: Optional[str] = None

    def _owner_selector(self) -> str:
        if not self.workload_name:
            return ""
        kind = normalize_workload_kind(self.workload_kind)
        if kind == DEPLOYMENT:
            # ReplicaSets are named after the deployment plus a pod-template hash.
            return f'owner_kind="ReplicaSet", owner_name=~"^{self.workload_name}-[^-]{{1,10}}$"'
        if kind in (STATEFULSET, DAEMONSET):
            return f'owner_kind="{kind}", owner_name="{self.workload_name}"'
        return ""

    def apply(self, metric: str = "") -> ResolvedSelectors:
        pod = _match("pod", self.pod_name, self.resource_filter)
        if self.namespace_name:
            pod_selector = f'{pod}, namespace="{self.namespace_name}"'
        elif self.node_name:
            pod_selector = f'{pod}, node="{self.node_name}"'
        else:
            pod_selector = pod

        owner = self._owner_selector()
        internal = pod if not self.namespace_name else f'{pod}, namespace="{self.namespace_name}"'
        meter = {"1": owner, "2": pod_selector, "internalPodSelector": internal}
        return _resolved({"1": owner, "2": pod_selector}, meter)


@dataclass(frozen=True)
class ContainerOption(LevelOption):
    level: ClassVar[Level] = Level.CONTAINER

    namespace_name: Optional[str] = None
    pod_name: Optional[str] = None
    container_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        container = _match("container", self.container_name, self.resource_filter)
        selector = f'pod="{self.pod_name or ""}", namespace="{self.namespace_name or ""}", {container}'
        return _resolved({"1": selector}, {"1": selector})


@dataclass(frozen=True)
class PVCOption(LevelOption):
    level: ClassVar[Level] = Level.PVC

    namespace_name: Optional[str] = None
    storage_class_name: Optional[str] = None
    pvc_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        pvc = _match("persistentvolumeclaim", self.pvc_name, self.resource_filter)
        if self.namespace_name:
            selector = f'namespace="{self.namespace_name}", {pvc}'
        elif self.storage_class_name:
            selector = f'storageclass="{self.storage_class_name}", {pvc}'
        else:
            selector = pvc
        return _resolved({"1": selector}, {"1": selector})


@dataclass(frozen=True)
class ComponentOption(LevelOption):
    level: ClassVar[Level] = Level.COMPONENT

    component_type: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        return _resolved({}, {})


@dataclass(frozen=True)
class ApplicationOption(LevelOption):
    """
    One application: its component workloads (``"Deployment:name"`` style)
    are re-aggregated under the application name.
    """

    level: ClassVar[Level] = Level.APPLICATION

    namespace_name: Optional[str] = None
    application_name: str = ""
    components: Tuple[str, ...] = ()
    pvc_filter: Optional[str] = None
    storage_class_name: Optional[str] = None

    def apply(self, metric: str = "") -> ResolvedSelectors:
        selector = f'namespace="{self.namespace_name or ""}", workload=~"{"|".join(self.components)}"'
        scope = [f'namespace="{self.namespace_name}"'] if self.namespace_name else []
        # An empty PVC filter matches no volume: applications only own the claims listed for them.
        pvc = ",".join(
            scope
            + [f'persistentvolumeclaim=~"{self.pvc_filter or ""}"']
            + ([f'storageclass="{self.storage_class_name}"'] if self.storage_class_name else [])
        )
        meter = {"1": selector, "app": self.application_name, "pvc": pvc}
        return _resolved({"1": selector}, meter)


@dataclass(frozen=True)
class OpenPitrixOption(ApplicationOption):
    """A Helm release, billed like an application made of the release workloads."""

    level: ClassVar[Level] = Level.OPENPITRIX


@dataclass(frozen=True)
class ServiceOption(LevelOption):
    """One service: the pods it selects are re-aggregated under the service name."""

    level: ClassVar[Level] = Level.SERVICE

    namespace_name: Optional[str] = None
    service_name: str = ""
    pods: Tuple[str, ...] = ()

    def apply(self, metric: str = "") -> ResolvedSelectors:
        selector = f'namespace="{self.namespace_name or ""}", pod=~"{"|".join(self.pods)}"'
        return _resolved({"1": selector}, {"1": selector, "svc": self.service_name})


@dataclass(frozen=True)
class MeterOptions:
    """Metering window and unit prices carried by meter queries."""

    step: timedelta = timedelta(hours=1)
    price_info: PriceInfo = field(default_factory=PriceInfo)

    @property
    def hours(self) -> int:
        return int(self.step.total_seconds() // 3600)


@dataclass
class QueryOptions:
    """
    A fully resolved request: the level option, the metric selection, the
    time window and the sort/page parameters.
    """

    option: LevelOption
    metric_filter: str = DEFAULT_FILTER
    named_metrics: Tuple[str, ...] = ()

    time: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    step: Optional[timedelta] = None

    target: Optional[str] = None
    order: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None

    meter_options: Optional[MeterOptions] = None

    @property
    def level(self) -> Level:
        return self.option.level

    @property
    def identifier(self) -> Optional[str]:
        return self.option.level.identifier

    def is_range_query(self) -> bool:
        return self.time is None

    def should_sort(self) -> bool:
        return bool(self.target) and bool(self.identifier)
