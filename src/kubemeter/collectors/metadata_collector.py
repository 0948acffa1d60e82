# src/kubemeter/collectors/metadata_collector.py

import logging
from datetime import datetime
from typing import Dict, List

from kubernetes_asyncio.client.rest import ApiException

from kubemeter.collectors.base_collector import ResourceMetadataProvider
from kubemeter.core.exceptions import KubeMeterError, ResourceNotFound
from kubemeter.core.k8s_client import get_apps_v1_api, get_core_v1_api
from kubemeter.utils.date_utils import ensure_utc

logger = logging.getLogger(__name__)

APP_NAME_LABEL = "app.kubernetes.io/name"
RELEASE_LABEL = "app.kubernetes.io/instance"


class KubernetesMetadataCollector(ResourceMetadataProvider):
    """Looks up namespace creation times and metering group members in the cluster."""

    def __init__(self):
        self._core = None
        self._apps = None

    async def _ensure_core(self):
        if self._core is None:
            self._core = await get_core_v1_api()
        if self._core is None:
            raise KubeMeterError("Kubernetes client is not configured.")
        return self._core

    async def _ensure_apps(self):
        if self._apps is None:
            self._apps = await get_apps_v1_api()
        if self._apps is None:
            raise KubeMeterError("Kubernetes client is not configured.")
        return self._apps

    async def get_creation_time(self, namespace: str) -> datetime:
        api = await self._ensure_core()
        try:
            ns = await api.read_namespace(name=namespace)
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFound(f"Namespace '{namespace}' not found.") from e
            raise KubeMeterError(f"Failed to read namespace '{namespace}': {e.reason}") from e
        return ensure_utc(ns.metadata.creation_timestamp)

    async def get_app_components(self, namespace: str, applications: List[str]) -> Dict[str, List[str]]:
        return await self._components_by_label(namespace, APP_NAME_LABEL, applications)

    async def get_release_components(self, namespace: str, releases: List[str]) -> Dict[str, List[str]]:
        return await self._components_by_label(namespace, RELEASE_LABEL, releases)

    async def _components_by_label(self, namespace: str, label: str, names: List[str]) -> Dict[str, List[str]]:
        """
        Lists the deployments, statefulsets and daemonsets carrying
        ``label=<name>`` for each name, as "Kind:name" components.
        """
        api = await self._ensure_apps()
        components: Dict[str, List[str]] = {}
        for name in names:
            selector = f"{label}={name}"
            try:
                deployments = await api.list_namespaced_deployment(namespace, label_selector=selector)
                statefulsets = await api.list_namespaced_stateful_set(namespace, label_selector=selector)
                daemonsets = await api.list_namespaced_daemon_set(namespace, label_selector=selector)
            except ApiException as e:
                raise KubeMeterError(f"Failed to list workloads of '{name}' in '{namespace}': {e.reason}") from e

            members = [f"Deployment:{d.metadata.name}" for d in deployments.items]
            members += [f"StatefulSet:{s.metadata.name}" for s in statefulsets.items]
            members += [f"DaemonSet:{d.metadata.name}" for d in daemonsets.items]
            if not members:
                logger.info("No workloads found for '%s' in namespace '%s'", name, namespace)
            components[name] = members
        return components

    async def get_service_pods(self, namespace: str, services: List[str]) -> Dict[str, List[str]]:
        api = await self._ensure_core()
        pods: Dict[str, List[str]] = {}
        for name in services:
            try:
                svc = await api.read_namespaced_service(name=name, namespace=namespace)
            except ApiException as e:
                if e.status == 404:
                    raise ResourceNotFound(f"Service '{name}' not found in '{namespace}'.") from e
                raise KubeMeterError(f"Failed to read service '{name}': {e.reason}") from e

            selector = (svc.spec.selector or {}) if svc.spec else {}
            if not selector:
                # Services without a selector (e.g. ExternalName) own no pods.
                pods[name] = []
                continue

            label_selector = ",".join(f"{k}={v}" for k, v in sorted(selector.items()))
            try:
                pod_list = await api.list_namespaced_pod(namespace, label_selector=label_selector)
            except ApiException as e:
                raise KubeMeterError(f"Failed to list pods of service '{name}': {e.reason}") from e
            pods[name] = [p.metadata.name for p in pod_list.items]
        return pods

    async def close(self):
        """Close the Kubernetes API clients if they exist."""
        if self._core:
            await self._core.api_client.close()
            self._core = None
        if self._apps:
            await self._apps.api_client.close()
            self._apps = None
        logger.debug("KubernetesMetadataCollector clients closed.")
