# src/kubemeter/core/k8s_client.py
"""
Lazily loads the Kubernetes client configuration shared by the metadata
lookups. In-cluster service account credentials win over a local kubeconfig.
"""

import asyncio
import logging
from typing import Optional, Type, TypeVar

from kubernetes_asyncio import client, config

logger = logging.getLogger(__name__)

Api = TypeVar("Api")

_CONFIG_LOCK = asyncio.Lock()
_CONFIG_SOURCE: Optional[str] = None


async def _load_in_cluster():
    config.load_incluster_config()


async def _load_kubeconfig():
    await config.load_kube_config()


_LOADERS = (("in-cluster", _load_in_cluster), ("kubeconfig", _load_kubeconfig))


async def ensure_k8s_config() -> bool:
    """
    Loads the Kubernetes configuration once per process.

    Returns:
        bool: True if a configuration is available, False otherwise.
    """
    global _CONFIG_SOURCE

    if _CONFIG_SOURCE is not None:
        return True

    async with _CONFIG_LOCK:
        if _CONFIG_SOURCE is not None:
            return True

        for source, load in _LOADERS:
            try:
                await load()
            except config.ConfigException as e:
                logger.debug("No %s Kubernetes configuration: %s", source, e)
                continue
            logger.info("Loaded %s Kubernetes configuration.", source)
            _CONFIG_SOURCE = source
            return True

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_api(api_cls: Type[Api]) -> Optional[Api]:
    """Returns an instance of ``api_cls``, or None without a cluster config."""
    if await ensure_k8s_config():
        return api_cls()
    return None


async def get_core_v1_api() -> Optional[client.CoreV1Api]:
    return await get_api(client.CoreV1Api)


async def get_apps_v1_api() -> Optional[client.AppsV1Api]:
    return await get_api(client.AppsV1Api)
