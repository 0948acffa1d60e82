from .base_collector import ResourceMetadataProvider, TimeSeriesBackend
from .metadata_collector import KubernetesMetadataCollector
from .prometheus_collector import PrometheusCollector

__all__ = [
    "KubernetesMetadataCollector",
    "PrometheusCollector",
    "ResourceMetadataProvider",
    "TimeSeriesBackend",
]
