# src/kubemeter/collectors/base_collector.py
"""
This module defines the abstract interfaces of the collaborators the query
core depends on: a time-series backend and a Kubernetes metadata provider.
Concrete implementations are injected, which keeps the core testable with
simple mocks.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List

from kubemeter.models.metrics import MetricData


class TimeSeriesBackend(ABC):
    """
    Abstract Base Class for time-series backends.
    """

    @abstractmethod
    async def instant_query(self, expr: str, time: datetime) -> MetricData:
        """
        Evaluates ``expr`` at a single point in time.

        Raises:
            BackendQueryError: If the backend cannot answer the query.
        """
        pass

    @abstractmethod
    async def range_query(self, expr: str, start: datetime, end: datetime, step: timedelta) -> MetricData:
        """
        Evaluates ``expr`` over [start, end] at the given resolution.

        Raises:
            BackendQueryError: If the backend cannot answer the query.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close HTTP sessions).
        """
        pass


class ResourceMetadataProvider(ABC):
    """
    Abstract Base Class for Kubernetes metadata lookups.
    """

    @abstractmethod
    async def get_creation_time(self, namespace: str) -> datetime:
        """
        Returns the namespace creation timestamp (timezone-aware, UTC).

        Raises:
            ResourceNotFound: If the namespace does not exist.
        """
        pass

    async def get_app_components(self, namespace: str, applications: List[str]) -> Dict[str, List[str]]:
        """Maps each application to its component workloads ("Kind:name")."""
        raise NotImplementedError

    async def get_release_components(self, namespace: str, releases: List[str]) -> Dict[str, List[str]]:
        """Maps each Helm release to its workloads ("Kind:name")."""
        raise NotImplementedError

    async def get_service_pods(self, namespace: str, services: List[str]) -> Dict[str, List[str]]:
        """Maps each service to the names of the pods it selects."""
        raise NotImplementedError

    async def close(self):
        pass
