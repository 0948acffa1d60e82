# src/kubemeter/collectors/prometheus_collector.py

"""
PrometheusCollector answers instant and range PromQL queries over the
Prometheus HTTP API and parses the responses into MetricData.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx

from kubemeter.collectors.base_collector import TimeSeriesBackend
from kubemeter.core.config import Config
from kubemeter.core.exceptions import BackendQueryError
from kubemeter.models.metrics import MetricData, MetricType, MetricValue
from kubemeter.utils.http_client import get_async_http_client

logger = logging.getLogger(__name__)


class PrometheusCollector(TimeSeriesBackend):
    """
    Time-series backend backed by a Prometheus server.
    """

    def __init__(self, settings: Config, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.base_url = settings.PROMETHEUS_URL

        # TLS verify and auth support
        self.verify = getattr(settings, "PROMETHEUS_VERIFY_CERTS", True)
        self.bearer_token = getattr(settings, "PROMETHEUS_BEARER_TOKEN", None)
        self.username = getattr(settings, "PROMETHEUS_USERNAME", None)
        self.password = getattr(settings, "PROMETHEUS_PASSWORD", None)

        self._client = client

    def _ensure_client(self) -> httpx.AsyncClient:
        """
        Lazily builds the shared AsyncClient so every query of a batch reuses
        one connection pool.
        """
        if self._client is None:
            headers = {}
            if self.bearer_token:
                headers["Authorization"] = f"Bearer {self.bearer_token}"
            auth = None
            if self.username and self.password:
                auth = (self.username, self.password)
            self._client = get_async_http_client(verify=self.verify, headers=headers, auth=auth)
        return self._client

    async def instant_query(self, expr: str, time: datetime) -> MetricData:
        params = {"query": expr, "time": f"{time.timestamp():.3f}"}
        return await self._query("query", params)

    async def range_query(self, expr: str, start: datetime, end: datetime, step: timedelta) -> MetricData:
        params = {
            "query": expr,
            "start": f"{start.timestamp():.3f}",
            "end": f"{end.timestamp():.3f}",
            "step": f"{int(step.total_seconds())}s",
        }
        return await self._query("query_range", params)

    async def _query(self, endpoint: str, params: Dict[str, str]) -> MetricData:
        """
        Internal helper to run a query against the Prometheus API.

        Tries the standard and the '/prometheus' prefixed API paths. A 404 or
        a connection error moves on to the next candidate; any other failure
        is raised as BackendQueryError.
        """
        base = self.base_url.rstrip("/") if self.base_url else ""
        if not base:
            raise BackendQueryError("PROMETHEUS_URL is not configured.")

        candidates = [
            f"{base}/api/v1/{endpoint}",
            f"{base}/prometheus/api/v1/{endpoint}",
        ]

        client = self._ensure_client()
        last_err = None
        for query_url in candidates:
            try:
                logger.debug("Querying Prometheus at %s: %s", query_url, params.get("query"))
                response = await client.get(query_url, params=params)
            except httpx.HTTPError as e:
                last_err = e
                logger.debug("Failed to connect to Prometheus at %s: %s", query_url, e)
                continue

            if response.status_code == 404:
                last_err = f"{query_url} returned 404"
                continue

            try:
                payload = response.json()
            except ValueError as e:
                raise BackendQueryError(
                    f"Prometheus at {query_url} returned a non-JSON response (HTTP {response.status_code})."
                ) from e

            if response.status_code >= 400 or payload.get("status") != "success":
                error = payload.get("error") or f"HTTP {response.status_code}"
                logger.warning("Prometheus returned non-success status for %s: %s", query_url, error)
                raise BackendQueryError(f"Prometheus query failed: {error}")

            return self._parse_data(payload.get("data") or {})

        logger.error("All Prometheus query endpoints failed. Last error: %s", last_err)
        raise BackendQueryError(f"Prometheus is unreachable at {base}: {last_err}")

    @staticmethod
    def _parse_data(data: Dict[str, Any]) -> MetricData:
        """Converts the 'data' member of a Prometheus response into MetricData."""
        result_type = data.get("resultType")
        result = data.get("result")

        # Scalars and strings carry a single [ts, value] pair.
        if result_type in ("scalar", "string"):
            return MetricData(type=MetricType.VECTOR, values=[MetricValue(sample=result)])

        values: List[MetricValue] = []
        for item in result or []:
            values.append(
                MetricValue(
                    labels=item.get("metric") or {},
                    sample=item.get("value"),
                    series=item.get("values"),
                )
            )
        return MetricData(type=MetricType(result_type) if result_type else None, values=values)

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
