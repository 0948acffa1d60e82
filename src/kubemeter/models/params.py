# src/kubemeter/models/params.py
"""
Raw request parameters as they arrive from a caller (CLI flags or query
string values). Values stay strings until the time-range resolver parses
and validates them.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class QueryParams(BaseModel):
    """Recognized query options."""

    time: Optional[str] = Field(None, description="Unix timestamp of an instant query.")
    start: Optional[str] = Field(None, description="Unix timestamp where a range query starts.")
    end: Optional[str] = Field(None, description="Unix timestamp where a range query ends.")
    step: Optional[str] = Field(None, description="Range resolution, e.g. '10m'.")

    sort_metric: Optional[str] = Field(None, description="Metric whose values order the result.")
    sort_type: Optional[str] = Field(None, description="'asc' or 'desc'.")
    page: Optional[str] = None
    limit: Optional[str] = None

    metrics_filter: Optional[str] = Field(None, description="Regex selecting catalog metrics.")
    resources_filter: Optional[str] = Field(None, description="Regex selecting resources by name.")

    node: Optional[str] = None
    workspace: Optional[str] = None
    namespace: Optional[str] = None
    kind: Optional[str] = None
    workload: Optional[str] = None
    pod: Optional[str] = None
    container: Optional[str] = None
    pvc: Optional[str] = None
    storageclass: Optional[str] = None
    component: Optional[str] = None

    pvc_filter: Optional[str] = Field(None, description="Regex selecting volumes billed by meters.")
    applications: Optional[str] = Field(None, description="Comma-separated application names.")
    services: Optional[str] = Field(None, description="Comma-separated service names.")
    openpitrix_ids: Optional[str] = Field(None, description="Comma-separated Helm release names.")

    @property
    def application_list(self) -> List[str]:
        return _split(self.applications)

    @property
    def service_list(self) -> List[str]:
        return _split(self.services)

    @property
    def openpitrix_list(self) -> List[str]:
        return _split(self.openpitrix_ids)
