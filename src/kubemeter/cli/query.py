# src/kubemeter/cli/query.py
"""
Implements the `metrics`, `meters` and `expr` commands of the kubemeter CLI.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.config import config
from ..models.level import Level
from ..models.params import QueryParams
from .utils import run_query

logger = logging.getLogger(__name__)

# --- Shared options ---
TimeOpt = Annotated[Optional[str], typer.Option("--time", help="Unix timestamp of an instant query.")]
StartOpt = Annotated[Optional[str], typer.Option("--start", help="Unix timestamp where a range query starts.")]
EndOpt = Annotated[Optional[str], typer.Option("--end", help="Unix timestamp where a range query ends.")]
StepOpt = Annotated[Optional[str], typer.Option("--step", help="Range resolution (e.g. '10m', '1h').")]
SortMetricOpt = Annotated[Optional[str], typer.Option("--sort-metric", help="Metric whose values order the result.")]
SortTypeOpt = Annotated[Optional[str], typer.Option("--sort-type", help="Sort order: 'asc' or 'desc'.")]
PageOpt = Annotated[Optional[str], typer.Option("--page", help="Page number, used with --sort-metric.")]
LimitOpt = Annotated[Optional[str], typer.Option("--limit", help="Items per page, used with --sort-metric.")]
MetricsFilterOpt = Annotated[Optional[str], typer.Option("--metrics-filter", help="Regex selecting metrics.")]
ResourcesFilterOpt = Annotated[Optional[str], typer.Option("--resources-filter", help="Regex selecting resources.")]
NodeOpt = Annotated[Optional[str], typer.Option("--node", help="Node name.")]
WorkspaceOpt = Annotated[Optional[str], typer.Option("--workspace", help="Workspace name.")]
NamespaceOpt = Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace name.")]
KindOpt = Annotated[Optional[str], typer.Option("--kind", help="Workload kind (deployment/statefulset/daemonset).")]
WorkloadOpt = Annotated[
    Optional[str],
    typer.Option("--workload", help="Workload name (pod level). At the workload level use --resources-filter."),
]
PodOpt = Annotated[Optional[str], typer.Option("--pod", help="Pod name.")]
ContainerOpt = Annotated[Optional[str], typer.Option("--container", help="Container name.")]
PVCOpt = Annotated[Optional[str], typer.Option("--pvc", help="PersistentVolumeClaim name.")]
StorageClassOpt = Annotated[Optional[str], typer.Option("--storageclass", help="Storage class name.")]
ComponentOpt = Annotated[Optional[str], typer.Option("--component", help="Component type (etcd/apiserver/scheduler).")]
OutputOpt = Annotated[
    str,
    typer.Option("--output", "-o", help="Output format (table/json).", case_sensitive=False),
]
OutputPathOpt = Annotated[
    Optional[Path],
    typer.Option(
        "--output-path",
        help="Write JSON output to this file instead of stdout.",
        exists=False,
        dir_okay=False,
        writable=True,
    ),
]


def metrics(
    level: Annotated[Level, typer.Argument(help="Level to query.", case_sensitive=False)],
    time: TimeOpt = None,
    start: StartOpt = None,
    end: EndOpt = None,
    step: StepOpt = None,
    sort_metric: SortMetricOpt = None,
    sort_type: SortTypeOpt = None,
    page: PageOpt = None,
    limit: LimitOpt = None,
    metrics_filter: MetricsFilterOpt = None,
    resources_filter: ResourcesFilterOpt = None,
    node: NodeOpt = None,
    workspace: WorkspaceOpt = None,
    namespace: NamespaceOpt = None,
    kind: KindOpt = None,
    workload: WorkloadOpt = None,
    pod: PodOpt = None,
    container: ContainerOpt = None,
    pvc: PVCOpt = None,
    storageclass: StorageClassOpt = None,
    component: ComponentOpt = None,
    output_format: OutputOpt = "table",
    output_path: OutputPathOpt = None,
):
    """
    Query the named metrics of a level.
    """
    params = QueryParams(
        time=time,
        start=start,
        end=end,
        step=step,
        sort_metric=sort_metric,
        sort_type=sort_type,
        page=page,
        limit=limit,
        metrics_filter=metrics_filter,
        resources_filter=resources_filter,
        node=node,
        workspace=workspace,
        namespace=namespace,
        kind=kind,
        workload=workload,
        pod=pod,
        container=container,
        pvc=pvc,
        storageclass=storageclass,
        component=component,
    )
    logger.debug("Querying %s metrics with %s", level.value, params.model_dump(exclude_none=True))
    run_query(
        lambda processor: processor.query_named_metrics(params, level),
        output_format=output_format,
        output_path=output_path,
        identifier=level.identifier,
    )


def meters(
    level: Annotated[Level, typer.Argument(help="Level to meter.", case_sensitive=False)],
    time: TimeOpt = None,
    start: StartOpt = None,
    end: EndOpt = None,
    step: StepOpt = None,
    sort_metric: SortMetricOpt = None,
    sort_type: SortTypeOpt = None,
    page: PageOpt = None,
    limit: LimitOpt = None,
    metrics_filter: MetricsFilterOpt = None,
    resources_filter: ResourcesFilterOpt = None,
    node: NodeOpt = None,
    workspace: WorkspaceOpt = None,
    namespace: NamespaceOpt = None,
    kind: KindOpt = None,
    workload: WorkloadOpt = None,
    pod: PodOpt = None,
    pvc: PVCOpt = None,
    storageclass: StorageClassOpt = None,
    pvc_filter: Annotated[Optional[str], typer.Option("--pvc-filter", help="Regex selecting billed volumes.")] = None,
    applications: Annotated[
        Optional[str], typer.Option("--applications", help="Comma-separated application names.")
    ] = None,
    services: Annotated[Optional[str], typer.Option("--services", help="Comma-separated service names.")] = None,
    openpitrix_ids: Annotated[
        Optional[str], typer.Option("--openpitrix-ids", help="Comma-separated Helm release names.")
    ] = None,
    output_format: OutputOpt = "table",
    output_path: OutputPathOpt = None,
):
    """
    Query and price the meters of a level.
    """
    params = QueryParams(
        time=time,
        start=start,
        end=end,
        step=step,
        sort_metric=sort_metric,
        sort_type=sort_type,
        page=page,
        limit=limit,
        metrics_filter=metrics_filter,
        resources_filter=resources_filter,
        node=node,
        workspace=workspace,
        namespace=namespace,
        kind=kind,
        workload=workload,
        pod=pod,
        pvc=pvc,
        storageclass=storageclass,
        pvc_filter=pvc_filter,
        applications=applications,
        services=services,
        openpitrix_ids=openpitrix_ids,
    )
    try:
        price_info = config.PRICE_INFO
    except (OSError, ValueError) as e:
        typer.secho(f"Failed to load price information: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    run_query(
        lambda processor: processor.query_named_meters(params, level, price_info),
        output_format=output_format,
        output_path=output_path,
        identifier=level.identifier,
    )


def expr(
    expression: Annotated[str, typer.Argument(help="PromQL expression to evaluate.")],
    time: TimeOpt = None,
    start: StartOpt = None,
    end: EndOpt = None,
    step: StepOpt = None,
    namespace: NamespaceOpt = None,
    output_format: OutputOpt = "table",
    output_path: OutputPathOpt = None,
):
    """
    Evaluate an ad-hoc PromQL expression.
    """
    params = QueryParams(time=time, start=start, end=end, step=step, namespace=namespace)
    run_query(
        lambda processor: processor.query_expression(expression, params),
        output_format=output_format,
        output_path=output_path,
    )
