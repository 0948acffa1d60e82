# src/kubemeter/cli/main.py
"""
Entry point of the kubemeter CLI.

Commands:
    metrics   Query the named metrics of a level.
    meters    Query and price the meters of a level.
    expr      Evaluate an ad-hoc PromQL expression.
    catalog   List the named metrics and meters available at a level.
    version   Show the installed version.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from typing_extensions import Annotated

from .. import __version__
from ..core.catalog import default_catalog, is_meter
from ..core.config import config
from ..core.exceptions import InvalidComponent
from ..core.telemetry import TELEMETRY_ENABLED, initialize_telemetry
from ..models.level import Level
from . import query

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kubemeter",
    help="Query and meter Kubernetes resource usage from Prometheus.",
    add_completion=False,
)


def version_callback(value: bool):
    if value:
        typer.echo(f"kubemeter version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit."),
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Override LOG_LEVEL for this run (e.g. DEBUG).")
    ] = None,
):
    """
    kubemeter: level-aware PromQL queries and metering for Kubernetes.
    """
    if log_level:
        logging.getLogger().setLevel(log_level.upper())
    if TELEMETRY_ENABLED:
        initialize_telemetry()


@app.command()
def version():
    """
    Show the version of kubemeter.
    """
    typer.echo(f"kubemeter version: {__version__}")


@app.command()
def catalog(
    level: Annotated[Level, typer.Argument(help="Level whose catalog to list.", case_sensitive=False)],
    component: Annotated[
        Optional[str], typer.Option("--component", help="Component type, required for the component level.")
    ] = None,
    meters_only: Annotated[bool, typer.Option("--meters", help="List only meters.")] = False,
):
    """
    List the named metrics and meters available at a level.
    """
    try:
        names = default_catalog().named_metrics(level, component)
    except InvalidComponent as e:
        typer.secho(f"{e} Choose one of: {', '.join(default_catalog().component_types)}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    console = Console()
    for name in names:
        if meters_only and not is_meter(name):
            continue
        console.print(name, style="green" if is_meter(name) else None, highlight=False)


app.command("metrics")(query.metrics)
app.command("meters")(query.meters)
app.command("expr")(query.expr)


if __name__ == "__main__":
    app()
