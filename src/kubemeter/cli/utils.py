# src/kubemeter/cli/utils.py
import asyncio
import logging
import sys
import traceback
from pathlib import Path
from typing import Awaitable, Callable, Optional

import typer

from ..core.exceptions import KubeMeterError, QueryParameterError
from ..core.factory import get_processor
from ..core.processor import MonitoringProcessor
from ..exporters.json_exporter import JSONExporter
from ..models.metrics import MetricResult
from ..reporters.console_reporter import ConsoleReporter

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "json")


async def _run_and_close(query: Callable[[MonitoringProcessor], Awaitable[MetricResult]]) -> MetricResult:
    processor = get_processor()
    try:
        return await query(processor)
    finally:
        # Clients are bound to the event loop of this run.
        await processor.close()


async def handle_export(result: MetricResult, output_path: Optional[Path]):
    """Writes the serialized result to a JSON file, or to stdout without a path."""
    data = result.to_dict()
    if output_path is None:
        typer.echo(JSONExporter.dumps(data))
        return

    exporter = JSONExporter()
    try:
        written_path = await exporter.export(data, str(output_path))
    except OSError as e:
        logger.error(f"Failed to export result to {output_path}: {e}")
        raise typer.Exit(code=1)
    logger.info(f"Successfully exported result to {written_path}")
    print(f"Result exported to: {written_path}", file=sys.stderr)


def run_query(
    query: Callable[[MonitoringProcessor], Awaitable[MetricResult]],
    output_format: str = "table",
    output_path: Optional[Path] = None,
    identifier: Optional[str] = None,
):
    """
    Runs ``query`` against the configured processor and renders the result.
    Parameter errors exit with code 2, every other failure with code 1.
    """
    output_format = (output_format or "table").lower()
    if output_format not in OUTPUT_FORMATS:
        typer.secho(f"Invalid output format '{output_format}'. Use one of: {', '.join(OUTPUT_FORMATS)}.", err=True)
        raise typer.Exit(code=2)

    try:
        result = asyncio.run(_run_and_close(query))
    except QueryParameterError as e:
        typer.secho(f"Invalid query: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    except KubeMeterError as e:
        logger.error(f"Query failed: {e}")
        logger.debug(traceback.format_exc())
        typer.secho(f"Query failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output_format == "json":
        asyncio.run(handle_export(result, output_path))
    else:
        ConsoleReporter().report(result, identifier)
