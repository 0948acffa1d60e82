# src/kubemeter/reporters/console_reporter.py
"""
A reporter that displays query results as formatted tables in the console.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..models.metrics import Metric, MetricResult, MetricType, MetricValue, format_value
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)


def _describe(value: MetricValue, identifier: Optional[str]) -> str:
    if identifier and identifier in value.labels:
        return value.labels[identifier]
    if not value.labels:
        return "-"
    return ", ".join(f"{k}={v}" for k, v in sorted(value.labels.items()) if k != "__name__")


def _stat(value: Optional[float]) -> str:
    return "" if value is None else format_value(value)


class ConsoleReporter(BaseReporter):
    """
    Renders query results to the console using the 'rich' library, one table
    per metric.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def report(self, result: MetricResult, identifier: str = None):
        if not result.results:
            self.console.print("No data to report.", style="yellow")
            return

        for metric in result.results:
            if metric.error:
                self.console.print(f"{metric.name}: {metric.error}", style="red")
                continue
            self.console.print(self._metric_table(metric, identifier))

        if result.total_items is not None:
            self.console.print(
                f"Page {result.current_page} of {result.total_pages} ({result.total_items} items)",
                style="dim",
            )

    def _metric_table(self, metric: Metric, identifier: Optional[str]) -> Table:
        priced = any(v.fee is not None for v in metric.values)
        table = Table(title=metric.name, header_style="bold magenta", show_lines=False)
        table.add_column(identifier.capitalize() if identifier else "Series", style="cyan")
        if metric.type == MetricType.MATRIX:
            table.add_column("Points", justify="right")
            table.add_column("Last", style="green", justify="right")
        else:
            table.add_column("Value", style="green", justify="right")
        if priced:
            table.add_column("Min", style="blue", justify="right")
            table.add_column("Max", style="blue", justify="right")
            table.add_column("Avg", style="blue", justify="right")
            table.add_column("Sum", style="yellow", justify="right")
            table.add_column("Fee", style="bold green", justify="right")
            table.add_column("Unit", style="dim")

        for value in metric.values:
            row = [_describe(value, identifier)]
            if metric.type == MetricType.MATRIX:
                series = value.series or []
                row.extend([str(len(series)), format_value(series[-1][1]) if series else ""])
            else:
                row.append(format_value(value.sample[1]) if value.sample else "")
            if priced:
                unit = " ".join(u for u in (value.currency_unit, value.resource_unit) if u)
                row.extend(
                    [_stat(value.min), _stat(value.max), _stat(value.avg), _stat(value.sum), _stat(value.fee), unit]
                )
            table.add_row(*row)
        return table
