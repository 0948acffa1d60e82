# src/kubemeter/core/compiler.py
"""
Turns a named metric or meter plus a level option into a PromQL expression.
"""

import logging
from typing import Optional

from kubemeter.core.catalog import TemplateCatalog, is_meter
from kubemeter.models.options import LevelOption, MeterOptions
from kubemeter.utils.templating import substitute

logger = logging.getLogger(__name__)


class ExpressionCompiler:
    """
    Pure string transform from (name, option) to an expression. The compiler
    never talks to the backend and returns the same output for the same input.
    """

    def __init__(self, catalog: TemplateCatalog):
        self.catalog = catalog

    def make_expr(self, name: str, option: LevelOption, meter_options: Optional[MeterOptions] = None) -> str:
        """
        Returns the expression for ``name``, or an empty string when the name
        is unknown or a meter is requested without meter options.
        """
        tmpl = self.catalog.get_template(name)
        if tmpl is None:
            logger.warning("Invalid metric or meter name '%s'", name)
            return ""

        selectors = option.apply(name)
        if not is_meter(name):
            return substitute(tmpl, selectors.metric)

        if meter_options is None:
            logger.error("Meter options not found for meter '%s'", name)
            return ""

        values = {
            "step": f"{meter_options.hours}h",
            "factor": str(meter_options.hours),
            "nodeSelector": "",
            "instanceSelector": "",
            "app": "",
            "svc": "",
            "pvc": "",
            "internalPodSelector": "",
        }
        values.update(selectors.meter)
        return substitute(tmpl, values)
