# src/kubemeter/core/catalog.py
"""
The template catalog: an immutable lookup of PromQL templates and of the
named metrics valid per level. It is built once and injected into the
expression compiler and the processor.
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from kubemeter.core.exceptions import InvalidComponent
from kubemeter.data.meter_templates import METER_TEMPLATES
from kubemeter.data.named_metrics import COMPONENT_CATALOGS, LEVEL_CATALOGS
from kubemeter.data.promql_templates import METRIC_TEMPLATES
from kubemeter.models.level import Level

logger = logging.getLogger(__name__)

METER_PREFIX = "meter_"


def normalize_template(tmpl: str) -> str:
    """Collapses every run of whitespace into a single space."""
    return " ".join(tmpl.split())


def is_meter(name: str) -> bool:
    return name.startswith(METER_PREFIX)


class TemplateCatalog:
    """
    Read-only view over metric templates, meter templates and per-level
    catalogs.
    """

    def __init__(
        self,
        metric_templates: Mapping[str, str] = METRIC_TEMPLATES,
        meter_templates: Mapping[str, str] = METER_TEMPLATES,
        level_catalogs: Mapping[Level, Tuple[str, ...]] = LEVEL_CATALOGS,
        component_catalogs: Mapping[str, Tuple[str, ...]] = COMPONENT_CATALOGS,
    ):
        self._metric_templates = MappingProxyType({k: normalize_template(v) for k, v in metric_templates.items()})
        self._meter_templates = MappingProxyType({k: normalize_template(v) for k, v in meter_templates.items()})
        self._level_catalogs = MappingProxyType(dict(level_catalogs))
        self._component_catalogs = MappingProxyType(dict(component_catalogs))

    def get_template(self, name: str) -> Optional[str]:
        """Returns the normalized template for a metric or meter, or None when unknown."""
        if is_meter(name):
            return self._meter_templates.get(name)
        return self._metric_templates.get(name)

    def named_metrics(self, level: Level, component_type: Optional[str] = None) -> Tuple[str, ...]:
        """
        Returns the ordered catalog for a level. Component queries select the
        catalog by component type.

        Raises:
            InvalidComponent: If the component type has no catalog.
        """
        if level == Level.COMPONENT:
            names = self._component_catalogs.get(component_type or "")
            if names is None:
                raise InvalidComponent(f"Invalid component type '{component_type}'.")
            return names
        return self._level_catalogs.get(level, ())

    @property
    def component_types(self) -> Tuple[str, ...]:
        return tuple(self._component_catalogs)


@lru_cache(maxsize=1)
def default_catalog() -> TemplateCatalog:
    """Returns the process-wide catalog built from the bundled templates."""
    catalog = TemplateCatalog()
    logger.debug(
        "Template catalog built with %d metric and %d meter templates",
        len(catalog._metric_templates),
        len(catalog._meter_templates),
    )
    return catalog
