# src/kubemeter/core/factory.py
"""
Factory functions to instantiate the MonitoringProcessor and its collectors.
"""

import logging
import traceback
from functools import lru_cache

import typer

from ..collectors.metadata_collector import KubernetesMetadataCollector
from ..collectors.prometheus_collector import PrometheusCollector
from ..core.catalog import default_catalog
from ..core.compiler import ExpressionCompiler
from ..core.config import config
from ..core.executor import QueryExecutor
from ..core.processor import MonitoringProcessor

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_processor() -> MonitoringProcessor:
    """
    Factory function to instantiate and return a fully configured MonitoringProcessor.
    Uses lru_cache to act as a singleton.
    """
    logger.info("Initializing collectors and processor...")
    try:
        # 1. Instantiate the collectors
        backend = PrometheusCollector(config)
        metadata_provider = KubernetesMetadataCollector()

        # 2. Build the catalog once and share it
        catalog = default_catalog()

        # 3. Instantiate and return the processor
        return MonitoringProcessor(
            backend=backend,
            metadata_provider=metadata_provider,
            catalog=catalog,
            compiler=ExpressionCompiler(catalog),
            executor=QueryExecutor(backend),
        )
    except Exception as e:
        logger.error(f"An error occurred during processor initialization: {e}")
        logger.error("Processor initialization failed: %s", traceback.format_exc())
        raise typer.Exit(code=1)
