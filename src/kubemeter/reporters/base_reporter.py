# src/kubemeter/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""
from abc import ABC, abstractmethod

from ..models.metrics import MetricResult


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report(self, result: MetricResult, identifier: str = None):
        """
        Takes the processed query result and presents it in a specific format
        (e.g., console, JSON).
        """
        pass
