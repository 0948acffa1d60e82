"""
kubemeter: level-aware PromQL compiler, executor and metering toolkit for
KubeSphere-style monitoring.
"""

__version__ = "0.1.0"
