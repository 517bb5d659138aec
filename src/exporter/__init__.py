"""Pacote exporter: integração Nautobot e servidor de métricas Prometheus.

Re-exports para ``from src.exporter import NautobotExporter``.
"""

from .exporter import NautobotExporter
from .main_http import MetricsServer

__all__ = ["NautobotExporter", "MetricsServer"]
