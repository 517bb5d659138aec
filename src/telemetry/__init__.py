"""Pacote telemetry: modelo de notificações gNMI e derivação de identidade.

Re-exports das APIs usadas pelo exporter.
"""

from .notification import Notification, PathElem, TypedValue, Update
from .translator import MetricIdentity, update_to_metric
from .slugs import get_slug, make_endpoint, slugify

__all__ = [
    "Notification",
    "PathElem",
    "TypedValue",
    "Update",
    "MetricIdentity",
    "update_to_metric",
    "get_slug",
    "make_endpoint",
    "slugify",
]
