"""Metric namespace classification package."""

from .api import MetricNamespaceAPI, build_api
from .index_data import MetricIndexData
from .models import MetricNamespaceConfig
from .service_http import create_app

__all__ = [
    "MetricIndexData",
    "MetricNamespaceAPI",
    "MetricNamespaceConfig",
    "build_api",
    "create_app",
]

__version__ = "0.1.0"
