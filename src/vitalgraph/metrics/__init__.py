"""
Core-tier metric vocabulary: names, units, improvement direction and
latest-value extraction.
"""

from vitalgraph.metrics.definitions import (
    METRIC_NAMES,
    METRIC_DEFINITIONS,
    METRIC_LABELS,
    IMPROVEMENT_DIRECTION,
    WEIGHT_UNITS,
    MetricDefinition,
    classify_change,
    convert_weight,
    is_metric_name,
)
from vitalgraph.metrics.latest import MetricReading, build_latest_metrics

__all__ = [
    "METRIC_NAMES",
    "METRIC_DEFINITIONS",
    "METRIC_LABELS",
    "IMPROVEMENT_DIRECTION",
    "WEIGHT_UNITS",
    "MetricDefinition",
    "MetricReading",
    "build_latest_metrics",
    "classify_change",
    "convert_weight",
    "is_metric_name",
]
