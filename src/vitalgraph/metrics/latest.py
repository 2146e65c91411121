from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping

from vitalgraph.metrics.definitions import METRIC_NAMES

TREND_LENGTH = 20


@dataclass(frozen=True)
class MetricReading:
    """
    The most recent logged value of one core metric, with a short trend.
    """

    metric_name: str
    value: float
    unit: str
    recorded_at: str
    trend: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "value": self.value,
            "unit": self.unit,
            "recorded_at": self.recorded_at,
            "trend": list(self.trend),
        }


def _timestamp(record: Mapping[str, Any]) -> datetime:
    raw = str(record.get("recorded_at", ""))
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_latest_metrics(records: Iterable[Mapping[str, Any]]) -> List[MetricReading]:
    """
    Collapse raw metric records into one reading per metric.

    Output follows the canonical metric order; metrics never logged are
    omitted. Records naming unknown metrics are ignored.
    """
    by_metric: Dict[str, List[Mapping[str, Any]]] = {}
    for record in records:
        name = record.get("metric_name")
        if name not in METRIC_NAMES:
            continue
        by_metric.setdefault(name, []).append(record)

    readings: List[MetricReading] = []
    for name in METRIC_NAMES:
        entries = by_metric.get(name)
        if not entries:
            continue

        ordered = sorted(entries, key=_timestamp)
        latest = ordered[-1]
        trend = [
            {"recorded_at": r.get("recorded_at"), "value": float(r["value"])}
            for r in ordered[-TREND_LENGTH:]
        ]
        readings.append(
            MetricReading(
                metric_name=name,
                value=float(latest["value"]),
                unit=str(latest.get("unit", "")),
                recorded_at=str(latest.get("recorded_at", "")),
                trend=trend,
            )
        )

    return readings
