"""
Aggregate metrics - data models for run-level and per-label statistics.

These dataclasses are the derived snapshot that survives a pipeline
invocation once the raw samples are gone. They are frozen: downstream
consumers (reporting, charting, persistence) read them, never update
them.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping


TOTAL_LABEL = "Total"


# ---------------------------------------------------------------------------
# SCOPE METRICS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AggregateMetrics:
    """Statistics for one scope of samples.

    Durations and latencies are in milliseconds. Every field defaults to
    zero, which is also what an empty scope produces.
    """

    total_count: int = 0
    success_count: int = 0
    failure_count: int = 0

    avg_ms: float = 0.0
    min_ms: int = 0
    max_ms: int = 0
    median_ms: float = 0.0
    p90_ms: float = 0.0
    p95_ms: float = 0.0
    p99_ms: float = 0.0

    avg_latency_ms: float = 0.0
    p95_latency_ms: float = 0.0

    error_rate_percent: float = 0.0
    throughput: float = 0.0
    duration_seconds: int = 0

    total_bytes_sent: int = 0
    total_bytes_received: int = 0
    received_kb_per_sec: float = 0.0
    sent_kb_per_sec: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# LABEL METRICS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LabelMetrics(AggregateMetrics):
    """AggregateMetrics scoped to one transaction label."""

    label: str = TOTAL_LABEL

    @classmethod
    def from_aggregate(cls, label: str, metrics: AggregateMetrics) -> "LabelMetrics":
        values = {f.name: getattr(metrics, f.name) for f in fields(AggregateMetrics)}
        return cls(label=label, **values)

    @classmethod
    def from_dict(cls, label: str, data: Mapping[str, Any]) -> "LabelMetrics":
        """Rebuild stored label metrics; unknown keys are ignored.

        Raises:
            ValueError: data is not a mapping or holds a non-numeric value
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Label metrics for {label!r} must be an object, got {type(data).__name__}")
        values = {f.name: f.type(data[f.name]) for f in fields(AggregateMetrics) if f.name in data}
        return cls(label=label, **values)
