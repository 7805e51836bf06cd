"""
Evaluation results - per-label criterion checks and the run report.

Plain frozen dataclasses: easy to serialize into the stored capability
data, compare across re-evaluations, and use in assertions. The report's
label maps are read-only views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from loadtest_eval_pipeline.core.errors import ConfigurationGap
from loadtest_eval_pipeline.evals.baseline import BaselineThresholds
from loadtest_eval_pipeline.stats.metrics import LabelMetrics


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# LABEL-LEVEL RESULT
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CriterionResult:
    """Outcome of checking one label against the baseline.

    Captures each check and the metric it was made on, so a failure can
    be explained without going back to the label metrics.
    """

    label: str
    p95_pass: bool
    avg_pass: bool
    p90_pass: bool
    throughput_pass: bool
    p95: float
    avg: float
    p90: float
    throughput: float

    @property
    def passed(self) -> bool:
        return self.p95_pass and self.avg_pass and self.p90_pass and self.throughput_pass

    @property
    def failed_checks(self) -> list[str]:
        checks = {
            "p95": self.p95_pass,
            "avg": self.avg_pass,
            "p90": self.p90_pass,
            "throughput": self.throughput_pass,
        }
        return [name for name, ok in checks.items() if not ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pass": self.passed,
            "checks": {
                "p95Pass": self.p95_pass,
                "avgPass": self.avg_pass,
                "p90Pass": self.p90_pass,
                "throughputPass": self.throughput_pass,
            },
            "metrics": {
                "p95": self.p95,
                "avg": self.avg,
                "p90": self.p90,
                "throughput": self.throughput,
            },
        }

    @classmethod
    def from_dict(cls, label: str, data: Mapping[str, Any]) -> "CriterionResult":
        """Rebuild a stored result.

        Raises:
            ValueError: the stored entry does not have the to_dict() shape
        """
        data = _require_mapping(data, f"Result for {label!r}")
        checks = _require_mapping(data.get("checks", {}), f"Checks for {label!r}")
        metrics = _require_mapping(data.get("metrics", {}), f"Metrics for {label!r}")
        return cls(
            label=label,
            p95_pass=bool(checks.get("p95Pass", True)),
            avg_pass=bool(checks.get("avgPass", True)),
            p90_pass=bool(checks.get("p90Pass", True)),
            throughput_pass=bool(checks.get("throughputPass", True)),
            p95=float(metrics.get("p95", 0.0)),
            avg=float(metrics.get("avg", 0.0)),
            p90=float(metrics.get("p90", 0.0)),
            throughput=float(metrics.get("throughput", 0.0)),
        )


# ---------------------------------------------------------------------------
# RUN-LEVEL REPORT
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EvaluationReport:
    """Thresholds used plus one CriterionResult per evaluated label.

    `label_metrics` keeps the statistics of the evaluated labels so a
    later re-evaluation that no longer sees a label still has its
    numbers. An empty report is not a failure: `gap` says why nothing
    was evaluated.
    """

    thresholds: BaselineThresholds | None
    results: Mapping[str, CriterionResult] = field(default_factory=dict)
    gap: ConfigurationGap | None = None
    unmatched_labels: tuple[str, ...] = ()
    label_metrics: Mapping[str, LabelMetrics] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))
        object.__setattr__(self, "label_metrics", MappingProxyType(dict(self.label_metrics)))

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def all_passed(self) -> bool:
        return all(r.passed for r in self.results.values())

    @property
    def failed_labels(self) -> list[str]:
        return [label for label, r in self.results.items() if not r.passed]

    @property
    def pass_rate(self) -> float:
        if not self.results:
            return 0.0
        return (len(self.results) - len(self.failed_labels)) / len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline": self.thresholds.to_dict() if self.thresholds else None,
            "results": {label: r.to_dict() for label, r in self.results.items()},
            "labelStatistics": {label: m.to_dict() for label, m in self.label_metrics.items()},
            "gap": self.gap.value if self.gap else None,
            "unmatchedLabels": list(self.unmatched_labels),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvaluationReport":
        """Rebuild a stored report.

        Raises:
            ValueError: the stored data does not have the to_dict() shape
        """
        data = _require_mapping(data, "Stored evaluation")
        baseline = data.get("baseline")
        gap = data.get("gap")
        results = _require_mapping(data.get("results") or {}, "Stored results")
        label_statistics = _require_mapping(data.get("labelStatistics") or {}, "Stored label statistics")
        return cls(
            thresholds=BaselineThresholds.model_validate(baseline) if isinstance(baseline, Mapping) else None,
            results={label: CriterionResult.from_dict(label, result) for label, result in results.items()},
            gap=ConfigurationGap(gap) if gap else None,
            unmatched_labels=tuple(data.get("unmatchedLabels") or ()),
            label_metrics={
                label: LabelMetrics.from_dict(label, metrics) for label, metrics in label_statistics.items()
            },
        )
