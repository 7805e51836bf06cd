"""
Result assembler - the single join point for downstream consumers.

Reporting, charting and persistence all read one RunSummary instead of
re-deriving statistics. Nothing is computed here.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from loadtest_eval_pipeline.evals.criteria import EvaluationReport
from loadtest_eval_pipeline.parsing.formats import LogFormat
from loadtest_eval_pipeline.parsing.sample import ParseCounts, ParseStats
from loadtest_eval_pipeline.stats.metrics import TOTAL_LABEL, AggregateMetrics, LabelMetrics


@dataclass(frozen=True)
class RunSummary:
    """Everything derived from one results log."""

    log_format: LogFormat
    parse_stats: ParseCounts
    overall: AggregateMetrics
    labels: Mapping[str, LabelMetrics]
    evaluation: EvaluationReport

    @property
    def total(self) -> LabelMetrics:
        return self.labels[TOTAL_LABEL]

    @property
    def passed(self) -> bool:
        """True when every evaluated label passed (vacuously for none)."""
        return self.evaluation.all_passed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "format": self.log_format.value,
            "parse": self.parse_stats.to_dict(),
            "overall": self.overall.to_dict(),
            "labelStatistics": {label: m.to_dict() for label, m in self.labels.items()},
            "baselineEvaluation": self.evaluation.to_dict(),
            "passed": self.passed,
        }


def assemble_summary(
    log_format: LogFormat,
    parse_stats: ParseStats,
    overall: AggregateMetrics,
    labels: Mapping[str, LabelMetrics],
    evaluation: EvaluationReport,
) -> RunSummary:
    """
    Compose stage outputs into one immutable RunSummary.

    Raises:
        ValueError: if the label map does not lead with the "Total" entry
    """
    if next(iter(labels), None) != TOTAL_LABEL:
        raise ValueError(f"Label metrics must start with the {TOTAL_LABEL!r} entry")
    return RunSummary(
        log_format=log_format,
        parse_stats=parse_stats.snapshot(),
        overall=overall,
        labels=MappingProxyType(dict(labels)),
        evaluation=evaluation,
    )
