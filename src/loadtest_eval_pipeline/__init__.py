"""
Load-test evaluation pipeline.

Turns a JMeter results log (XML or CSV) into overall and per-label
latency/throughput/error statistics and checks them against a
capability's SLA baseline.

USAGE:
------
from loadtest_eval_pipeline import BaselineThresholds, summarize_run

summary = summarize_run(
    content,
    expected_labels=["Login", "Checkout"],
    thresholds=BaselineThresholds(p95_max_ms=800, throughput_min=5),
)
summary.labels["Total"].p95_ms
summary.evaluation.failed_labels
"""

from loadtest_eval_pipeline.core.errors import FatalInputError
from loadtest_eval_pipeline.evals import (
    BaselineThresholds,
    CapabilityConfig,
    CriterionResult,
    EvaluationReport,
)
from loadtest_eval_pipeline.harness import (
    RunSummary,
    summarize_run,
    summarize_capability_run,
    reevaluate_run,
)
from loadtest_eval_pipeline.stats import (
    TOTAL_LABEL,
    AggregateMetrics,
    LabelMetrics,
)

__all__ = [
    "FatalInputError",
    "BaselineThresholds",
    "CapabilityConfig",
    "CriterionResult",
    "EvaluationReport",
    "RunSummary",
    "summarize_run",
    "summarize_capability_run",
    "reevaluate_run",
    "TOTAL_LABEL",
    "AggregateMetrics",
    "LabelMetrics",
]
