"""
Baseline/SLA evaluator - check per-label metrics against thresholds.

The evaluator:
1. Restricts label metrics to the capability's expected test cases
2. Runs four independent threshold checks per label
3. Merges a re-evaluation into previously stored results

Missing configuration is not an error. No thresholds, no expected
labels, or no overlap between expected and observed labels all produce
an empty report with the reason recorded in `gap`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, TypeVar

from loadtest_eval_pipeline.core.errors import ConfigurationGap
from loadtest_eval_pipeline.evals.baseline import BaselineThresholds
from loadtest_eval_pipeline.evals.criteria import CriterionResult, EvaluationReport
from loadtest_eval_pipeline.stats.metrics import AggregateMetrics, LabelMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _normalize(label: str | None) -> str:
    return (label or "").strip().lower()


def _as_label_metrics(label: str, metrics: AggregateMetrics) -> LabelMetrics:
    if isinstance(metrics, LabelMetrics):
        return metrics
    return LabelMetrics.from_aggregate(label, metrics)


# ---------------------------------------------------------------------------
# ALLOW-LIST
# ---------------------------------------------------------------------------


def filter_to_allow_list(
    label_metrics: Mapping[str, AggregateMetrics],
    expected_labels: Iterable[str | None],
) -> dict[str, AggregateMetrics]:
    """
    Keep only labels matching an expected test-case name.

    Matching is exact after trimming and lower-casing both sides. The
    original label keys and their order are preserved.
    """
    allowed = {_normalize(name) for name in expected_labels if name is not None}
    allowed.discard("")
    if not allowed:
        return {}
    return {label: m for label, m in label_metrics.items() if _normalize(label) in allowed}


# ---------------------------------------------------------------------------
# CHECKS
# ---------------------------------------------------------------------------


def check_label(label: str, metrics: AggregateMetrics, thresholds: BaselineThresholds) -> CriterionResult:
    """Run the four threshold checks for one label.

    A check whose threshold is <= 0 is disabled and always passes.
    """
    return CriterionResult(
        label=label,
        p95_pass=thresholds.p95_max_ms <= 0 or metrics.p95_ms <= thresholds.p95_max_ms,
        avg_pass=thresholds.avg_max_ms <= 0 or metrics.avg_ms <= thresholds.avg_max_ms,
        p90_pass=thresholds.p90_max_ms <= 0 or metrics.p90_ms <= thresholds.p90_max_ms,
        throughput_pass=thresholds.throughput_min <= 0 or metrics.throughput >= thresholds.throughput_min,
        p95=metrics.p95_ms,
        avg=metrics.avg_ms,
        p90=metrics.p90_ms,
        throughput=metrics.throughput,
    )


def evaluate(
    label_metrics: Mapping[str, AggregateMetrics],
    expected_labels: Iterable[str | None],
    thresholds: BaselineThresholds | None,
) -> EvaluationReport:
    """
    Evaluate label metrics against the baseline.

    Args:
        label_metrics: Per-label metrics (may include "Total")
        expected_labels: Expected test-case names (the allow-list)
        thresholds: Baseline thresholds, or None when not configured

    Returns:
        EvaluationReport with one result per matching label, or an empty
        report carrying a ConfigurationGap
    """
    expected = [name for name in expected_labels if name is not None and name.strip()]

    if thresholds is None or not thresholds.is_configured:
        logger.info("No baseline thresholds configured; skipping evaluation")
        return EvaluationReport(thresholds=thresholds, gap=ConfigurationGap.NO_THRESHOLDS)

    if not expected:
        logger.info("No expected test cases configured; skipping evaluation")
        return EvaluationReport(thresholds=thresholds, gap=ConfigurationGap.NO_ALLOW_LIST)

    matched = filter_to_allow_list(label_metrics, expected)
    observed = {_normalize(label) for label in label_metrics}
    unmatched = tuple(name for name in expected if _normalize(name) not in observed)
    if unmatched:
        logger.warning(f"Expected test cases not found in results: {', '.join(unmatched)}")

    if not matched:
        return EvaluationReport(
            thresholds=thresholds,
            gap=ConfigurationGap.NO_MATCHING_LABELS,
            unmatched_labels=unmatched,
        )

    results = {label: check_label(label, metrics, thresholds) for label, metrics in matched.items()}
    report = EvaluationReport(
        thresholds=thresholds,
        results=results,
        unmatched_labels=unmatched,
        label_metrics={label: _as_label_metrics(label, metrics) for label, metrics in matched.items()},
    )
    logger.info(f"Evaluated {len(results)} labels: {len(results) - len(report.failed_labels)} passed")
    return report


# ---------------------------------------------------------------------------
# RE-EVALUATION MERGE
# ---------------------------------------------------------------------------


def merge_results(
    prior: Mapping[str, T],
    new: Mapping[str, T],
) -> dict[str, T]:
    """Right-biased union: new entries win, prior-only labels are kept."""
    merged = dict(prior)
    merged.update(new)
    return merged


def merge_reports(prior: EvaluationReport | None, new: EvaluationReport) -> EvaluationReport:
    """
    Fold a re-evaluation into the previously stored report.

    The thresholds of the new evaluation are the ones reported. An empty
    new evaluation leaves the prior results untouched. Stored label
    statistics are merged the same way as the results.
    """
    if prior is None:
        return new
    results = merge_results(prior.results, new.results)
    return EvaluationReport(
        thresholds=new.thresholds if new.thresholds is not None else prior.thresholds,
        results=results,
        gap=None if results else new.gap,
        unmatched_labels=new.unmatched_labels,
        label_metrics=merge_results(prior.label_metrics, new.label_metrics),
    )
