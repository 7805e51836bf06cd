"""
Pipeline - parse, aggregate, evaluate and assemble one run.

STAGE ORDER:
------------
1. Parse (sniff format, decode samples)
2. Aggregate (global + per label, "Total" first)
3. Evaluate (allow-list + baseline thresholds)
4. Assemble (one immutable RunSummary)

Stages 1 and 2 share a single function frame: the sample list never
leaves it, so it is unreachable as soon as aggregation returns and
before evaluation starts. One call handles one run synchronously; there
is no shared state between calls.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Iterable

from loadtest_eval_pipeline.core.errors import FatalInputError
from loadtest_eval_pipeline.evals.baseline import BaselineThresholds, CapabilityConfig
from loadtest_eval_pipeline.evals.criteria import EvaluationReport
from loadtest_eval_pipeline.evals.evaluator import evaluate, merge_reports
from loadtest_eval_pipeline.evals.store import EvaluationStore
from loadtest_eval_pipeline.harness.assembler import RunSummary, assemble_summary
from loadtest_eval_pipeline.observability import (
    PARSE_INPUT_BYTES,
    aggregate_attributes,
    evaluation_attributes,
    get_tracer,
    parse_attributes,
)
from loadtest_eval_pipeline.parsing.formats import LogFormat
from loadtest_eval_pipeline.parsing.parser import parse_samples
from loadtest_eval_pipeline.parsing.sample import ParseStats
from loadtest_eval_pipeline.stats.aggregator import aggregate_run
from loadtest_eval_pipeline.stats.metrics import AggregateMetrics, LabelMetrics

logger = logging.getLogger(__name__)


def _parse_and_aggregate(
    content: bytes | str | None,
    strict_timestamps: bool,
) -> tuple[LogFormat, ParseStats, AggregateMetrics, dict[str, LabelMetrics]]:
    """Decode and aggregate; only derived values are returned."""
    tracer = get_tracer()
    start = time.time()

    with tracer.start_span("loadtest.parse", attributes={PARSE_INPUT_BYTES: len(content or b"")}) as span:
        try:
            parsed = parse_samples(content, strict_timestamps=strict_timestamps)
        except FatalInputError as e:
            span.record_exception(e)
            span.set_status("error", str(e))
            raise
        for key, value in parse_attributes(parsed).items():
            span.set_attribute(key, value)

    parse_ms = (time.time() - start) * 1000
    logger.info(
        f"Parsed {parsed.stats.records_accepted}/{parsed.stats.records_read} records "
        f"({parsed.log_format.value}) in {parse_ms:.0f}ms"
    )

    with tracer.start_span("loadtest.aggregate") as span:
        overall, label_metrics = aggregate_run(parsed.samples)
        for key, value in aggregate_attributes(overall, len(label_metrics) - 1).items():
            span.set_attribute(key, value)

    return parsed.log_format, parsed.stats, overall, label_metrics


def summarize_run(
    content: bytes | str | None,
    *,
    expected_labels: Iterable[str] = (),
    thresholds: BaselineThresholds | None = None,
    strict_timestamps: bool = False,
) -> RunSummary:
    """
    Run the full pipeline over one results log.

    Args:
        content: Raw results log (XML or CSV)
        expected_labels: Expected test-case names (evaluation allow-list)
        thresholds: Baseline thresholds; None skips evaluation
        strict_timestamps: Skip records with unparsable timestamps

    Returns:
        RunSummary with overall/label metrics and the evaluation report

    Raises:
        FatalInputError: input absent, empty, or structurally unusable
    """
    log_format, stats, overall, label_metrics = _parse_and_aggregate(content, strict_timestamps)

    with get_tracer().start_span("loadtest.evaluate") as span:
        report = evaluate(label_metrics, expected_labels, thresholds)
        for key, value in evaluation_attributes(report).items():
            span.set_attribute(key, value)
        span.set_status("ok" if report.all_passed else "error")

    return assemble_summary(log_format, stats, overall, label_metrics, report)


def summarize_capability_run(
    content: bytes | str | None,
    capability: CapabilityConfig,
    *,
    strict_timestamps: bool = False,
) -> RunSummary:
    """Run the pipeline with allow-list and thresholds from a capability."""
    return summarize_run(
        content,
        expected_labels=capability.expected_labels,
        thresholds=capability.thresholds,
        strict_timestamps=strict_timestamps,
    )


def reevaluate_run(summary: RunSummary, store: EvaluationStore) -> RunSummary:
    """
    Merge a run's evaluation into the stored results for that run.

    New per-label results and label statistics overwrite stored ones;
    stored labels absent from this evaluation are kept. Callers must not run this
    concurrently for the same store.
    """
    prior: EvaluationReport | None = store.load()
    merged = merge_reports(prior, summary.evaluation)
    store.save(merged)
    if prior is not None:
        retained = set(prior.results) - set(summary.evaluation.results)
        logger.info(f"Merged evaluation: {len(summary.evaluation.results)} updated, {len(retained)} retained")
    return dataclasses.replace(summary, evaluation=merged)
