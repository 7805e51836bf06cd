"""
Semantic Conventions for Span Attributes

Attribute keys for the pipeline stages, under a custom `loadtest`
namespace, plus helpers that build attribute dicts from stage outputs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loadtest_eval_pipeline.evals.criteria import EvaluationReport
    from loadtest_eval_pipeline.parsing.sample import ParseResult
    from loadtest_eval_pipeline.stats.metrics import AggregateMetrics


# ---------------------------------------------------------------------------
# PARSE
# ---------------------------------------------------------------------------

PARSE_FORMAT = "loadtest.parse.format"  # "xml", "csv"
PARSE_INPUT_BYTES = "loadtest.parse.input_bytes"
PARSE_RECORDS_READ = "loadtest.parse.records_read"
PARSE_RECORDS_SKIPPED = "loadtest.parse.records_skipped"
PARSE_DEGRADED_FIELDS = "loadtest.parse.degraded_fields"
PARSE_TIMESTAMP_FALLBACKS = "loadtest.parse.timestamp_fallbacks"


# ---------------------------------------------------------------------------
# AGGREGATE
# ---------------------------------------------------------------------------

AGGREGATE_SAMPLE_COUNT = "loadtest.aggregate.sample_count"
AGGREGATE_LABEL_COUNT = "loadtest.aggregate.label_count"
AGGREGATE_P95_MS = "loadtest.aggregate.p95_ms"
AGGREGATE_ERROR_RATE = "loadtest.aggregate.error_rate_percent"
AGGREGATE_THROUGHPUT = "loadtest.aggregate.throughput"


# ---------------------------------------------------------------------------
# EVALUATE
# ---------------------------------------------------------------------------

EVAL_LABEL_COUNT = "loadtest.eval.label_count"
EVAL_FAILED_COUNT = "loadtest.eval.failed_count"
EVAL_PASSED = "loadtest.eval.passed"  # bool
EVAL_GAP = "loadtest.eval.gap"  # "no_thresholds", ...


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def parse_attributes(result: ParseResult) -> dict:
    """Create attributes dict for a parse span."""
    return {
        PARSE_FORMAT: result.log_format.value,
        PARSE_RECORDS_READ: result.stats.records_read,
        PARSE_RECORDS_SKIPPED: result.stats.records_skipped,
        PARSE_DEGRADED_FIELDS: result.stats.degraded_fields,
        PARSE_TIMESTAMP_FALLBACKS: result.stats.timestamp_fallbacks,
    }


def aggregate_attributes(overall: AggregateMetrics, label_count: int) -> dict:
    """Create attributes dict for an aggregation span."""
    return {
        AGGREGATE_SAMPLE_COUNT: overall.total_count,
        AGGREGATE_LABEL_COUNT: label_count,
        AGGREGATE_P95_MS: overall.p95_ms,
        AGGREGATE_ERROR_RATE: overall.error_rate_percent,
        AGGREGATE_THROUGHPUT: overall.throughput,
    }


def evaluation_attributes(report: EvaluationReport) -> dict:
    """Create attributes dict for an evaluation span."""
    attrs = {
        EVAL_LABEL_COUNT: len(report.results),
        EVAL_FAILED_COUNT: len(report.failed_labels),
        EVAL_PASSED: report.all_passed,
    }
    if report.gap:
        attrs[EVAL_GAP] = report.gap.value
    return attrs
