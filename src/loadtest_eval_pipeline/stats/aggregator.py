"""
Aggregator - single pass per scope over the run's samples.

Each scope (the whole run, then each distinct label) is walked exactly
once to collect counts, byte totals, timestamps and duration/latency
buffers. Buffers are numpy int64 arrays local to the call and are
released when it returns.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from loadtest_eval_pipeline.parsing.sample import Sample
from loadtest_eval_pipeline.stats.metrics import TOTAL_LABEL, AggregateMetrics, LabelMetrics
from loadtest_eval_pipeline.stats.percentile import nearest_rank_percentile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# SINGLE SCOPE
# ---------------------------------------------------------------------------


def aggregate(samples: Sequence[Sample]) -> AggregateMetrics:
    """
    Compute AggregateMetrics for one scope.

    Args:
        samples: Samples of the scope, in any order

    Returns:
        AggregateMetrics; all defaults for an empty scope
    """
    count = len(samples)
    if count == 0:
        return AggregateMetrics()

    durations: list[int] = []
    latencies: list[int] = []
    successes = 0
    bytes_sent = 0
    bytes_received = 0
    first_ts = last_ts = samples[0].timestamp_ms

    for sample in samples:
        durations.append(sample.duration_ms)
        if sample.latency_ms is not None:
            latencies.append(sample.latency_ms)
        if sample.success:
            successes += 1
        if sample.bytes_sent is not None:
            bytes_sent += sample.bytes_sent
        if sample.bytes_received is not None:
            bytes_received += sample.bytes_received
        if sample.timestamp_ms < first_ts:
            first_ts = sample.timestamp_ms
        elif sample.timestamp_ms > last_ts:
            last_ts = sample.timestamp_ms

    duration_buffer = np.sort(np.asarray(durations, dtype=np.int64))
    del durations

    avg_latency = 0.0
    p95_latency = 0.0
    if latencies:
        latency_buffer = np.sort(np.asarray(latencies, dtype=np.int64))
        avg_latency = int(latency_buffer.sum()) / len(latency_buffer)
        p95_latency = nearest_rank_percentile(latency_buffer, 95)

    # Whole seconds between first and last sample start
    duration_seconds = (last_ts - first_ts) // 1000
    throughput = count / duration_seconds if duration_seconds > 0 else 0.0

    failures = count - successes

    return AggregateMetrics(
        total_count=count,
        success_count=successes,
        failure_count=failures,
        avg_ms=int(duration_buffer.sum()) / count,
        min_ms=int(duration_buffer[0]),
        max_ms=int(duration_buffer[-1]),
        median_ms=nearest_rank_percentile(duration_buffer, 50),
        p90_ms=nearest_rank_percentile(duration_buffer, 90),
        p95_ms=nearest_rank_percentile(duration_buffer, 95),
        p99_ms=nearest_rank_percentile(duration_buffer, 99),
        avg_latency_ms=avg_latency,
        p95_latency_ms=p95_latency,
        error_rate_percent=failures * 100.0 / count,
        throughput=throughput,
        duration_seconds=duration_seconds,
        total_bytes_sent=bytes_sent,
        total_bytes_received=bytes_received,
        received_kb_per_sec=_kb_per_sec(bytes_received, duration_seconds),
        sent_kb_per_sec=_kb_per_sec(bytes_sent, duration_seconds),
    )


def _kb_per_sec(total_bytes: int, duration_seconds: int) -> float:
    if total_bytes <= 0 or duration_seconds <= 0:
        return 0.0
    return total_bytes / 1024.0 / duration_seconds


# ---------------------------------------------------------------------------
# PER-LABEL SCOPES
# ---------------------------------------------------------------------------


def group_by_label(samples: Sequence[Sample]) -> dict[str, list[Sample]]:
    """Group samples by label, keeping first-appearance order."""
    groups: dict[str, list[Sample]] = {}
    for sample in samples:
        groups.setdefault(sample.label, []).append(sample)
    return groups


def aggregate_by_label(
    samples: Sequence[Sample],
    overall: AggregateMetrics | None = None,
) -> dict[str, LabelMetrics]:
    """
    Compute LabelMetrics for every label, with "Total" first.

    Samples whose own label is "Total" cannot get a row of their own.
    They count toward the synthetic "Total" row only, so for such runs
    the per-label counts sum to less than the "Total" count.

    Args:
        samples: All samples of the run
        overall: Already-computed run-level metrics to reuse for "Total"

    Returns:
        Ordered dict: "Total", then labels in first-appearance order
    """
    if overall is None:
        overall = aggregate(samples)

    label_metrics: dict[str, LabelMetrics] = {
        TOTAL_LABEL: LabelMetrics.from_aggregate(TOTAL_LABEL, overall),
    }
    for label, group in group_by_label(samples).items():
        if label == TOTAL_LABEL:
            # A real "Total" label would collide with the synthetic row
            logger.warning(f"Samples labelled {TOTAL_LABEL!r} are only reported in the synthetic total")
            continue
        label_metrics[label] = LabelMetrics.from_aggregate(label, aggregate(group))
    return label_metrics


def aggregate_run(samples: Sequence[Sample]) -> tuple[AggregateMetrics, dict[str, LabelMetrics]]:
    """Run-level metrics plus the per-label map, computed once each."""
    overall = aggregate(samples)
    label_metrics = aggregate_by_label(samples, overall=overall)
    logger.info(
        f"Aggregated {overall.total_count} samples across {len(label_metrics) - 1} labels "
        f"(p95={overall.p95_ms:.0f}ms, error rate={overall.error_rate_percent:.2f}%)"
    )
    return overall, label_metrics
