"""
Statistics module - percentile calculation and aggregation.

- percentile.py: nearest-rank percentile shared by every scope
- metrics.py: AggregateMetrics / LabelMetrics data models
- aggregator.py: single-pass aggregation, global and per label
"""

from loadtest_eval_pipeline.stats.percentile import (
    nearest_rank_percentile,
    percentile_index,
)
from loadtest_eval_pipeline.stats.metrics import (
    TOTAL_LABEL,
    AggregateMetrics,
    LabelMetrics,
)
from loadtest_eval_pipeline.stats.aggregator import (
    aggregate,
    aggregate_by_label,
    aggregate_run,
    group_by_label,
)

__all__ = [
    # Percentile
    "nearest_rank_percentile",
    "percentile_index",
    # Metrics
    "TOTAL_LABEL",
    "AggregateMetrics",
    "LabelMetrics",
    # Aggregator
    "aggregate",
    "aggregate_by_label",
    "aggregate_run",
    "group_by_label",
]
