"""
Baseline evaluation module - SLA checks on per-label metrics.

- baseline.py: BaselineThresholds + CapabilityConfig (pydantic)
- criteria.py: CriterionResult / EvaluationReport data models
- evaluator.py: allow-list filtering, threshold checks, merge
- store.py: EvaluationStore protocol + implementations (File, InMemory)
"""

from loadtest_eval_pipeline.evals.baseline import (
    BaselineThresholds,
    CapabilityConfig,
)
from loadtest_eval_pipeline.evals.criteria import (
    CriterionResult,
    EvaluationReport,
)
from loadtest_eval_pipeline.evals.evaluator import (
    filter_to_allow_list,
    check_label,
    evaluate,
    merge_results,
    merge_reports,
)
from loadtest_eval_pipeline.evals.store import (
    EvaluationStore,
    FileEvaluationStore,
    InMemoryEvaluationStore,
    get_evaluation_store,
)

__all__ = [
    # Config
    "BaselineThresholds",
    "CapabilityConfig",
    # Results
    "CriterionResult",
    "EvaluationReport",
    # Evaluator
    "filter_to_allow_list",
    "check_label",
    "evaluate",
    "merge_results",
    "merge_reports",
    # Store
    "EvaluationStore",
    "FileEvaluationStore",
    "InMemoryEvaluationStore",
    "get_evaluation_store",
]
