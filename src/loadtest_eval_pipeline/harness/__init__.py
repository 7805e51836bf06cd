"""
Harness module - run the pipeline and assemble its output.

- assembler.py: RunSummary, the one snapshot downstream consumers read
- pipeline.py: summarize_run / summarize_capability_run / reevaluate_run
"""

from loadtest_eval_pipeline.harness.assembler import (
    RunSummary,
    assemble_summary,
)
from loadtest_eval_pipeline.harness.pipeline import (
    summarize_run,
    summarize_capability_run,
    reevaluate_run,
)

__all__ = [
    "RunSummary",
    "assemble_summary",
    "summarize_run",
    "summarize_capability_run",
    "reevaluate_run",
]
