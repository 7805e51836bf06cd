"""
CLI module - unified command-line interface.

Provides entry points for:
- Summarizing a results log
- Gating a results log against its capability baseline
"""

from loadtest_eval_pipeline.cli.commands import (
    main,
    run_summarize_cli,
    run_gate_cli,
)

__all__ = [
    "main",
    "run_summarize_cli",
    "run_gate_cli",
]
