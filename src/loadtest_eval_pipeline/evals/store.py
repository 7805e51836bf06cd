"""
Evaluation storage - Protocol and implementations for a run's stored results.

Following the same pattern as the rest of the codebase:
1. Protocol defines the interface
2. FileEvaluationStore for production (persistent JSON)
3. InMemoryEvaluationStore for testing (fast, no I/O)
4. Factory function for convenience

One store holds one run's evaluation. Writers must be serialized per
run; nothing here locks.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from loadtest_eval_pipeline.evals.criteria import EvaluationReport

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# EVALUATION STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EvaluationStore(Protocol):
    """Protocol for stored-evaluation implementations."""

    def load(self) -> EvaluationReport | None:
        """Load the stored report, returns None if not found."""
        ...

    def save(self, report: EvaluationReport) -> None:
        """Replace the stored report."""
        ...


# ---------------------------------------------------------------------------
# FILE-BASED IMPLEMENTATION (Production)
# ---------------------------------------------------------------------------


class FileEvaluationStore:
    """Store a run's evaluation report as a JSON file."""

    def __init__(self, file_path: Path | str):
        self._path = Path(file_path)

    @property
    def path(self) -> Path:
        """Get the store file path."""
        return self._path

    def load(self) -> EvaluationReport | None:
        """Load report from the JSON file.

        An unreadable or corrupt file is treated as no prior results.
        """
        if not self._path.exists():
            return None

        try:
            with open(self._path) as f:
                data = json.load(f)
            return EvaluationReport.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not load stored evaluation from {self._path}: {e}")
            return None

    def save(self, report: EvaluationReport) -> None:
        """Save report to the JSON file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(report.to_dict(), f, indent=2)


# ---------------------------------------------------------------------------
# IN-MEMORY IMPLEMENTATION (Testing)
# ---------------------------------------------------------------------------


class InMemoryEvaluationStore:
    """Test store - no file I/O."""

    def __init__(self, initial_report: EvaluationReport | None = None):
        self._report = initial_report
        self._save_called = False

    @property
    def save_called(self) -> bool:
        """Check if save was called (for test assertions)."""
        return self._save_called

    @property
    def current_report(self) -> EvaluationReport | None:
        return self._report

    def load(self) -> EvaluationReport | None:
        return self._report

    def save(self, report: EvaluationReport) -> None:
        self._report = report
        self._save_called = True


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_evaluation_store(
    file_path: Path | str | None = None,
    initial_report: EvaluationReport | None = None,
) -> EvaluationStore:
    """
    Factory function for evaluation stores.

    Args:
        file_path: JSON file to persist to. If None, an in-memory store is used.
        initial_report: Initial report for the in-memory store.

    Example:
        # Production
        store = get_evaluation_store("runs/42/evaluation.json")

        # Testing
        store = get_evaluation_store(initial_report=EvaluationReport(...))
    """
    if file_path is not None:
        return FileEvaluationStore(file_path)
    return InMemoryEvaluationStore(initial_report)
