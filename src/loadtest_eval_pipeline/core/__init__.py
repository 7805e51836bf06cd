"""
Core module - shared error types for the entire pipeline.

USAGE:
------
from loadtest_eval_pipeline.core import FatalInputError

try:
    summary = summarize_run(content)
except FatalInputError:
    ...  # ask for a re-upload
"""

from loadtest_eval_pipeline.core.errors import (
    PipelineError,
    FatalInputError,
    RecoverableRecordError,
    DegradedFieldError,
    ConfigurationGap,
)

__all__ = [
    "PipelineError",
    "FatalInputError",
    "RecoverableRecordError",
    "DegradedFieldError",
    "ConfigurationGap",
]
