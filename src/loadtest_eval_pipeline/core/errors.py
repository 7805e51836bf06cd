"""
Error taxonomy for the ingestion -> aggregation -> evaluation pipeline.

Only FatalInputError ever reaches a caller. The record- and field-level
errors are raised by decoders and absorbed by the parse loop, which
counts them in ParseStats. ConfigurationGap is not an exception at all:
it is recorded on an empty EvaluationReport.
"""

from __future__ import annotations

from enum import Enum


class PipelineError(Exception):
    """Base class for every error raised inside the pipeline."""


class FatalInputError(PipelineError):
    """Input is absent, unreadable, or structurally unusable.

    Aborts the whole invocation. No partial ParseResult is ever returned
    alongside this error.
    """


class RecoverableRecordError(PipelineError):
    """One record/line is malformed and must be skipped.

    Raised by the per-record decoders and caught by the parse loop.
    """

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.position = position


class DegradedFieldError(PipelineError, ValueError):
    """An optional numeric field could not be parsed.

    The owning record is still accepted; the field resolves to None.
    """

    def __init__(self, field: str, raw: str):
        super().__init__(f"Unparsable value for {field}: {raw!r}")
        self.field = field
        self.raw = raw


class ConfigurationGap(Enum):
    """Why an EvaluationReport came back empty."""

    NO_THRESHOLDS = "no_thresholds"
    NO_ALLOW_LIST = "no_allow_list"
    NO_MATCHING_LABELS = "no_matching_labels"
