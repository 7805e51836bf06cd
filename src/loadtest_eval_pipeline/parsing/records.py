"""
Record decoding - turn one raw record into a Sample.

Both decoders resolve raw string values through a `lookup(field)`
callable (attribute access for XML, constant column index for CSV) and
hand it to build_sample, so the field rules live in one place.
"""

from __future__ import annotations

import logging
from typing import Callable

from loadtest_eval_pipeline.core.errors import DegradedFieldError, RecoverableRecordError
from loadtest_eval_pipeline.parsing.fields import (
    now_millis,
    optional_int,
    optional_text,
    parse_success,
    parse_timestamp,
    require_int,
    require_label,
)
from loadtest_eval_pipeline.parsing.sample import ParseStats, Sample

logger = logging.getLogger(__name__)

Lookup = Callable[[str], "str | None"]

# Individual skip warnings beyond this are only counted
MAX_RECORD_WARNINGS = 20

OPTIONAL_NUMERIC_FIELDS = (
    "latency",
    "connect",
    "status_code",
    "bytes_sent",
    "bytes_received",
)


def build_sample(
    lookup: Lookup,
    stats: ParseStats,
    strict_timestamps: bool = False,
) -> Sample:
    """
    Decode one record.

    Args:
        lookup: Returns the raw value for a Sample field name, or None
        stats: Counters updated for degraded fields and timestamp fallbacks
        strict_timestamps: Skip records with unparsable timestamps instead
            of stamping them with the current time

    Raises:
        RecoverableRecordError: label missing, duration not an integer,
            or (strict mode) timestamp not an integer
    """
    label = require_label(lookup("label"))
    duration = require_int("duration", lookup("duration"))

    timestamp = parse_timestamp(lookup("timestamp"))
    if timestamp is None:
        if strict_timestamps:
            raise RecoverableRecordError(f"Invalid timestamp: {lookup('timestamp')!r}")
        stats.timestamp_fallbacks += 1
        timestamp = now_millis()

    numeric: dict[str, int | None] = {}
    for name in OPTIONAL_NUMERIC_FIELDS:
        try:
            numeric[name] = optional_int(name, lookup(name))
        except DegradedFieldError:
            stats.degraded_fields += 1
            numeric[name] = None

    return Sample(
        label=label,
        timestamp_ms=timestamp,
        duration_ms=duration,
        success=parse_success(lookup("success")),
        latency_ms=numeric["latency"],
        connect_ms=numeric["connect"],
        status_code=numeric["status_code"],
        error_message=optional_text(lookup("error_message")),
        thread_name=optional_text(lookup("thread_name")),
        bytes_sent=numeric["bytes_sent"],
        bytes_received=numeric["bytes_received"],
    )


def note_skipped(stats: ParseStats, where: str, error: Exception) -> None:
    """Count a skipped record and warn about the first few."""
    stats.records_skipped += 1
    if stats.records_skipped <= MAX_RECORD_WARNINGS:
        logger.warning(f"Skipping malformed record at {where}: {error}")
    elif stats.records_skipped == MAX_RECORD_WARNINGS + 1:
        logger.warning("Further malformed-record warnings suppressed")
