"""
Record Parser entry point - sniff the format, dispatch to one decoder.

The result is all-or-nothing: either a complete ParseResult or a
FatalInputError, never a truncated sample list reported as success.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from loadtest_eval_pipeline.core.errors import FatalInputError
from loadtest_eval_pipeline.parsing.delimited import decode_delimited
from loadtest_eval_pipeline.parsing.formats import LogFormat, sniff_format
from loadtest_eval_pipeline.parsing.sample import ParseResult, ParseStats
from loadtest_eval_pipeline.parsing.tagged import decode_tagged

logger = logging.getLogger(__name__)


def read_log_file(path: Path | str) -> bytes:
    """Read a results file from disk.

    Raises:
        FatalInputError: file is missing or unreadable
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise FatalInputError(f"Cannot read results file {path}: {e}") from e


def _first_line(content: bytes) -> str:
    end = content.find(b"\n")
    head = content if end < 0 else content[:end]
    return head.decode("utf-8-sig", errors="replace")


def parse_samples(
    content: bytes | str | None,
    *,
    strict_timestamps: bool = False,
) -> ParseResult:
    """
    Decode raw results content into Sample records.

    Args:
        content: Full results log (bytes, or already-decoded text)
        strict_timestamps: Skip records whose timestamp cannot be parsed
            instead of stamping them with the current time

    Returns:
        ParseResult with the detected format, samples and counters

    Raises:
        FatalInputError: absent input, CSV without a header line, or
            XML that is not well-formed
    """
    if content is None:
        raise FatalInputError("No results content supplied")
    if isinstance(content, str):
        content = content.encode("utf-8")

    log_format = sniff_format(_first_line(content))
    stats = ParseStats()
    logger.info(f"Parsing {len(content)} bytes of {log_format.value.upper()} results")

    if log_format is LogFormat.TAGGED:
        samples = decode_tagged(content, stats, strict_timestamps)
    else:
        text = io.TextIOWrapper(io.BytesIO(content), encoding="utf-8-sig", errors="replace", newline="")
        samples = decode_delimited(text, stats, strict_timestamps)

    if stats.records_skipped:
        logger.warning(f"Skipped {stats.records_skipped} of {stats.records_read} malformed records")
    if stats.timestamp_fallbacks:
        logger.warning(
            f"{stats.timestamp_fallbacks} records had unparsable timestamps and were "
            "stamped with the current time; duration and throughput may be skewed"
        )

    return ParseResult(log_format=log_format, samples=samples, stats=stats)
