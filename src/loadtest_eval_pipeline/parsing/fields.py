"""
Field coercion shared by the XML and CSV decoders.

Required fields raise RecoverableRecordError (the record is dropped).
Optional numeric fields raise DegradedFieldError, which the decoder
turns into None while keeping the record.
"""

from __future__ import annotations

import time

from loadtest_eval_pipeline.core.errors import DegradedFieldError, RecoverableRecordError


def require_label(raw: str | None) -> str:
    """Trimmed label; empty or absent labels discard the record."""
    label = (raw or "").strip()
    if not label:
        raise RecoverableRecordError("Missing label")
    return label


def require_int(name: str, raw: str | None) -> int:
    """Parse a required integer field."""
    try:
        return int((raw or "").strip())
    except ValueError:
        raise RecoverableRecordError(f"Invalid {name}: {raw!r}") from None


def optional_int(name: str, raw: str | None) -> int | None:
    """Parse an optional integer field.

    Blank values are simply absent. Anything else that fails to parse
    raises DegradedFieldError.
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise DegradedFieldError(name, raw) from None


def optional_text(raw: str | None) -> str | None:
    if raw is None or raw == "":
        return None
    return raw


def parse_success(raw: str | None) -> bool:
    return (raw or "").strip().lower() == "true"


def parse_timestamp(raw: str | None) -> int | None:
    """Epoch millis, or None when the value is not an integer."""
    try:
        return int((raw or "").strip())
    except ValueError:
        return None


def now_millis() -> int:
    return time.time_ns() // 1_000_000
