"""
Sample record - the uniform shape both log formats decode into.

Samples are transient: one list is built per pipeline invocation and is
dropped as soon as aggregation returns. Slots keep the per-record
footprint small for runs with millions of requests.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from loadtest_eval_pipeline.parsing.formats import LogFormat


@dataclass(frozen=True, slots=True)
class Sample:
    """One executed request from a load-test run."""

    label: str
    timestamp_ms: int
    duration_ms: int
    success: bool
    latency_ms: int | None = None
    connect_ms: int | None = None
    status_code: int | None = None
    error_message: str | None = None
    thread_name: str | None = None
    bytes_sent: int | None = None
    bytes_received: int | None = None

    @property
    def timestamp(self) -> datetime:
        """Sample start time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class ParseCounts:
    """Read-only copy of the parse counters, as reported in a summary."""

    records_read: int = 0
    records_skipped: int = 0
    degraded_fields: int = 0
    timestamp_fallbacks: int = 0

    @property
    def records_accepted(self) -> int:
        return self.records_read - self.records_skipped

    def to_dict(self) -> dict:
        return {
            "records_read": self.records_read,
            "records_accepted": self.records_accepted,
            "records_skipped": self.records_skipped,
            "degraded_fields": self.degraded_fields,
            "timestamp_fallbacks": self.timestamp_fallbacks,
        }


@dataclass
class ParseStats:
    """Counters for one parse, updated by the decoders as they go."""

    records_read: int = 0
    records_skipped: int = 0
    degraded_fields: int = 0
    timestamp_fallbacks: int = 0

    @property
    def records_accepted(self) -> int:
        return self.records_read - self.records_skipped

    def snapshot(self) -> ParseCounts:
        return ParseCounts(
            records_read=self.records_read,
            records_skipped=self.records_skipped,
            degraded_fields=self.degraded_fields,
            timestamp_fallbacks=self.timestamp_fallbacks,
        )

    def to_dict(self) -> dict:
        return self.snapshot().to_dict()


@dataclass
class ParseResult:
    """Decoded samples plus the format they came from."""

    log_format: LogFormat
    samples: list[Sample] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)
