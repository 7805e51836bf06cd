"""
CSV (delimited-text) decoder.

The header is read once into a ColumnIndex: a constant position per
Sample field, or None when the column is absent. Lines are split on
plain commas; JMeter's default CSV output does not quote fields, and
quoted commas are deliberately not supported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from loadtest_eval_pipeline.core.errors import FatalInputError, RecoverableRecordError
from loadtest_eval_pipeline.parsing.formats import CSV_COLUMNS
from loadtest_eval_pipeline.parsing.records import build_sample, note_skipped
from loadtest_eval_pipeline.parsing.sample import ParseStats, Sample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnIndex:
    """Resolved header positions for every Sample field."""

    positions: dict[str, int | None]
    width: int

    @classmethod
    def from_header(cls, header_line: str) -> "ColumnIndex":
        headers = [name.strip() for name in header_line.lstrip("\ufeff").split(",")]
        by_name: dict[str, int] = {}
        for index, name in enumerate(headers):
            by_name.setdefault(name, index)
        positions = {field: by_name.get(column) for field, column in CSV_COLUMNS.items()}
        return cls(positions=positions, width=len(headers))

    @property
    def missing(self) -> list[str]:
        """CSV column names the header does not provide."""
        return [CSV_COLUMNS[f] for f, pos in self.positions.items() if pos is None]

    def value(self, values: list[str], field: str) -> str | None:
        pos = self.positions[field]
        if pos is None or pos >= len(values):
            return ""
        return values[pos]


def decode_delimited(
    lines: Iterable[str],
    stats: ParseStats,
    strict_timestamps: bool = False,
) -> list[Sample]:
    """
    Decode CSV lines into samples.

    Raises:
        FatalInputError: when there is no header line
    """
    iterator = iter(lines)
    header_line = next(iterator, None)
    if header_line is None or not header_line.strip():
        raise FatalInputError("Empty results file: no CSV header line")

    columns = ColumnIndex.from_header(header_line.rstrip("\r\n"))
    logger.info(f"CSV results columns: {columns.width}, missing: {columns.missing or 'none'}")

    samples: list[Sample] = []
    for line_number, line in enumerate(iterator, start=2):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue

        stats.records_read += 1
        values = line.split(",")
        try:
            samples.append(
                build_sample(
                    lambda field: columns.value(values, field),
                    stats,
                    strict_timestamps,
                )
            )
        except RecoverableRecordError as e:
            note_skipped(stats, f"line {line_number}", e)

    logger.info(f"Parsed {len(samples)} samples from CSV results")
    return samples
