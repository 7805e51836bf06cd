"""
Baseline thresholds and the capability record that carries them.

A capability owns two pieces of evaluation config:
1. Its test cases - the allow-list of labels that take part in evaluation
2. Its acceptance criteria - a free-form dict whose "baseline" entry
   holds the SLA thresholds

Capability records are edited by hand and through a UI, so threshold
values are coerced leniently: anything that is not a finite number
disables that threshold instead of failing validation.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# THRESHOLDS
# ---------------------------------------------------------------------------


class BaselineThresholds(BaseModel):
    """
    SLA bounds a label's metrics must satisfy.

    Each threshold is independent; a value <= 0 disables it.
    Accepts both snake_case and the camelCase keys stored on capability
    records (p95MaxMs, avgMaxMs, p90MaxMs, throughputMin).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    p95_max_ms: float = Field(default=0.0, alias="p95MaxMs", description="Max allowed p95 duration (ms)")
    avg_max_ms: float = Field(default=0.0, alias="avgMaxMs", description="Max allowed mean duration (ms)")
    p90_max_ms: float = Field(default=0.0, alias="p90MaxMs", description="Max allowed p90 duration (ms)")
    throughput_min: float = Field(default=0.0, alias="throughputMin", description="Min required req/s")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0

    @property
    def is_configured(self) -> bool:
        """True when at least one threshold is enabled."""
        return any(v > 0 for v in (self.p95_max_ms, self.avg_max_ms, self.p90_max_ms, self.throughput_min))

    def to_dict(self) -> dict[str, float]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_acceptance_criteria(cls, criteria: Mapping[str, Any] | None) -> "BaselineThresholds | None":
        """Extract thresholds from a capability's acceptance criteria.

        Returns None when there is no "baseline" mapping.
        """
        if not criteria:
            return None
        baseline = criteria.get("baseline")
        if not isinstance(baseline, Mapping):
            return None
        return cls.model_validate(dict(baseline))


# ---------------------------------------------------------------------------
# CAPABILITY
# ---------------------------------------------------------------------------


class CapabilityConfig(BaseModel):
    """The owning capability record, as far as evaluation needs it."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    test_cases: list[str] = Field(
        default_factory=list,
        alias="testCases",
        description="Expected test-case names; the evaluation allow-list",
    )
    acceptance_criteria: dict[str, Any] = Field(
        default_factory=dict,
        alias="acceptanceCriteria",
    )

    @field_validator("test_cases", mode="before")
    @classmethod
    def _test_case_names(cls, value: Any) -> list[str]:
        # Entries may be plain names or test-case records
        if value is None:
            return []
        names = []
        for entry in value:
            if isinstance(entry, Mapping):
                entry = entry.get("testCaseName") or entry.get("name")
            if entry is not None:
                names.append(str(entry))
        return names

    @property
    def expected_labels(self) -> list[str]:
        return list(self.test_cases)

    @property
    def thresholds(self) -> BaselineThresholds | None:
        return BaselineThresholds.from_acceptance_criteria(self.acceptance_criteria)

    @classmethod
    def from_file(cls, path: Path | str) -> "CapabilityConfig":
        """Load a capability record from a JSON file."""
        return cls.model_validate_json(Path(path).read_text())
