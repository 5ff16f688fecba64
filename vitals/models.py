"""Data model for health probe outcomes and aggregate results.

The shapes follow the health check response format for HTTP APIs
(https://tools.ietf.org/id/draft-inadarei-api-health-check-05.html):

- Status: pass / warn / fail, totally ordered fail > warn > pass
- Outcome: one timestamped measurement produced by a probe
- AggregateResult: overall status plus outcomes keyed by probe name
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Closed set of primitive types a probe may report as its observation.
ObservedValue = bool | int | float | str


class Status(str, Enum):
    """Health status of an outcome or of the whole service."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"

    @property
    def priority(self) -> int:
        """Rank used for reduction: higher wins."""
        return _PRIORITY[self]

    @classmethod
    def parse(cls, value: Status | str) -> Status:
        """Convert a raw value into a Status.

        Raises:
            ValueError: If the value is not one of pass, warn, fail.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid status {value!r}, expected one of: "
                f"{', '.join(s.value for s in cls)}"
            ) from None

    @classmethod
    def worst(cls, *statuses: Status) -> Status:
        """Return the highest-priority status, PASS when none given."""
        return max(statuses, key=lambda s: s.priority, default=cls.PASS)


_PRIORITY = {Status.PASS: 0, Status.WARN: 1, Status.FAIL: 2}


class Outcome(BaseModel):
    """A single measurement result produced by a probe.

    Outcomes are frozen; the aggregator only relocates them into the
    aggregate mapping.

    Attributes:
        status: Result of the measurement
        output: Diagnostic text, expected to be empty for PASS
        observed_at: When the probe took the measurement
        observed_value: Optional probe-defined observation
        observed_unit: Unit of observed_value (e.g. "ms", "%")
        component_id: Sub-resource this outcome describes (e.g. "disk:/var")
        component_type: Kind of component (e.g. "system", "datastore")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: Status
    output: str = ""
    observed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="time"
    )
    observed_value: ObservedValue | None = Field(default=None, alias="observedValue")
    observed_unit: str = Field(default="", alias="observedUnit")
    component_id: str = Field(default="", alias="componentId")
    component_type: str = Field(default="", alias="componentType")

    @classmethod
    def passed(cls, **kwargs: Any) -> Outcome:
        return cls(status=Status.PASS, **kwargs)

    @classmethod
    def warned(cls, output: str, **kwargs: Any) -> Outcome:
        return cls(status=Status.WARN, output=output, **kwargs)

    @classmethod
    def failed(cls, output: str, **kwargs: Any) -> Outcome:
        return cls(status=Status.FAIL, output=output, **kwargs)

    def to_wire(self) -> dict[str, Any]:
        """Render as a JSON-ready dict, dropping empty optional fields."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {k: v for k, v in data.items() if v != ""}


class AggregateResult(BaseModel):
    """Result of one aggregation run over every registered probe."""

    status: Status
    checks: dict[str, list[Outcome]] = Field(default_factory=dict)

    @property
    def is_healthy(self) -> bool:
        """True unless the overall status is FAIL."""
        return self.status != Status.FAIL

    def outcomes(self) -> Iterator[tuple[str, Outcome]]:
        """Iterate (probe name, outcome) pairs in recorded order."""
        for name, outcomes in self.checks.items():
            for outcome in outcomes:
                yield name, outcome
