"""Probe returning fixed statuses, for tests and wiring checks."""

from __future__ import annotations

from collections.abc import Sequence

from vitals.models import Outcome, Status
from vitals.probes.base import Probe


class StaticProbe(Probe):
    """Reports a configured status (or sequence of statuses) on every run.

    FAIL and WARN outcomes carry a generic output unless one is given.
    """

    def __init__(
        self,
        name: str = "static-check",
        statuses: Status | str | Sequence[Status | str] = Status.PASS,
        output: str | None = None,
        component_type: str = "",
        component_id: str = "",
    ) -> None:
        super().__init__(name, component_type, component_id)
        if isinstance(statuses, (Status, str)):
            statuses = [statuses]
        self.statuses = [Status.parse(s) for s in statuses]
        if not self.statuses:
            raise ValueError("StaticProbe requires at least one status")
        self.output = output

    async def run(self) -> list[Outcome]:
        return [self._outcome(status, self._output_for(status)) for status in self.statuses]

    def _output_for(self, status: Status) -> str:
        if self.output is not None:
            return self.output
        if status == Status.FAIL:
            return "check failed"
        if status == Status.WARN:
            return "check degraded"
        return ""
