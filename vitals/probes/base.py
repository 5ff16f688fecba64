"""Probe contract shared by every health measurement."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

from vitals.models import Outcome, Status


class Probe(ABC):
    """Abstract base class for health probes.

    A probe performs one observation and reports it as one or more outcomes.
    run() must not raise: internal errors are reported as FAIL outcomes with
    a descriptive output. Blocking I/O must be awaitable so that cancellation
    from the aggregator reaches it.
    """

    def __init__(
        self,
        name: str,
        component_type: str = "",
        component_id: str = "",
    ) -> None:
        self._name = name
        self.component_type = component_type
        self.component_id = component_id

    @property
    def name(self) -> str:
        return self._name

    def get_name(self) -> str:
        """Return the key under which this probe's outcomes are filed."""
        return self._name

    @abstractmethod
    async def run(self) -> list[Outcome]:
        """Execute the probe and return a non-empty list of outcomes."""
        pass

    def _outcome(self, status: Status, output: str = "", **kwargs: Any) -> Outcome:
        """Create an outcome stamped with this probe's component identifiers."""
        kwargs.setdefault("component_type", self.component_type)
        kwargs.setdefault("component_id", self.component_id)
        return Outcome(status=status, output=output, **kwargs)

    def _fail(self, output: str, **kwargs: Any) -> list[Outcome]:
        return [self._outcome(Status.FAIL, output, **kwargs)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a time.perf_counter() reading."""
    return int((time.perf_counter() - start) * 1000)
