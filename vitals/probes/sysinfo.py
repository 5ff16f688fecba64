"""Host information probe: uptime, hostname and CPU load averages."""

from __future__ import annotations

import asyncio
import os
import socket
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from vitals.models import Outcome, Status
from vitals.probes.base import Probe

UPTIME_PATH = Path("/proc/uptime")
DEFAULT_LOAD_WARN_THRESHOLD = 85.0

LOAD_WINDOWS = ("1m", "5m", "15m")


@dataclass(frozen=True)
class SysInfo:
    hostname: str
    uptime_seconds: float
    load_averages: tuple[float, float, float]


def parse_uptime(text: str) -> float:
    """Parse the first field of /proc/uptime (seconds since boot).

    Raises:
        ValueError: If the contents are not a number.
    """
    fields = text.split()
    if not fields:
        raise ValueError("empty uptime file")
    return float(fields[0])


def read_sysinfo() -> SysInfo:
    """Collect host information (blocking)."""
    return SysInfo(
        hostname=socket.gethostname(),
        uptime_seconds=parse_uptime(UPTIME_PATH.read_text(encoding="utf-8")),
        load_averages=os.getloadavg(),
    )


class SysInfoProbe(Probe):
    """Reports host uptime, hostname and 1/5/15 minute load averages.

    Uptime and hostname always pass; each load average warns once it goes
    above load_warn_threshold.
    """

    def __init__(
        self,
        name: str = "sysinfo-check",
        load_warn_threshold: float = DEFAULT_LOAD_WARN_THRESHOLD,
        reader: Callable[[], SysInfo] = read_sysinfo,
        component_type: str = "system",
        component_id: str = "",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.load_warn_threshold = load_warn_threshold
        self._reader = reader

    def _metric_id(self, metric: str) -> str:
        return f"{self.component_id}:{metric}" if self.component_id else metric

    async def run(self) -> list[Outcome]:
        try:
            info = await asyncio.to_thread(self._reader)
        except (OSError, ValueError) as e:
            return self._fail(f"failed to get system info: {e}")

        outcomes = [
            self._outcome(
                Status.PASS,
                component_id=self._metric_id("uptime"),
                observed_value=round(info.uptime_seconds, 2),
                observed_unit="s",
            ),
            self._outcome(
                Status.PASS,
                component_id=self._metric_id("hostname"),
                observed_value=info.hostname,
            ),
        ]
        for window, load in zip(LOAD_WINDOWS, info.load_averages):
            if load > self.load_warn_threshold:
                status = Status.WARN
                output = (
                    f"{window} load average high: {load:.2f} "
                    f"(threshold: {self.load_warn_threshold:.2f})"
                )
            else:
                status, output = Status.PASS, ""
            outcomes.append(
                self._outcome(
                    status,
                    output,
                    component_id=self._metric_id(f"load:{window}"),
                    observed_value=round(load, 2),
                )
            )
        return outcomes
