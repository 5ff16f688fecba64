"""System memory probe (Linux /proc/meminfo)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from vitals.models import Outcome, Status
from vitals.probes.base import Probe

MEMINFO_PATH = Path("/proc/meminfo")


@dataclass(frozen=True)
class MemoryInfo:
    """Memory usage in bytes."""

    total_ram: int = 0
    available_ram: int = 0
    total_swap: int = 0
    free_swap: int = 0

    @property
    def used_ram_pct(self) -> float:
        if not self.total_ram:
            return 0.0
        return (self.total_ram - self.available_ram) / self.total_ram * 100

    @property
    def used_swap_pct(self) -> float:
        if not self.total_swap:
            return 0.0
        return (self.total_swap - self.free_swap) / self.total_swap * 100


def parse_meminfo(text: str) -> MemoryInfo:
    """Parse the contents of /proc/meminfo.

    Raises:
        ValueError: If MemTotal is missing.
    """
    fields: dict[str, int] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            # Values are reported in kB
            fields[parts[0].rstrip(":")] = int(parts[1]) * 1024
        except ValueError:
            continue

    if not fields.get("MemTotal"):
        raise ValueError("could not read MemTotal from meminfo")

    return MemoryInfo(
        total_ram=fields["MemTotal"],
        available_ram=fields.get("MemAvailable", 0),
        total_swap=fields.get("SwapTotal", 0),
        free_swap=fields.get("SwapFree", 0),
    )


def read_meminfo() -> MemoryInfo:
    """Read memory usage from /proc/meminfo (blocking)."""
    return parse_meminfo(MEMINFO_PATH.read_text(encoding="utf-8"))


class MemoryProbe(Probe):
    """Checks RAM usage and, optionally, swap usage.

    Emits a RAM outcome, followed by a swap outcome when check_swap is set
    and the system has swap configured.
    """

    def __init__(
        self,
        name: str = "memory-check",
        ram_warn_threshold: float = 80.0,
        ram_fail_threshold: float = 90.0,
        swap_warn_threshold: float = 50.0,
        swap_fail_threshold: float = 80.0,
        check_swap: bool = False,
        reader: Callable[[], MemoryInfo] = read_meminfo,
        component_type: str = "system",
        component_id: str = "memory",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.ram_warn_threshold = ram_warn_threshold
        self.ram_fail_threshold = ram_fail_threshold
        self.swap_warn_threshold = swap_warn_threshold
        self.swap_fail_threshold = swap_fail_threshold
        self.check_swap = check_swap
        self._reader = reader

    async def run(self) -> list[Outcome]:
        try:
            info = await asyncio.to_thread(self._reader)
        except (OSError, ValueError) as e:
            return self._fail(f"failed to get memory info: {e}")

        outcomes = [
            self._evaluate(
                "RAM", "ram", info.used_ram_pct,
                self.ram_warn_threshold, self.ram_fail_threshold,
            )
        ]
        if self.check_swap and info.total_swap > 0:
            outcomes.append(
                self._evaluate(
                    "swap", "swap", info.used_swap_pct,
                    self.swap_warn_threshold, self.swap_fail_threshold,
                )
            )
        return outcomes

    def _evaluate(
        self, label: str, suffix: str, used_pct: float, warn: float, fail: float
    ) -> Outcome:
        if used_pct >= fail:
            status = Status.FAIL
            output = f"{label} usage critical: {used_pct:.1f}% used (threshold: {fail:.1f}%)"
        elif used_pct >= warn:
            status = Status.WARN
            output = f"{label} usage high: {used_pct:.1f}% used (threshold: {warn:.1f}%)"
        else:
            status, output = Status.PASS, ""

        return self._outcome(
            status,
            output,
            component_id=f"{self.component_id}:{suffix}",
            observed_value=round(used_pct, 2),
            observed_unit="%",
        )
