"""Disk usage probe."""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from vitals.models import Outcome, Status
from vitals.probes.base import Probe

DEFAULT_WARN_THRESHOLD = 80.0
DEFAULT_FAIL_THRESHOLD = 90.0


@dataclass(frozen=True)
class DiskInfo:
    path: str
    total: int
    used: int
    free: int

    @property
    def used_pct(self) -> float:
        return self.used / self.total * 100 if self.total else 0.0

    @property
    def avail_pct(self) -> float:
        return self.free / self.total * 100 if self.total else 0.0


def stat_disk(path: str) -> DiskInfo:
    """Read filesystem usage for path (blocking)."""
    usage = shutil.disk_usage(path)
    return DiskInfo(path=path, total=usage.total, used=usage.used, free=usage.free)


class DiskProbe(Probe):
    """Checks used space on each configured path.

    Emits one outcome per path, in configuration order, with the used
    percentage as observed value.
    """

    def __init__(
        self,
        name: str = "disk-check",
        paths: list[str] | None = None,
        warn_threshold: float = DEFAULT_WARN_THRESHOLD,
        fail_threshold: float = DEFAULT_FAIL_THRESHOLD,
        stater: Callable[[str], DiskInfo] = stat_disk,
        component_type: str = "system",
        component_id: str = "disk",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.paths = paths or ["/"]
        self.warn_threshold = warn_threshold
        self.fail_threshold = fail_threshold
        self._stater = stater

    async def run(self) -> list[Outcome]:
        return [await self._check_path(path) for path in self.paths]

    async def _check_path(self, path: str) -> Outcome:
        component_id = f"{self.component_id}:{path}"
        try:
            info = await asyncio.to_thread(self._stater, path)
        except (OSError, ValueError) as e:
            return self._outcome(
                Status.FAIL,
                f"failed to get disk stats for {path}: {e}",
                component_id=component_id,
            )

        used = round(info.used_pct, 2)
        if info.used_pct >= self.fail_threshold:
            status = Status.FAIL
            output = (
                f"disk usage critical on {path}: {info.used_pct:.1f}% used "
                f"(threshold: {self.fail_threshold:.1f}%)"
            )
        elif info.used_pct >= self.warn_threshold:
            status = Status.WARN
            output = (
                f"disk usage high on {path}: {info.used_pct:.1f}% used "
                f"(threshold: {self.warn_threshold:.1f}%)"
            )
        else:
            status, output = Status.PASS, ""

        return self._outcome(
            status,
            output,
            component_id=component_id,
            observed_value=used,
            observed_unit="%",
        )
