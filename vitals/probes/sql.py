"""SQL database probes: connectivity ping and connection pool statistics."""

from __future__ import annotations

import asyncio
import time
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from vitals.models import Outcome, Status
from vitals.probes.base import Probe, elapsed_ms

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_WARN_THRESHOLD = 0.8  # 80% of max connections
DEFAULT_FAIL_THRESHOLD = 1.0  # 100% of max connections


class PingableDatabase(Protocol):
    async def ping(self) -> Any: ...


@dataclass(frozen=True)
class PoolStats:
    """Connection pool statistics reported by a database driver."""

    open_connections: int = 0
    in_use: int = 0
    idle: int = 0
    max_open_connections: int = 0
    wait_count: int = 0
    wait_duration_ms: int = 0


class PoolStatsProvider(Protocol):
    def stats(self) -> PoolStats: ...


# metric name -> (PoolStats field, unit)
POOL_METRICS: dict[str, tuple[str, str]] = {
    "open-connections": ("open_connections", ""),
    "in-use-connections": ("in_use", ""),
    "idle-connections": ("idle", ""),
    "max-open-connections": ("max_open_connections", ""),
    "wait-count": ("wait_count", ""),
    "wait-duration": ("wait_duration_ms", "ms"),
}


class SQLPingProbe(Probe):
    """Verifies database connectivity with a ping round-trip."""

    def __init__(
        self,
        name: str = "sql-check",
        db: PingableDatabase | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        component_type: str = "database",
        component_id: str = "sql-check",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.db = db
        self.timeout_seconds = timeout_seconds

    async def run(self) -> list[Outcome]:
        if self.db is None:
            return self._fail("database connection is required")

        start = time.perf_counter()
        try:
            await asyncio.wait_for(self.db.ping(), timeout=self.timeout_seconds)
        except TimeoutError:
            return self._fail(f"database ping timed out after {self.timeout_seconds}s")
        except Exception as e:
            return self._fail(f"database ping failed: {e}")

        return [
            self._outcome(
                Status.PASS, observed_value=elapsed_ms(start), observed_unit="ms"
            )
        ]


class ConnectionPoolProbe(Probe):
    """Reports connection pool saturation and the selected pool metrics.

    The first outcome compares open connections against the pool maximum
    (warn/fail thresholds are fractions of max_open_connections). One PASS
    outcome per requested metric follows, in the order given.
    """

    def __init__(
        self,
        name: str = "db-connections-check",
        db: PoolStatsProvider | None = None,
        metrics: list[str] | None = None,
        warn_threshold: float = DEFAULT_WARN_THRESHOLD,
        fail_threshold: float = DEFAULT_FAIL_THRESHOLD,
        component_type: str = "database",
        component_id: str = "database",
    ) -> None:
        super().__init__(name, component_type, component_id)
        metrics = list(POOL_METRICS) if metrics is None else metrics
        unknown = [m for m in metrics if m not in POOL_METRICS]
        if unknown:
            raise ValueError(f"Unknown pool metric(s): {', '.join(unknown)}")
        self.db = db
        self.metrics = metrics
        self.warn_threshold = warn_threshold
        self.fail_threshold = fail_threshold

    async def run(self) -> list[Outcome]:
        if self.db is None:
            return self._fail("database connection is required")

        try:
            stats = self.db.stats()
        except Exception as e:
            return self._fail(f"failed to read pool statistics: {e}")

        outcomes = [self._check_saturation(stats)]
        values = asdict(stats)
        for metric in self.metrics:
            field, unit = POOL_METRICS[metric]
            outcomes.append(
                self._outcome(
                    Status.PASS,
                    component_id=f"{self.component_id}:{metric}",
                    observed_value=values[field],
                    observed_unit=unit,
                )
            )
        return outcomes

    def _check_saturation(self, stats: PoolStats) -> Outcome:
        component_id = f"{self.component_id}:connections"
        open_conns = stats.open_connections
        max_conns = stats.max_open_connections

        # Unlimited pool
        if max_conns <= 0:
            return self._outcome(
                Status.PASS, component_id=component_id, observed_value=open_conns
            )

        fail_at = int(max_conns * self.fail_threshold)
        warn_at = int(max_conns * self.warn_threshold)

        if open_conns >= fail_at:
            return self._outcome(
                Status.FAIL,
                f"open connections ({open_conns}) exceed failure threshold ({fail_at})",
                component_id=component_id,
                observed_value=open_conns,
            )
        if open_conns >= warn_at:
            return self._outcome(
                Status.WARN,
                f"open connections ({open_conns}) approaching maximum ({max_conns})",
                component_id=component_id,
                observed_value=open_conns,
            )
        return self._outcome(
            Status.PASS, component_id=component_id, observed_value=open_conns
        )
