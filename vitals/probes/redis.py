"""Redis ping probe."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Protocol

from vitals.models import Outcome, Status
from vitals.probes.base import Probe, elapsed_ms

DEFAULT_TIMEOUT_SECONDS = 5.0


class RedisClient(Protocol):
    """Subset of redis.asyncio.Redis used by the probe."""

    async def ping(self, **kwargs: Any) -> Any: ...


class RedisProbe(Probe):
    """Pings a Redis server through an injected async client."""

    def __init__(
        self,
        name: str = "redis-check",
        client: RedisClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        component_type: str = "datastore",
        component_id: str = "redis",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def run(self) -> list[Outcome]:
        if self.client is None:
            return self._fail("Redis client is required")

        start = time.perf_counter()
        try:
            await asyncio.wait_for(self.client.ping(), timeout=self.timeout_seconds)
        except TimeoutError:
            return self._fail(f"Redis ping timed out after {self.timeout_seconds}s")
        except Exception as e:
            return self._fail(f"Redis ping failed: {e}")

        return [
            self._outcome(
                Status.PASS, observed_value=elapsed_ms(start), observed_unit="ms"
            )
        ]
