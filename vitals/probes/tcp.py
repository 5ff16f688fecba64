"""TCP connectivity probe."""

from __future__ import annotations

import asyncio
import time

from vitals.models import Outcome, Status
from vitals.probes.base import Probe, elapsed_ms

DEFAULT_TIMEOUT_SECONDS = 5.0


class TCPProbe(Probe):
    """Opens (and immediately closes) a TCP connection to host:port."""

    def __init__(
        self,
        name: str = "tcp-check",
        host: str = "",
        port: int = 0,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        component_type: str = "tcp",
        component_id: str = "",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.host = host
        self.port = port
        self.timeout_seconds = timeout_seconds

    @property
    def address(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    async def run(self) -> list[Outcome]:
        if not self.host:
            return self._fail("host is required")
        if not 0 < self.port <= 65535:
            return self._fail(f"invalid port: {self.port} (must be 1-65535)")

        start = time.perf_counter()
        try:
            await asyncio.wait_for(self._connect(), timeout=self.timeout_seconds)
        except TimeoutError:
            return self._fail(
                f"timed out connecting to {self.address} after {self.timeout_seconds}s"
            )
        except OSError as e:
            return self._fail(f"failed to connect to {self.address}: {e}")
        except Exception as e:
            return self._fail(
                f"failed to connect to {self.address}: {type(e).__name__}: {e}"
            )

        return [
            self._outcome(
                Status.PASS, observed_value=elapsed_ms(start), observed_unit="ms"
            )
        ]

    async def _connect(self) -> None:
        _, writer = await asyncio.open_connection(self.host, self.port)
        writer.close()
        await writer.wait_closed()
