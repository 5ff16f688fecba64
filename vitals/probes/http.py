"""HTTP endpoint probe."""

from __future__ import annotations

import time

import aiohttp

from vitals.models import Outcome, Status
from vitals.probes.base import Probe, elapsed_ms

DEFAULT_TIMEOUT_SECONDS = 5.0


class HTTPProbe(Probe):
    """Requests a URL and checks the response status code.

    Without expected_status_codes any status in 200-399 passes. The observed
    value is the request latency in milliseconds.
    """

    def __init__(
        self,
        name: str = "http-check",
        url: str = "",
        method: str = "GET",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        expected_status_codes: list[int] | None = None,
        session: aiohttp.ClientSession | None = None,
        component_type: str = "http",
        component_id: str = "",
    ) -> None:
        super().__init__(name, component_type, component_id)
        self.url = url
        self.method = method
        self.timeout_seconds = timeout_seconds
        self.expected_status_codes = expected_status_codes or []
        self._session = session

    def is_expected_status(self, status_code: int) -> bool:
        if self.expected_status_codes:
            return status_code in self.expected_status_codes
        return 200 <= status_code < 400

    async def run(self) -> list[Outcome]:
        if not self.url:
            return self._fail("URL is required for HTTP health check")

        session = self._session
        should_close = False
        if session is None:
            session = aiohttp.ClientSession()
            should_close = True

        start = time.perf_counter()
        try:
            async with session.request(
                self.method,
                self.url,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                latency = elapsed_ms(start)
                if self.is_expected_status(response.status):
                    status, output = Status.PASS, ""
                else:
                    status = Status.FAIL
                    output = f"unexpected status code: {response.status}"
        except TimeoutError:
            return self._fail(f"request timed out after {self.timeout_seconds}s")
        except aiohttp.ClientError as e:
            return self._fail(f"failed to execute request: {e}")
        except Exception as e:
            return self._fail(f"failed to execute request: {type(e).__name__}: {e}")
        finally:
            if should_close:
                await session.close()

        return [
            self._outcome(status, output, observed_value=latency, observed_unit="ms")
        ]
