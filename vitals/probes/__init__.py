"""Built-in health probes.

- StaticProbe: fixed statuses (testing)
- HTTPProbe, TCPProbe: network reachability
- RedisProbe, SQLPingProbe, ConnectionPoolProbe: datastore connectivity
- DiskProbe, MemoryProbe: resource utilisation
- SysInfoProbe: host uptime, hostname and load averages
"""

from __future__ import annotations

from typing import Any

from vitals.config import ProbeDefinition, ProbeType
from vitals.probes.base import Probe
from vitals.probes.disk import DiskInfo, DiskProbe
from vitals.probes.http import HTTPProbe
from vitals.probes.memory import MemoryInfo, MemoryProbe
from vitals.probes.redis import RedisProbe
from vitals.probes.sql import ConnectionPoolProbe, PoolStats, SQLPingProbe
from vitals.probes.static import StaticProbe
from vitals.probes.sysinfo import SysInfo, SysInfoProbe
from vitals.probes.tcp import TCPProbe


def build_probe(definition: ProbeDefinition) -> Probe:
    """Create a probe from its declarative definition."""
    common: dict[str, Any] = {"name": definition.name}
    if definition.component_id is not None:
        common["component_id"] = definition.component_id
    if definition.component_type is not None:
        common["component_type"] = definition.component_type

    thresholds: dict[str, float] = {}
    if definition.warn_threshold is not None:
        thresholds["warn"] = definition.warn_threshold
    if definition.fail_threshold is not None:
        thresholds["fail"] = definition.fail_threshold

    if definition.probe_type == ProbeType.STATIC:
        return StaticProbe(statuses=definition.statuses, **common)
    if definition.probe_type == ProbeType.HTTP:
        return HTTPProbe(
            url=definition.url or "",
            timeout_seconds=definition.timeout_seconds,
            expected_status_codes=definition.expected_status_codes,
            **common,
        )
    if definition.probe_type == ProbeType.TCP:
        return TCPProbe(
            host=definition.host or "",
            port=definition.port or 0,
            timeout_seconds=definition.timeout_seconds,
            **common,
        )
    if definition.probe_type == ProbeType.DISK:
        return DiskProbe(
            paths=definition.paths,
            **{f"{k}_threshold": v for k, v in thresholds.items()},
            **common,
        )
    if definition.probe_type == ProbeType.MEMORY:
        return MemoryProbe(
            check_swap=definition.check_swap,
            **{f"ram_{k}_threshold": v for k, v in thresholds.items()},
            **common,
        )
    if definition.probe_type == ProbeType.SYSINFO:
        if "warn" in thresholds:
            common["load_warn_threshold"] = thresholds["warn"]
        return SysInfoProbe(**common)
    raise ValueError(f"Unknown probe type: {definition.probe_type}")


__all__ = [
    "ConnectionPoolProbe",
    "DiskInfo",
    "DiskProbe",
    "HTTPProbe",
    "MemoryInfo",
    "MemoryProbe",
    "PoolStats",
    "Probe",
    "RedisProbe",
    "SQLPingProbe",
    "StaticProbe",
    "SysInfo",
    "SysInfoProbe",
    "TCPProbe",
    "build_probe",
]
