"""Configuration models for the aggregator and config-constructible probes."""

from __future__ import annotations

import os
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vitals.models import Status


class AggregatorConfig(BaseModel):
    """Immutable aggregator settings, built once and never mutated.

    Attributes:
        service_id: Identifier of the service being reported on
        description: Human-readable service description
        version: Public version of the service
        release_id: Release or build identifier
        timeout_seconds: Budget for a whole execute() call (None = unbounded)
        probe_timeout_seconds: Budget enforced on every probe (None = unbounded)
    """

    model_config = ConfigDict(frozen=True)

    service_id: str = ""
    description: str = ""
    version: str = ""
    release_id: str = ""
    timeout_seconds: float | None = Field(default=None, gt=0)
    probe_timeout_seconds: float | None = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls, **overrides: Any) -> AggregatorConfig:
        """Build a config from VITALS_* environment variables.

        Explicit keyword overrides take precedence over the environment.

        Environment variables:
            VITALS_SERVICE_ID, VITALS_DESCRIPTION, VITALS_VERSION,
            VITALS_RELEASE_ID, VITALS_TIMEOUT_SECONDS,
            VITALS_PROBE_TIMEOUT_SECONDS
        """
        values: dict[str, Any] = {}
        for field in cls.model_fields:
            raw = os.getenv(f"VITALS_{field.upper()}")
            if raw:
                values[field] = raw
        values.update(overrides)
        return cls(**values)


class ProbeType(str, Enum):
    """Probe kinds that can be built from declarative configuration."""

    STATIC = "static"
    HTTP = "http"
    TCP = "tcp"
    DISK = "disk"
    MEMORY = "memory"
    SYSINFO = "sysinfo"


class ProbeDefinition(BaseModel):
    """Declarative definition of a probe.

    Only the fields relevant to probe_type are used; unset thresholds fall
    back to the probe's own defaults.
    """

    name: str = Field(..., min_length=1)
    probe_type: ProbeType
    enabled: bool = True
    timeout_seconds: float = Field(default=5.0, gt=0)
    component_id: str | None = None
    component_type: str | None = None

    # static
    statuses: list[Status] = Field(default_factory=lambda: [Status.PASS])

    # http
    url: str | None = None
    expected_status_codes: list[int] = Field(default_factory=list)

    # tcp
    host: str | None = None
    port: int | None = None

    # disk / memory / sysinfo (warn_threshold is the load average limit)
    paths: list[str] = Field(default_factory=lambda: ["/"])
    warn_threshold: float | None = None
    fail_threshold: float | None = None
    check_swap: bool = False
