"""
vitals: concurrent health check aggregation.

This package runs a set of independent health probes concurrently and reduces
their outcomes to a single pass / warn / fail status. It includes:

- Models: Status, Outcome and AggregateResult
- Aggregator: concurrent execution and priority reduction
- Probes: HTTP, TCP, Redis, SQL, disk and memory checks
- Handler: FastAPI router serving application/health+json
"""

from vitals.aggregator import (
    Aggregator,
    AggregatorError,
    ConfigurationError,
    DuplicateProbeError,
    reduce_status,
)
from vitals.config import AggregatorConfig, ProbeDefinition, ProbeType
from vitals.models import AggregateResult, ObservedValue, Outcome, Status
from vitals.probes import Probe

__version__ = "0.1.0"
__all__ = [
    "AggregateResult",
    "Aggregator",
    "AggregatorConfig",
    "AggregatorError",
    "ConfigurationError",
    "DuplicateProbeError",
    "ObservedValue",
    "Outcome",
    "Probe",
    "ProbeDefinition",
    "ProbeType",
    "Status",
    "reduce_status",
]
