"""Health check aggregation engine.

This module provides:
- Aggregator: runs every registered probe concurrently and reduces their
  outcomes to one overall status
- reduce_status: the fail > warn > pass priority reduction
- from_config / from_yaml constructors for declarative probe sets
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vitals.config import AggregatorConfig, ProbeDefinition
from vitals.logging_config import execution_id_var, new_execution_id
from vitals.models import AggregateResult, Outcome, Status
from vitals.probes import Probe, build_probe

logger = logging.getLogger(__name__)


class AggregatorError(Exception):
    """Base exception for aggregator configuration errors."""

    pass


class DuplicateProbeError(AggregatorError):
    """Raised when a probe name is registered twice."""

    pass


class ConfigurationError(AggregatorError):
    """Raised when a probe configuration cannot be loaded."""

    pass


def reduce_status(outcomes: Iterable[Outcome]) -> Status:
    """Fold outcome statuses into one overall status.

    FAIL is absorbing, WARN holds unless a FAIL appears, PASS never changes
    the running value. An empty input reduces to PASS.
    """
    status = Status.PASS
    for outcome in outcomes:
        status = Status.worst(status, outcome.status)
        if status is Status.FAIL:
            break
    return status


class Aggregator:
    """Registry of probes that executes them as one health check.

    Example usage:
        ```python
        aggregator = Aggregator(AggregatorConfig(service_id="billing"))
        aggregator.register(HTTPProbe(name="api", url="http://localhost:8000/ping"))
        aggregator.register(DiskProbe(paths=["/", "/var"]))

        result = await aggregator.execute(timeout=2.0)
        print(result.status)  # pass, warn or fail
        ```

    The probe list is only meant to change at configuration time; execute()
    takes a snapshot of it and never mutates it.
    """

    def __init__(
        self,
        config: AggregatorConfig | None = None,
        probes: Iterable[Probe] = (),
    ) -> None:
        self._config = config or AggregatorConfig()
        self._probes: list[Probe] = []
        self._names: set[str] = set()
        for probe in probes:
            self.register(probe)

    @property
    def config(self) -> AggregatorConfig:
        return self._config

    @property
    def probes(self) -> list[Probe]:
        """Registered probes in registration order."""
        return self._probes.copy()

    def list_probes(self) -> list[str]:
        """List all registered probe names."""
        return [probe.get_name() for probe in self._probes]

    def get_probe(self, name: str) -> Probe | None:
        for probe in self._probes:
            if probe.get_name() == name:
                return probe
        return None

    def register(self, probe: Probe) -> Aggregator:
        """Append a probe to the registry.

        Raises:
            DuplicateProbeError: If a probe with the same name is registered.
        """
        name = probe.get_name()
        if name in self._names:
            raise DuplicateProbeError(f"Probe '{name}' is already registered")
        self._probes.append(probe)
        self._names.add(name)
        return self

    async def execute(self, timeout: float | None = None) -> AggregateResult:
        """Run every probe concurrently and aggregate their outcomes.

        Args:
            timeout: Budget in seconds for the whole run. Defaults to
                config.timeout_seconds. Each probe is additionally bounded by
                config.probe_timeout_seconds.

        Returns:
            A fresh AggregateResult. Probe failures, crashes and timeouts are
            reported as FAIL outcomes; this method does not raise for them.
        """
        probes = list(self._probes)
        if not probes:
            return AggregateResult(status=Status.PASS, checks={})

        budget = timeout if timeout is not None else self._config.timeout_seconds
        loop = asyncio.get_running_loop()
        deadline = None if budget is None else loop.time() + budget

        token = execution_id_var.set(new_execution_id())
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [
                    tg.create_task(self._run_probe(probe, deadline), name=probe.get_name())
                    for probe in probes
                ]
        finally:
            execution_id_var.reset(token)

        checks = {probe.get_name(): task.result() for probe, task in zip(probes, tasks)}
        status = reduce_status(
            outcome for outcomes in checks.values() for outcome in outcomes
        )

        logger.debug(
            f"Executed {len(probes)} probes, overall status {status.value}",
            extra={"extra_fields": {"status": status.value, "probes": len(probes)}},
        )
        return AggregateResult(status=status, checks=checks)

    def _probe_timeout(self, deadline: float | None) -> float | None:
        """Per-probe budget, clipped to what remains of the overall deadline."""
        limit = self._config.probe_timeout_seconds
        if deadline is None:
            return limit
        remaining = max(deadline - asyncio.get_running_loop().time(), 0.0)
        return remaining if limit is None else min(limit, remaining)

    async def _run_probe(self, probe: Probe, deadline: float | None) -> list[Outcome]:
        name = probe.get_name()
        probe_timeout = self._probe_timeout(deadline)
        try:
            async with asyncio.timeout(probe_timeout) as scope:
                outcomes = await probe.run()
        except TimeoutError as e:
            # A TimeoutError raised by the probe itself is a crash, not our limit
            if not scope.expired():
                return self._crashed(name, e)
            logger.warning(
                f"Probe '{name}' timed out",
                extra={"extra_fields": {"probe": name, "timeout": probe_timeout}},
            )
            return [Outcome.failed(f"{name} timed out after {probe_timeout:g}s")]
        except Exception as e:
            return self._crashed(name, e)

        if outcomes is None:
            outcomes = []
        if not isinstance(outcomes, (list, tuple)) or not all(
            isinstance(outcome, Outcome) for outcome in outcomes
        ):
            logger.warning(
                f"Probe '{name}' returned {type(outcomes).__name__} instead of a list of outcomes",
                extra={"extra_fields": {"probe": name}},
            )
            return [Outcome.failed("probe returned invalid outcomes")]
        if not outcomes:
            logger.warning(
                f"Probe '{name}' returned no outcomes",
                extra={"extra_fields": {"probe": name}},
            )
            return [Outcome.failed("probe returned no outcomes")]
        return list(outcomes)

    @staticmethod
    def _crashed(name: str, error: Exception) -> list[Outcome]:
        logger.error(
            f"Probe '{name}' raised an exception",
            exc_info=error,
            extra={"extra_fields": {"probe": name}},
        )
        return [Outcome.failed(f"probe raised {type(error).__name__}: {error}")]

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any] | list[dict[str, Any]],
        aggregator_config: AggregatorConfig | None = None,
    ) -> Aggregator:
        """Create an Aggregator from a configuration dict or list.

        Args:
            config: Either a dict with a "probes" list (and optionally an
                "aggregator" section of AggregatorConfig fields), or a list
                of probe definitions directly.
            aggregator_config: Explicit settings; overrides the "aggregator"
                section when given.

        Raises:
            ConfigurationError: If any definition is invalid.
            DuplicateProbeError: If two enabled definitions share a name.

        Example:
            ```python
            config = {
                "aggregator": {"service_id": "billing", "probe_timeout_seconds": 3},
                "probes": [
                    {"name": "api", "probe_type": "http", "url": "http://localhost:8000/ping"},
                    {"name": "disk", "probe_type": "disk", "paths": ["/", "/var"]},
                ],
            }
            aggregator = Aggregator.from_config(config)
            ```
        """
        if isinstance(config, dict):
            probes_list = config.get("probes", [])
            settings = config.get("aggregator") or {}
        else:
            probes_list = config
            settings = {}

        try:
            if aggregator_config is None:
                aggregator_config = AggregatorConfig(**settings)
            definitions = [ProbeDefinition(**raw) for raw in probes_list]
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        aggregator = cls(aggregator_config)
        for definition in definitions:
            if not definition.enabled:
                logger.info(f"Skipping disabled probe '{definition.name}'")
                continue
            aggregator.register(build_probe(definition))
        return aggregator

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        aggregator_config: AggregatorConfig | None = None,
    ) -> Aggregator:
        """Load an Aggregator from a YAML file with the from_config layout.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        config_path = Path(path)
        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file: {e}") from e

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, (dict, list)):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping or a list"
            )

        aggregator = cls.from_config(raw_config, aggregator_config)
        logger.info(f"Loaded {len(aggregator.probes)} probes from {config_path}")
        return aggregator
