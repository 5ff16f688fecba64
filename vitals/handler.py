"""HTTP exposure of aggregate health results.

Responses use the "application/health+json" media type described in
https://tools.ietf.org/id/draft-inadarei-api-health-check-05.html#section-3
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from vitals.aggregator import Aggregator
from vitals.models import AggregateResult, Outcome, Status

HEALTH_MEDIA_TYPE = "application/health+json"


class HealthResponse(BaseModel):
    """Wire body of the health endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: Status
    service_id: str | None = Field(default=None, alias="serviceId")
    description: str | None = None
    version: str | None = None
    release_id: str | None = Field(default=None, alias="releaseId")
    output: str | None = None
    checks: dict[str, list[Outcome]] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, aggregator: Aggregator, result: AggregateResult) -> HealthResponse:
        config = aggregator.config
        return cls(
            status=result.status,
            service_id=config.service_id or None,
            description=config.description or None,
            version=config.version or None,
            release_id=config.release_id or None,
            output=build_output(result.checks) or None,
            checks=result.checks,
        )

    def to_wire(self) -> dict[str, Any]:
        body = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"checks"}
        )
        body["checks"] = {
            name: [outcome.to_wire() for outcome in outcomes]
            for name, outcomes in self.checks.items()
        }
        return body


def build_output(checks: dict[str, list[Outcome]]) -> str:
    """Flatten non-empty outcome outputs into "name: output; ..." text."""
    return "; ".join(
        f"{name}: {outcome.output}"
        for name, outcomes in checks.items()
        for outcome in outcomes
        if outcome.output
    )


def http_status_for(health_status: Status) -> int:
    """FAIL maps to 503; PASS and WARN are served as 200."""
    if health_status == Status.FAIL:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_200_OK


def create_health_router(aggregator: Aggregator, path: str = "/health") -> APIRouter:
    """Create a router exposing the aggregator at the given path."""
    router = APIRouter(tags=["health"])

    @router.get(path, response_class=JSONResponse)
    async def health() -> JSONResponse:
        result = await aggregator.execute()
        response = HealthResponse.from_result(aggregator, result)
        return JSONResponse(
            content=response.to_wire(),
            status_code=http_status_for(result.status),
            media_type=HEALTH_MEDIA_TYPE,
        )

    return router
