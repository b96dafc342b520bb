"""
Geocode-then-compute pipeline.

A run resolves the origin, then the destination, then estimates latency
between the two coordinates. The first failure ends the run and is raised as
``PipelineError``; a run never yields partial results.

    idle -> resolving_origin -> resolving_destination -> computed
                  |                      |
                  +-------> failed <-----+
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from . import geocoding
from .geocoding import AddressNotFoundError, GeocodingError
from .latency import Coordinate, LatencyEstimate, estimate


logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Both origin and destination must be provided."

Resolver = Callable[..., Awaitable[Coordinate]]


class PipelineStage(str, enum.Enum):
    IDLE = "idle"
    RESOLVING_ORIGIN = "resolving_origin"
    RESOLVING_DESTINATION = "resolving_destination"
    COMPUTED = "computed"
    FAILED = "failed"


class ErrorKind(str, enum.Enum):
    MISSING_INPUT = "missing_input"
    ORIGIN_NOT_FOUND = "origin_not_found"
    DESTINATION_NOT_FOUND = "destination_not_found"
    LOOKUP_FAILURE = "lookup_failure"


class PipelineError(RuntimeError):
    def __init__(self, kind: ErrorKind, message: str, *, stage: PipelineStage) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stage = stage


@dataclass(frozen=True)
class PipelineResult:
    origin: Coordinate
    destination: Coordinate
    estimate: LatencyEstimate


def _is_missing(value: str | None) -> bool:
    return value is None or value == ""


class PipelineRun:
    """One invocation of the pipeline. Not reusable."""

    def __init__(self, resolver: Resolver | None = None) -> None:
        self._resolver = resolver
        self.stage = PipelineStage.IDLE

    def _advance(self, stage: PipelineStage) -> None:
        logger.debug("Pipeline stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    async def _lookup(
        self,
        query: str,
        *,
        label: str,
        not_found: ErrorKind,
        client: httpx.AsyncClient | None,
    ) -> Coordinate:
        resolver = self._resolver or geocoding.resolve
        try:
            if client is None:
                return await resolver(query)
            return await resolver(query, client=client)
        except GeocodingError as e:
            failed_in = self.stage
            self._advance(PipelineStage.FAILED)
            kind = not_found if isinstance(e, AddressNotFoundError) else ErrorKind.LOOKUP_FAILURE
            raise PipelineError(
                kind, f"Error fetching {label} coordinates: {e}", stage=failed_in
            ) from e

    async def execute(self, origin: str | None, destination: str | None) -> PipelineResult:
        if self.stage is not PipelineStage.IDLE:
            raise RuntimeError("PipelineRun instances cannot be reused")

        if _is_missing(origin) or _is_missing(destination):
            self._advance(PipelineStage.FAILED)
            raise PipelineError(
                ErrorKind.MISSING_INPUT, MISSING_INPUT_MESSAGE, stage=PipelineStage.IDLE
            )
        assert origin is not None and destination is not None

        if self._resolver is not None:
            return await self._resolve_and_compute(origin, destination, client=None)
        # Both lookups of a run share one connection pool; runs share nothing.
        async with geocoding.open_client() as client:
            return await self._resolve_and_compute(origin, destination, client=client)

    async def _resolve_and_compute(
        self, origin: str, destination: str, *, client: httpx.AsyncClient | None
    ) -> PipelineResult:
        self._advance(PipelineStage.RESOLVING_ORIGIN)
        origin_coord = await self._lookup(
            origin, label="origin", not_found=ErrorKind.ORIGIN_NOT_FOUND, client=client
        )

        self._advance(PipelineStage.RESOLVING_DESTINATION)
        destination_coord = await self._lookup(
            destination,
            label="destination",
            not_found=ErrorKind.DESTINATION_NOT_FOUND,
            client=client,
        )

        result = PipelineResult(
            origin=origin_coord,
            destination=destination_coord,
            estimate=estimate(origin_coord, destination_coord),
        )
        self._advance(PipelineStage.COMPUTED)
        return result


async def run(
    origin: str | None,
    destination: str | None,
    *,
    resolver: Resolver | None = None,
) -> PipelineResult:
    """
    Resolve both places and estimate the latency between them.

    ``resolver`` replaces ``geocoding.resolve`` (it is awaited as
    ``resolver(query)``). Without it, both lookups go through one shared
    ``httpx.AsyncClient`` that is closed when the run ends.
    """
    return await PipelineRun(resolver).execute(origin, destination)
