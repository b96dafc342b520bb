"""
Theoretical fiber-optic latency between two coordinates.

The figures are a physical lower bound, not a measurement: the signal is
assumed to travel the great-circle distance at the speed of light in glass
fiber (roughly two thirds of c). Real paths are longer and add switching
and queueing delay.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .distance import haversine_km, km_to_miles


FIBER_SPEED_KM_S = 200_000.0
DISPLAY_DECIMALS = 2


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(frozen=True)
class DistanceResult:
    km: float
    miles: float


@dataclass(frozen=True)
class LatencyResult:
    one_way_ms: float
    round_trip_ms: float


@dataclass(frozen=True)
class LatencyEstimate:
    distance: DistanceResult
    latency: LatencyResult

    def as_dict(self) -> dict[str, float]:
        return {
            "distance_km": self.distance.km,
            "distance_miles": self.distance.miles,
            "one_way_ms": self.latency.one_way_ms,
            "round_trip_ms": self.latency.round_trip_ms,
        }

    def formatted(self) -> dict[str, str]:
        """Same keys as :meth:`as_dict`, rendered with exactly two decimals."""
        return {k: f"{v:.{DISPLAY_DECIMALS}f}" for k, v in self.as_dict().items()}


_DISPLAY_QUANTUM = Decimal(1).scaleb(-DISPLAY_DECIMALS)


def round_display(value: float) -> float:
    """Round half away from zero on the exact binary value of ``value``."""
    return float(Decimal(value).quantize(_DISPLAY_QUANTUM, rounding=ROUND_HALF_UP))


def one_way_latency_ms(distance_km: float) -> float:
    return (distance_km / FIBER_SPEED_KM_S) * 1000


def estimate(origin: Coordinate, destination: Coordinate) -> LatencyEstimate:
    distance_km = haversine_km(origin.lat, origin.lon, destination.lat, destination.lon)
    distance_miles = km_to_miles(distance_km)

    one_way_ms = one_way_latency_ms(distance_km)
    round_trip_ms = one_way_ms * 2

    # Round only at the boundary; everything above keeps full precision.
    return LatencyEstimate(
        distance=DistanceResult(
            km=round_display(distance_km),
            miles=round_display(distance_miles),
        ),
        latency=LatencyResult(
            one_way_ms=round_display(one_way_ms),
            round_trip_ms=round_display(round_trip_ms),
        ),
    )
