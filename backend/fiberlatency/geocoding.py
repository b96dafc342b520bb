from __future__ import annotations

import logging
import os

import httpx

from .latency import Coordinate


logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_BASE_URL = os.getenv(
    "NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org"
).rstrip("/")
DEFAULT_USER_AGENT = os.getenv(
    "GEOCODING_USER_AGENT", "FiberLatency/0.1 (local dev)"
)
# Unset means no timeout; callers that need one can pass their own client.
_timeout_env = os.getenv("GEOCODING_TIMEOUT_S", "").strip()
DEFAULT_TIMEOUT_S = float(_timeout_env) if _timeout_env else None


class GeocodingError(RuntimeError):
    pass


class AddressNotFoundError(GeocodingError):
    pass


class GeocodingLookupError(GeocodingError):
    pass


def open_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=DEFAULT_NOMINATIM_BASE_URL,
        timeout=DEFAULT_TIMEOUT_S,
        headers={"User-Agent": DEFAULT_USER_AGENT},
    )


def _as_float(v: object) -> float | None:
    if isinstance(v, bool):
        return None
    try:
        f = float(str(v))
    except (TypeError, ValueError):
        return None
    if not (f == f and abs(f) != float("inf")):
        return None
    return f


def _first_coordinate(data: object) -> Coordinate:
    if not isinstance(data, list):
        raise GeocodingLookupError("Unexpected geocoding response: expected a list")
    if not data:
        raise AddressNotFoundError("Address not found")

    first = data[0]
    if not isinstance(first, dict):
        raise GeocodingLookupError("Unexpected geocoding response: malformed candidate")
    lat = _as_float(first.get("lat"))
    lon = _as_float(first.get("lon"))
    if lat is None or lon is None:
        raise GeocodingLookupError("Unexpected geocoding response: missing lat/lon")
    return Coordinate(lat=lat, lon=lon)


async def _search(client: httpx.AsyncClient, query: str) -> object:
    params = {"q": query, "format": "json"}
    try:
        res = await client.get("/search", params=params)
        res.raise_for_status()
        return res.json()
    except httpx.HTTPError as e:
        raise GeocodingLookupError(str(e) or type(e).__name__) from e
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        raise GeocodingLookupError(f"Invalid geocoding response: {e}") from e


async def resolve(query: str, *, client: httpx.AsyncClient | None = None) -> Coordinate:
    """
    Resolve a free-text place name to the coordinate of the first candidate.

    Raises ``AddressNotFoundError`` when the service returns no candidates and
    ``GeocodingLookupError`` on transport, HTTP status or parsing failures.
    The lookup is never retried.
    """
    logger.debug("Geocoding %r", query)
    if client is None:
        async with open_client() as own_client:
            data = await _search(own_client, query)
    else:
        data = await _search(client, query)

    if isinstance(data, list):
        logger.debug("Geocoder returned %d candidate(s) for %r", len(data), query)
    return _first_coordinate(data)
