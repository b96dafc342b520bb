from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from . import configure_logging
from .geocoding import AddressNotFoundError, GeocodingLookupError, resolve
from .pipeline import ErrorKind, PipelineError, run
from .schemas import CoordinateOut, LatencyIn, LatencyOut


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Fiber Latency API", version="0.1.0", lifespan=lifespan)

_default_allowed_origins = [
    "http://127.0.0.1:5173",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://localhost:3000",
]
_cors_from_env = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if o.strip()]
_allowed_origins = _cors_from_env or _default_allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_BY_KIND = {
    ErrorKind.MISSING_INPUT: 400,
    ErrorKind.ORIGIN_NOT_FOUND: 404,
    ErrorKind.DESTINATION_NOT_FOUND: 404,
    ErrorKind.LOOKUP_FAILURE: 502,
}


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/latency", response_model=LatencyOut)
async def api_latency(payload: LatencyIn) -> LatencyOut:
    try:
        result = await run(payload.origin, payload.destination)
    except PipelineError as e:
        logger.info("Latency request failed (%s): %s", e.kind.value, e.message)
        raise HTTPException(status_code=_STATUS_BY_KIND[e.kind], detail=e.message) from e

    return LatencyOut(
        origin=CoordinateOut(lat=result.origin.lat, lon=result.origin.lon),
        destination=CoordinateOut(lat=result.destination.lat, lon=result.destination.lon),
        **result.estimate.as_dict(),
    )


@app.get("/api/geocode", response_model=CoordinateOut)
async def api_geocode(query: str = Query(min_length=1, max_length=512)) -> CoordinateOut:
    try:
        coord = await resolve(query)
    except AddressNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except GeocodingLookupError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return CoordinateOut(lat=coord.lat, lon=coord.lon)
