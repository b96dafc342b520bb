import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest


BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))


def nominatim_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url="https://nominatim.test",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def fake_nominatim(monkeypatch):
    """
    Route every geocoding client through a canned place table.

    Returns the list of queries received, in order.
    """
    from fiberlatency import geocoding

    places = {
        "London": [{"lat": "51.5074", "lon": "-0.1278", "display_name": "London"}],
        "Paris": [{"lat": "48.8566", "lon": "2.3522", "display_name": "Paris"}],
    }
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/search"
        q = request.url.params["q"]
        seen.append(q)
        if q == "Broken":
            return httpx.Response(503, text="overloaded")
        return httpx.Response(200, json=places.get(q, []))

    monkeypatch.setattr(geocoding, "open_client", lambda: nominatim_client(handler))
    return seen
