import pytest
from fastapi.testclient import TestClient

from src.api.app import app, get_cache, get_resolver
from src.geocoding.exceptions import RemoteServiceError, TransportError
from src.geocoding.resolver import GeocodeResolver
from tests.conftest import make_request


@pytest.fixture
def api(cache, client):
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_resolver] = lambda: GeocodeResolver(cache, client, locale=None, zoom=None)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_read_root(api):
    response = api.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Photo Geocache API"}


def test_reverse_geocode_returns_description(api, client, paris_place):
    client.reverse.return_value = paris_place

    response = api.post("/reverse-geocode", params={"locale": "it-IT"}, json=make_request(item_identifier="photo-1"))

    assert response.status_code == 200
    assert response.json() == {"description": "Paris"}
    assert client.reverse.call_args.args[1] == "it-IT"


def test_reverse_geocode_absent_description(api, client):
    client.reverse.return_value = None

    response = api.post("/reverse-geocode", json=make_request())

    assert response.status_code == 200
    assert response.json() == {"description": None}


def test_cache_stats(api, client, paris_place):
    client.reverse.return_value = paris_place
    api.post("/reverse-geocode", json=make_request(item_identifier="photo-1"))

    response = api.get("/cache/stats")
    assert response.json() == {"regions": 1, "item_keys": 1}


@pytest.mark.parametrize("error, status_code", [
    (RemoteServiceError(503, "Service Unavailable"), 502),
    (TransportError("timed out"), 504),
])
def test_remote_errors_are_mapped(api, client, error, status_code):
    client.reverse.side_effect = error

    response = api.post("/reverse-geocode", json=make_request())
    assert response.status_code == status_code


def test_corrupt_store_is_503(api, cache):
    cache.initialize()
    with open(cache.db_path, "wb") as f:
        f.write(b"truncated" * 100)

    response = api.post("/reverse-geocode", json=make_request(item_identifier="photo-1"))
    assert response.status_code == 503
    assert api.get("/cache/stats").status_code == 503


def test_malformed_payload_is_422(api):
    response = api.post("/reverse-geocode", json={"latitude": {"values": [48, 51]}})
    assert response.status_code == 422


def test_out_of_range_coordinate_is_422(api):
    response = api.post("/reverse-geocode", json=make_request(latitude={"values": [95, 0, 0], "reference": "N"}))
    assert response.status_code == 422
