from unittest.mock import MagicMock

import pytest

from src.db.database import GeocodeCache
from src.geocoding.nominatim import NominatimClient
from src.models.geocode import RawPlace

# Champ de Mars, Paris: 48 51 29.7 N, 2 17 40.2 E
EIFFEL_REQUEST = {
    "latitude": {"values": [48, 51, 29.7], "reference": "N"},
    "longitude": {"values": [2, 17, 40.2], "reference": "E"},
}

PARIS_BBOX = [2.2241006, 48.8155755, 2.4697602, 48.9021560]

PARIS_FEATURE_COLLECTION = {
    "type": "FeatureCollection",
    "geocoding": {"version": "0.1.0", "attribution": "Data © OpenStreetMap contributors"},
    "features": [
        {
            "type": "Feature",
            "properties": {
                "display_name": "5, Avenue Anatole France, Gros-Caillou, Paris, France",
                "address": {
                    "house_number": "5",
                    "road": "Avenue Anatole France",
                    "neighbourhood": "Gros-Caillou",
                    "city": "Paris",
                    "country": "France",
                    "country_code": "fr",
                },
            },
            "bbox": PARIS_BBOX,
            "geometry": {"type": "Point", "coordinates": [2.2945, 48.85825]},
        }
    ],
}


def make_request(item_identifier=None, **overrides):
    request = dict(EIFFEL_REQUEST, **overrides)
    if item_identifier:
        request["itemIdentifier"] = item_identifier
    return request


def make_response(payload=None, status_code=200, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    return response


@pytest.fixture
def cache(tmp_path):
    return GeocodeCache(str(tmp_path))


@pytest.fixture
def paris_place():
    feature = PARIS_FEATURE_COLLECTION["features"][0]
    return RawPlace(
        address=feature["properties"]["address"],
        bbox=feature["bbox"],
        display_name=feature["properties"]["display_name"],
    )


@pytest.fixture
def client():
    fake = MagicMock(spec=NominatimClient)
    fake.reverse.return_value = None
    return fake
