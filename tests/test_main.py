import hashlib

import pytest

import main
from src.geocoding import resolver as resolver_module
from src.geocoding.exceptions import TransportError
from src.geocoding.item_key import generate_item_key
from src.models.geocode import Coordinate

EIFFEL_ARGS = ["48", "51", "29.7", "N", "2", "17", "40.2", "E"]


@pytest.fixture(autouse=True)
def fake_client(client, monkeypatch):
    monkeypatch.setattr(resolver_module, "default_client", client)
    return client


def test_generate_item_key_hashes_file_content(tmp_path):
    photo = tmp_path / "IMG_0001.jpg"
    photo.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")
    copy = tmp_path / "copy.jpg"
    copy.write_bytes(photo.read_bytes())

    assert generate_item_key(photo) == hashlib.sha256(b"\xff\xd8\xff\xe0 fake jpeg").hexdigest()
    assert generate_item_key(copy) == generate_item_key(photo)


def test_main_prints_description(tmp_path, fake_client, paris_place, capsys):
    fake_client.reverse.return_value = paris_place

    assert main.main(EIFFEL_ARGS + ["--base-path", str(tmp_path), "--locale", "it-IT"]) == 0
    assert capsys.readouterr().out.strip() == "Paris"
    fake_client.reverse.assert_called_once()
    assert fake_client.reverse.call_args.args[:2] == (Coordinate(lat=48.85825, lon=2.2945), "it-IT")


def test_main_uses_photo_hash_as_item_key(tmp_path, fake_client, paris_place):
    photo = tmp_path / "IMG_0001.jpg"
    photo.write_bytes(b"photo bytes")
    fake_client.reverse.return_value = paris_place

    main.main(EIFFEL_ARGS + ["--base-path", str(tmp_path), "--photo", str(photo)])

    cache = resolver_module.GeocodeCache(str(tmp_path))
    assert cache.lookup_by_key(generate_item_key(photo)) == "Paris"


def test_main_reports_no_location(tmp_path, fake_client, capsys):
    fake_client.reverse.return_value = None

    assert main.main(EIFFEL_ARGS + ["--base-path", str(tmp_path)]) == 0
    assert "No location found" in capsys.readouterr().out


def test_main_returns_error_code_on_failure(tmp_path, fake_client):
    fake_client.reverse.side_effect = TransportError("network down")

    assert main.main(EIFFEL_ARGS + ["--base-path", str(tmp_path)]) == 1
