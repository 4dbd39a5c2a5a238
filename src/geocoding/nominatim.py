import requests
import time
import logging
from typing import Optional, Dict, Any
from threading import Lock

from src import config
from src.geocoding.exceptions import RemoteServiceError, TransportError
from src.models.geocode import Coordinate, RawPlace

# Constants
REVERSE_PATH = "/reverse"
RESPONSE_FORMAT = "geojson"

# Description tiers, most specific populated tier wins
MAJOR_PLACE_FIELDS = ("city", "town", "village")
MINOR_PLACE_FIELDS = ("neighbourhood", "hamlet")

# Get logger
logger = logging.getLogger(__name__)


def _first_present(address: Dict[str, Any], fields) -> Optional[str]:
    for field in fields:
        value = address.get(field)
        if value and str(value).strip():
            return str(value).strip()
    return None


def extract_description(address: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Derive the display description from a Nominatim address block.

    city/town/village first, then neighbourhood/hamlet, then "road house_number".
    Only one tier is used. Returns None when none of them is populated.
    """
    if not address:
        return None

    description = _first_present(address, MAJOR_PLACE_FIELDS)
    if description:
        return description

    description = _first_present(address, MINOR_PLACE_FIELDS)
    if description:
        return description

    road = _first_present(address, ("road",))
    if road:
        house_number = _first_present(address, ("house_number",))
        return f"{road} {house_number}" if house_number else road
    return None


class NominatimClient:
    """Reverse geocoding against a Nominatim /reverse endpoint."""

    def __init__(
        self,
        base_url=config.GEOCODER_URL,
        user_agent=config.GEOCODER_USER_AGENT,
        timeout=config.GEOCODER_TIMEOUT,
        min_interval=config.GEOCODER_MIN_INTERVAL,
    ):
        self.url = base_url.rstrip("/") + REVERSE_PATH
        self.headers = {"User-Agent": user_agent}
        self.timeout = timeout
        self.min_interval = min_interval
        self._last_request = None
        self._lock = Lock()

    def _wait_turn(self):
        # Public Nominatim allows one request per second per client
        with self._lock:
            if self._last_request is not None:
                elapsed = time.monotonic() - self._last_request
                if elapsed < self.min_interval:
                    time.sleep(self.min_interval - elapsed)
            self._last_request = time.monotonic()

    def reverse(self, coordinate: Coordinate, locale=None, zoom=None) -> Optional[RawPlace]:
        """
        Look up the place at a coordinate.

        Returns the first feature as a RawPlace, or None when the service has
        nothing there (open sea, unmapped area).

        Raises:
            RemoteServiceError: the service answered with a non-2xx status.
            TransportError: no usable answer was received.
        """
        params = {
            "lat": coordinate.lat,
            "lon": coordinate.lon,
            "format": RESPONSE_FORMAT,
            "addressdetails": 1,
        }
        if locale:
            params["accept-language"] = locale
        if zoom is not None:
            params["zoom"] = zoom

        self._wait_turn()
        try:
            response = requests.get(self.url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Network error for coordinates ({coordinate.lat}, {coordinate.lon}): {e}")
            raise TransportError(f"Reverse geocode request failed: {e}") from e

        if not response.ok:
            logger.warning(f"Geocoding HTTP error ({response.status_code}) for coordinates ({coordinate.lat}, {coordinate.lon})")
            raise RemoteServiceError(response.status_code, response.reason)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"Reverse geocode response is not JSON: {e}") from e

        features = data.get("features") if isinstance(data, dict) else None
        if not features:
            # {"error": "Unable to geocode"} also lands here
            logger.info(f"No place found for coordinates ({coordinate.lat}, {coordinate.lon})")
            return None

        feature = features[0]
        properties = feature.get("properties") or {}
        return RawPlace(
            address=properties.get("address") or {},
            bbox=feature.get("bbox"),
            display_name=properties.get("display_name"),
        )
