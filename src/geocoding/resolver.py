import asyncio
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from src import config
from src.db.database import GeocodeCache
from src.geocoding.coordinates import normalize_coordinate
from src.geocoding.exceptions import ValidationError
from src.geocoding.nominatim import NominatimClient, extract_description
from src.models.geocode import Coordinate, GeocodeRequest

# Get logger
logger = logging.getLogger(__name__)


def parse_request(params: Union[GeocodeRequest, Dict[str, Any]]) -> GeocodeRequest:
    if isinstance(params, GeocodeRequest):
        return params
    try:
        return GeocodeRequest.model_validate(params)
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed geocode request: {e}") from e


def to_coordinate(request: GeocodeRequest) -> Coordinate:
    try:
        return normalize_coordinate(request.latitude, request.longitude)
    except PydanticValidationError as e:
        raise ValidationError(f"Coordinate out of range: {e}") from e


class GeocodeResolver:
    """
    Turns a photo position into a place description, asking Nominatim only on
    a genuine cache miss.

    Order of attempts: exact item key, containing region, remote service.
    Remote errors propagate untouched; there is no retry. Blocking store and
    HTTP calls run in worker threads.
    """

    def __init__(self, cache: GeocodeCache, client: Optional[NominatimClient] = None,
                 locale=config.GEOCODE_LOCALE, zoom=config.GEOCODER_ZOOM):
        self.cache = cache
        self.client = client or NominatimClient()
        self.locale = locale
        self.zoom = zoom

    async def reverse_geocode(self, params, locale=None) -> Optional[str]:
        request = parse_request(params)
        coordinate = to_coordinate(request)
        item_key = request.item_identifier

        if item_key:
            description = await asyncio.to_thread(self.cache.lookup_by_key, item_key)
            if description:
                return description

        description = await asyncio.to_thread(
            self.cache.lookup_by_region, coordinate.lat, coordinate.lon, item_key
        )
        if description:
            return description

        logger.info(f"Cache miss for ({coordinate.lat}, {coordinate.lon}), querying geocoder")
        place = await asyncio.to_thread(
            self.client.reverse, coordinate, locale or self.locale, self.zoom
        )
        if place is None:
            return None

        description = extract_description(place.address)
        if not description:
            logger.warning(f"No usable description for ({coordinate.lat}, {coordinate.lon}): {place.display_name}")
            return None

        await asyncio.to_thread(self._remember, place.bbox, description, item_key)
        logger.info(f"Geocoded ({coordinate.lat}, {coordinate.lon}) as {description}")
        return description

    def _remember(self, bbox, description, item_key):
        self.cache.record_region(bbox, description)
        if item_key:
            self.cache.record_key(item_key, description)


# Shared so request spacing holds across calls
default_client = NominatimClient()


async def reverse_geocode(params, locale=None, base_path=None) -> Optional[str]:
    """
    Resolve one geocode request payload against the cache under base_path.

    params has the shape {"latitude": {"values": [d, m, s], "reference": "N"},
    "longitude": {...}, "itemIdentifier": "..."}.
    """
    cache = GeocodeCache(base_path or config.GEOCODE_BASE_PATH)
    resolver = GeocodeResolver(cache, default_client)
    return await resolver.reverse_geocode(params, locale)
