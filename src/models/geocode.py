from typing import Annotated, Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


class DMSValue(BaseModel):
    """One axis of a photo position as stored in EXIF GPS tags: [deg, min, sec] + N/S/E/W."""
    values: Annotated[List[float], Field(min_length=3, max_length=3)]
    reference: Optional[str] = None


class GeocodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: DMSValue
    longitude: DMSValue
    item_identifier: Optional[str] = Field(default=None, alias="itemIdentifier")


class GeocodeResponse(BaseModel):
    description: Optional[str] = None


class Coordinate(BaseModel):
    """Signed decimal degrees, already rounded to cache precision."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def from_lon_lat(cls, values: Sequence) -> Optional["BoundingBox"]:
        """
        Build a box from a GeoJSON style [lon_min, lat_min, lon_max, lat_max] list.

        Each axis is re-ordered into min/max, so a box with swapped corners is
        still accepted. Returns None when fewer than 4 numeric values are given.
        """
        if values is None or len(values) < 4:
            return None
        try:
            lon_a, lat_a, lon_b, lat_b = (float(v) for v in list(values)[:4])
        except (TypeError, ValueError):
            return None
        return cls(
            lat_min=min(lat_a, lat_b),
            lat_max=max(lat_a, lat_b),
            lon_min=min(lon_a, lon_b),
            lon_max=max(lon_a, lon_b),
        )

    def contains(self, lat: float, lon: float) -> bool:
        return self.lat_min <= lat <= self.lat_max and self.lon_min <= lon <= self.lon_max


class RawPlace(BaseModel):
    """First feature of a Nominatim reverse geocode answer."""
    address: Dict[str, Any] = Field(default_factory=dict)
    bbox: Optional[List[Any]] = None
    display_name: Optional[str] = None
