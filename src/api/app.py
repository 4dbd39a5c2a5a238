from fastapi import FastAPI, HTTPException, Depends
import logging
from typing import Optional

from src import config
from src.db.database import GeocodeCache
from src.geocoding.exceptions import (
    RemoteServiceError, StoreUnavailableError, TransportError, ValidationError
)
from src.geocoding.resolver import GeocodeResolver, default_client
from src.models.geocode import GeocodeRequest, GeocodeResponse

# Configure logging - Adjust format to remove INFO/WARNING prefixes
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Photo Geocache API",
    description="Reverse geocoding of photo positions with a persistent region cache",
    version="1.0.0"
)


def get_cache():
    return GeocodeCache(config.GEOCODE_BASE_PATH)


def get_resolver(cache: GeocodeCache = Depends(get_cache)):
    return GeocodeResolver(cache, default_client)


@app.get("/")
def read_root():
    return {"message": "Welcome to the Photo Geocache API"}


@app.post("/reverse-geocode", response_model=GeocodeResponse)
async def reverse_geocode(
    request: GeocodeRequest,
    locale: Optional[str] = None,
    resolver: GeocodeResolver = Depends(get_resolver)
):
    """
    Resolve a photo position to a place description.

    A null description means there is nothing to show for this photo.
    """
    try:
        description = await resolver.reverse_geocode(request, locale)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"Geocode cache unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except RemoteServiceError as e:
        logger.error(f"Geocoder rejected request: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except TransportError as e:
        logger.error(f"Geocoder unreachable: {e}")
        raise HTTPException(status_code=504, detail=str(e))

    if description is None:
        logger.info(f"No location for item {request.item_identifier}")
    return GeocodeResponse(description=description)


@app.get("/cache/stats")
def get_cache_stats(cache: GeocodeCache = Depends(get_cache)):
    try:
        return cache.stats()
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
