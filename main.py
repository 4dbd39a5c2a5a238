"""
Main entrypoint for the photo geocache.

Usage:
    python main.py 48 51 29.7 N 2 17 40.2 E [--photo IMG_0001.jpg] [--locale it-IT]

Resolves one photo position to a place description, using and filling the cache
under GEOCODE_BASE_PATH (or --base-path). The API is served from src.api.app.
"""
import argparse
import asyncio
import logging

from src import config
from src.geocoding.exceptions import GeocodeError
from src.geocoding.item_key import generate_item_key
from src.geocoding.resolver import reverse_geocode

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Reverse geocode a photo position with caching.")
    parser.add_argument("lat_deg", type=float)
    parser.add_argument("lat_min", type=float)
    parser.add_argument("lat_sec", type=float)
    parser.add_argument("lat_ref", choices=["N", "S"])
    parser.add_argument("lon_deg", type=float)
    parser.add_argument("lon_min", type=float)
    parser.add_argument("lon_sec", type=float)
    parser.add_argument("lon_ref", choices=["E", "W"])
    parser.add_argument("--photo", default=None,
                        help="Photo file; its content hash is used as the per-photo cache key")
    parser.add_argument("--item-id", default=None,
                        help="Explicit per-photo cache key (overrides --photo)")
    parser.add_argument("--locale", default=config.GEOCODE_LOCALE,
                        help="accept-language hint for the geocoder, e.g. it-IT")
    parser.add_argument("--base-path", default=config.GEOCODE_BASE_PATH,
                        help="Directory holding geocode/cache.db")
    return parser


def main(argv=None):
    """
    Main function to resolve one position.
    """
    args = build_parser().parse_args(argv)
    try:
        item_key = args.item_id or (generate_item_key(args.photo) if args.photo else None)
        params = {
            "latitude": {"values": [args.lat_deg, args.lat_min, args.lat_sec], "reference": args.lat_ref},
            "longitude": {"values": [args.lon_deg, args.lon_min, args.lon_sec], "reference": args.lon_ref},
            "itemIdentifier": item_key,
        }
        description = asyncio.run(reverse_geocode(params, args.locale, args.base_path))

        if description:
            print(description)
        else:
            print("No location found")
        return 0
    except (GeocodeError, OSError) as e:
        logger.error(f"An error occurred in the main function: {str(e)}")
        return 1


if __name__ == "__main__":
    exit_code = main()
    logger.info(f"Exiting with code {exit_code}")
    raise SystemExit(exit_code)
