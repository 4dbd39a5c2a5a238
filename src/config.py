import os

# Where the geocode/cache.db store lives
GEOCODE_BASE_PATH = os.getenv("GEOCODE_BASE_PATH", os.getcwd())

# Nominatim reverse geocoding
GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org")
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "PhotoGeocache/1.0")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "10"))
GEOCODER_MIN_INTERVAL = float(os.getenv("GEOCODER_MIN_INTERVAL", "1.0"))  # seconds between requests
GEOCODER_ZOOM = int(os.getenv("GEOCODER_ZOOM")) if os.getenv("GEOCODER_ZOOM") else None

# Locale hint sent as accept-language, e.g. "it-IT"
GEOCODE_LOCALE = os.getenv("GEOCODE_LOCALE") or None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
