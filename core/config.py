import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Storefront API (the backend serving reverse-geocode / search-location / geocode-address)
    LOCATION_API_BASE_URL: str = os.getenv("LOCATION_API_BASE_URL", "http://localhost:5000/api")
    LOCATION_API_TIMEOUT: float = float(os.getenv("LOCATION_API_TIMEOUT", "30"))
    LOCATION_API_TOKEN: str = os.getenv("LOCATION_API_TOKEN", "")

    # Search box
    SEARCH_DEBOUNCE_MS: int = int(os.getenv("SEARCH_DEBOUNCE_MS", "400"))
    SEARCH_MIN_QUERY_LENGTH: int = int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "3"))
    SEARCH_RESULT_LIMIT: int = int(os.getenv("SEARCH_RESULT_LIMIT", "8"))

    # Service area bias for place search (viewbox is "west,north,east,south")
    SEARCH_CITY_SUFFIX: str = os.getenv("SEARCH_CITY_SUFFIX", "Bangalore, Karnataka, India")
    SEARCH_VIEWBOX: str = os.getenv("SEARCH_VIEWBOX", "77.4,13.1,77.8,12.8")

    # Device geolocation
    GPS_TIMEOUT_SECONDS: float = float(os.getenv("GPS_TIMEOUT_SECONDS", "10"))
    GPS_HIGH_ACCURACY: bool = _env_bool("GPS_HIGH_ACCURACY", "true")

    # Map view
    DEFAULT_CENTER_LAT: float = float(os.getenv("DEFAULT_CENTER_LAT", "12.9716"))
    DEFAULT_CENTER_LNG: float = float(os.getenv("DEFAULT_CENTER_LNG", "77.5946"))
    DEFAULT_ZOOM: int = int(os.getenv("DEFAULT_ZOOM", "13"))
    SEARCH_SELECT_ZOOM: int = int(os.getenv("SEARCH_SELECT_ZOOM", "17"))
    GPS_ZOOM: int = int(os.getenv("GPS_ZOOM", "16"))

    # Upstream geocoder (Nominatim unless a Google key is set)
    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    GEOCODER_USER_AGENT: str = os.getenv("GEOCODER_USER_AGENT", "storefront-locator")
    GEOCODER_TIMEOUT: int = int(os.getenv("GEOCODER_TIMEOUT", "10"))

    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

    @property
    def SEARCH_DEBOUNCE_SECONDS(self) -> float:
        return self.SEARCH_DEBOUNCE_MS / 1000.0

settings = Settings()
