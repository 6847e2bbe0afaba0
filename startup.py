"""
Startup script for deployment
Handles:
- Geocoder configuration check
- Uvicorn server launch
"""

import os
import sys

from core.config import settings


def check_geocoder():
    """Report which upstream geocoder the API will use"""
    if settings.GOOGLE_MAPS_API_KEY:
        print("✓ Using Google Maps geocoding")
        return "google"

    print(f"✓ Using Nominatim geocoding (user agent: {settings.GEOCODER_USER_AGENT})")
    if settings.GEOCODER_USER_AGENT == "storefront-locator":
        print("⚠️  WARNING: GEOCODER_USER_AGENT is the default; Nominatim asks for an identifying agent")
    return "nominatim"


def main():
    """Main startup sequence"""
    print("=" * 60)
    print("🚀 Storefront Location API - Startup")
    print("=" * 60)

    print("\n[1/2] Checking geocoder configuration...")
    check_geocoder()

    print("\n[2/2] Starting uvicorn server...")
    print("=" * 60)

    port = int(os.getenv("PORT", "8000"))

    import uvicorn

    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=port,
            log_level="info",
            access_log=True
        )
    except KeyboardInterrupt:
        print("\n⏹️  Shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
