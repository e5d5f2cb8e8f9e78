"""
Manual GeoJSON download script for India states.

Run this if the automatic download in prebuild_map.py fails, or to refresh
the cached boundaries. Reports which region-name convention (NAME_1 or
shapeName) the downloaded file uses.
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from geo_utils import (
    CACHE_FILENAME,
    INDIA_STATES_GEOJSON_URLS,
    REGION_NAME_KEYS,
    load_india_states_geojson
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

CACHE_DIR = Path(__file__).parent.parent / "data_cache"


def detect_naming_convention(geojson: dict) -> str:
    """Name property used by the first feature, or 'unknown'."""
    for feature in geojson.get('features', []):
        props = feature.get('properties') or {}
        for key in REGION_NAME_KEYS:
            if props.get(key):
                return key
    return 'unknown'


def main() -> int:
    cache_file = CACHE_DIR / CACHE_FILENAME

    logger.info("=" * 70)
    logger.info("India States GeoJSON Downloader")
    logger.info("=" * 70)

    # Existing cache is kept until a download succeeds
    geojson = load_india_states_geojson(CACHE_DIR, force=True)
    if not geojson:
        logger.error("❌ All download attempts failed.")
        logger.error("Manual download instructions:")
        for url in INDIA_STATES_GEOJSON_URLS:
            logger.error(f"  - {url}")
        logger.error(f"Save the file as: {cache_file}")
        if cache_file.exists():
            logger.info(f"Previous cache left in place: {cache_file}")
        return 1

    logger.info(f"✓ {len(geojson['features'])} regions, name property: {detect_naming_convention(geojson)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
