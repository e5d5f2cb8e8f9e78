"""
Geospatial utilities for India state-level mapping.

Handles:
- Region name extraction from GeoJSON features (legacy and newer schemas)
- State name normalization for diagnostics
- India states GeoJSON loading and caching
- Coverage checks between metric tables and the loaded geography
"""

import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests
from rapidfuzz import fuzz, process

from style_resolver import check_category
from utility_data import TABLES

logger = logging.getLogger(__name__)

# India States GeoJSON sources (multiple fallbacks)
INDIA_STATES_GEOJSON_URLS = [
    # Primary: geoBoundaries ADM1 (shapeName)
    "https://github.com/wmgeolab/geoBoundaries/raw/main/releaseData/gbOpen/IND/ADM1/geoBoundaries-IND-ADM1_simplified.geojson",
    # Fallback: GADM-derived state boundaries (NAME_1)
    "https://raw.githubusercontent.com/geohacker/india/master/state/india_state.geojson",
]

CACHE_FILENAME = "india_states.geojson"

# Feature properties holding the state name, in priority order.
# NAME_1 is the legacy GADM property, shapeName the geoBoundaries one.
REGION_NAME_KEYS = ('NAME_1', 'shapeName')


def extract_region_key(
    feature: Dict[str, Any],
    keys: Sequence[str] = REGION_NAME_KEYS
) -> str:
    """
    Extract the region name from a GeoJSON feature.

    Candidate properties are tried in order and the first non-empty string
    wins. Features with no usable name (or no properties at all) yield an
    empty string, which the resolver treats as an unknown region.

    Args:
        feature: GeoJSON feature dict
        keys: Property names to probe, highest priority first

    Returns:
        Region name, or "" when none is present
    """
    if not isinstance(feature, dict):
        return ""

    props = feature.get('properties') or {}

    for key in keys:
        value = props.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    return ""


def normalize_state_name(name: str) -> str:
    """
    Normalize a state name for loose comparison.

    Rules:
    1. Unicode normalize (NFKD)
    2. Replace '&' with 'and'
    3. Collapse whitespace
    4. Case-fold

    Args:
        name: Raw state name

    Returns:
        Normalized state name
    """
    if not isinstance(name, str) or not name.strip():
        return ""

    name = unicodedata.normalize('NFKD', name)
    name = name.replace('&', ' and ')
    name = re.sub(r'\s+', ' ', name)

    return name.strip().casefold()


def collect_region_keys(features: Iterable[Dict[str, Any]]) -> List[str]:
    """Region names of all features, in order, skipping unnamed ones."""
    keys = []
    for feature in features:
        key = extract_region_key(feature)
        if key:
            keys.append(key)
    return keys


def find_unmatched_regions(
    features: Iterable[Dict[str, Any]],
    category: str
) -> List[str]:
    """
    Find table entries that no feature in the geography can reach.

    Matching is exact, the same way the resolver looks keys up. An entry
    keyed by a legacy name (e.g. 'Orissa') is unreachable from a geography
    using the newer naming convention (e.g. 'Odisha').

    Args:
        features: GeoJSON feature list
        category: Configured metric category

    Returns:
        Sorted list of unreachable table keys

    Raises:
        UnknownCategoryError: If category is not configured
    """
    check_category(category)

    geo_keys = set(collect_region_keys(features))
    unmatched = sorted(key for key in TABLES[category] if key not in geo_keys)

    if unmatched:
        logger.warning(
            f"{len(unmatched)} '{category}' entries have no matching region: "
            f"{', '.join(unmatched)}"
        )

    return unmatched


def suggest_region_matches(
    name: str,
    candidates: Iterable[str],
    limit: int = 3,
    score_cutoff: float = 80
) -> List[str]:
    """
    Suggest geography names close to an unmatched table key.

    Comparison runs on normalized names so case and '&' spelling do not
    affect the score.

    Args:
        name: Table key with no exact match
        candidates: Region names present in the geography
        limit: Maximum suggestions
        score_cutoff: Minimum rapidfuzz WRatio score (0-100)

    Returns:
        Candidate names, best match first
    """
    normalized = normalize_state_name(name)
    if not normalized:
        return []

    choices = {}
    for candidate in candidates:
        key = normalize_state_name(candidate)
        if key:
            choices.setdefault(key, candidate)

    matches = process.extract(
        normalized,
        list(choices),
        scorer=fuzz.WRatio,
        limit=limit,
        score_cutoff=score_cutoff
    )

    return [choices[match] for match, _score, _idx in matches]


def _is_valid_geojson(geojson: Any) -> bool:
    return (
        isinstance(geojson, dict)
        and isinstance(geojson.get('features'), list)
        and len(geojson['features']) > 0
    )


def load_india_states_geojson(
    cache_dir: Optional[Path] = None,
    force: bool = False
) -> Optional[Dict[str, Any]]:
    """
    Load India states GeoJSON from cache or from multiple sources with fallbacks.

    Downloads and caches the GeoJSON file locally for faster subsequent loads.
    Tries each URL in INDIA_STATES_GEOJSON_URLS if the cache is missing or
    invalid. The cache file is only overwritten after a successful download,
    so a failed refresh leaves the previous copy in place.

    Args:
        cache_dir: Directory to cache the GeoJSON file (optional)
        force: Skip reading the cache and download a fresh copy

    Returns:
        GeoJSON dict or None if all sources fail
    """
    if cache_dir:
        cache_file = Path(cache_dir) / CACHE_FILENAME
    else:
        cache_file = Path(__file__).parent.parent / "data_cache" / CACHE_FILENAME

    # Try loading from cache first
    if cache_file.exists() and not force:
        try:
            with open(cache_file, 'r', encoding='utf-8') as f:
                geojson = json.load(f)

            if _is_valid_geojson(geojson):
                logger.info(f"✓ Loaded {len(geojson['features'])} regions from cache: {cache_file}")
                return geojson
            logger.warning("Cached GeoJSON is invalid (no features), will re-download")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load cached GeoJSON: {e}")

    for idx, url in enumerate(INDIA_STATES_GEOJSON_URLS, 1):
        try:
            logger.info(f"Attempting download from source {idx}/{len(INDIA_STATES_GEOJSON_URLS)}: {url}")

            response = requests.get(
                url,
                headers={'User-Agent': 'UtilityMap/1.0'},
                timeout=30
            )
            response.raise_for_status()
            geojson = response.json()

            if not _is_valid_geojson(geojson):
                logger.warning(f"Downloaded GeoJSON from {url} has no features, trying next source")
                continue

            try:
                cache_file.parent.mkdir(parents=True, exist_ok=True)
                partial = cache_file.with_name(cache_file.name + ".part")
                with open(partial, 'w', encoding='utf-8') as f:
                    json.dump(geojson, f)
                partial.replace(cache_file)
                logger.info(f"✓ Cached GeoJSON to {cache_file}")
            except OSError as cache_err:
                logger.warning(f"Failed to cache GeoJSON: {cache_err}")

            logger.info(f"✓ Successfully loaded {len(geojson['features'])} regions from {url}")
            return geojson

        except requests.RequestException as e:
            logger.warning(f"Request failed for {url}: {e}")
        except ValueError as e:
            logger.warning(f"Invalid JSON from {url}: {e}")

    logger.error("✗ Failed to download India states GeoJSON from all sources")
    logger.error(f"Manually download one of {', '.join(INDIA_STATES_GEOJSON_URLS)} to: {cache_file}")

    return None
