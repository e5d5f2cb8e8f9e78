#!/usr/bin/env python3
"""
Pre-build and save the India utility maps to disk.

Builds one choropleth per configured category plus a coverage report of
table entries the loaded geography cannot reach.

Usage:
    python scripts/prebuild_map.py
    python scripts/prebuild_map.py --category water
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from geo_utils import (
    collect_region_keys,
    find_unmatched_regions,
    load_india_states_geojson,
    suggest_region_matches
)
from map_builder import build_region_frame, build_utility_map
from style_resolver import legend_entries
from utility_data import CATEGORIES, CATEGORY_LABELS

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
CACHE_DIR = PROJECT_ROOT / "data_cache"
MAP_CACHE_DIR = CACHE_DIR / "maps"


def build_category_stats(geojson: dict, category: str) -> dict:
    """Coverage numbers and legend for one category."""
    features = geojson.get('features', [])
    frame = build_region_frame(geojson, category)
    unmatched = find_unmatched_regions(features, category)
    geo_names = collect_region_keys(features)

    suggestions = {}
    for name in unmatched:
        close = suggest_region_matches(name, geo_names)
        if close:
            suggestions[name] = close
            logger.info(f"  '{name}' not found, closest regions: {', '.join(close)}")

    return {
        'label': CATEGORY_LABELS[category],
        'regions_drawn': len(frame),
        'regions_with_data': int(frame['has_data'].sum()),
        'unmatched_entries': unmatched,
        'suggestions': suggestions,
        'legend': legend_entries(category),
    }


def main(argv=None) -> int:
    """Build and save all maps."""
    parser = argparse.ArgumentParser(description="Pre-build India utility maps")
    parser.add_argument(
        '--category',
        choices=CATEGORIES,
        action='append',
        help="Category to build (repeatable, default: all)"
    )
    args = parser.parse_args(argv)
    categories = args.category or list(CATEGORIES)

    logger.info("=" * 60)
    logger.info("PRE-BUILDING INDIA UTILITY MAPS")
    logger.info("=" * 60)

    CACHE_DIR.mkdir(parents=True, exist_ok=True)
    MAP_CACHE_DIR.mkdir(parents=True, exist_ok=True)

    logger.info("1. Loading GeoJSON...")
    geojson = load_india_states_geojson(CACHE_DIR)
    if not geojson:
        logger.error("❌ Failed to load GeoJSON")
        return 1

    logger.info("2. Building maps...")
    stats = {}
    for category in categories:
        fig = build_utility_map(geojson, category)
        json_path = MAP_CACHE_DIR / f"{category}_map.json"
        fig.write_json(json_path)
        logger.info(f"  ✅ Saved {json_path}")

        stats[category] = build_category_stats(geojson, category)

    stats_path = MAP_CACHE_DIR / "map_stats.json"
    with open(stats_path, 'w', encoding='utf-8') as f:
        json.dump(stats, f, indent=2)
    logger.info(f"  ✅ Saved {stats_path}")

    logger.info("=" * 60)
    logger.info(f"✅ PRE-BUILT MAPS READY in {MAP_CACHE_DIR}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
