"""
Static utility-access datasets for the India states map.

Three categories are configured:
1. electricity - household electricity coverage (%), bucketed coloring
2. water       - household tap water access (%), bucketed coloring
3. utility     - unified utility score with a hand-picked color per state

The electricity and water tables use the legacy state names found in the
NAME_1 property of older GeoJSON files (e.g. 'Orissa'). The utility table
uses the newer shapeName convention (e.g. 'Odisha').

Everything here is read-only. Tables are wrapped in MappingProxyType so the
resolver and its callers cannot mutate them between style passes.
"""

from types import MappingProxyType
from typing import Dict, NamedTuple, Tuple, Union


class RegionEntry(NamedTuple):
    """A stored value with an explicit display color."""
    value: float
    color: str


Value = Union[int, float]


# Variant tags
BUCKETED = 'bucketed'
DIRECT = 'direct'


# ============================================================================
# Color Configuration
# ============================================================================

# Ordered (lower bound exclusive, color), strictly decreasing by bound
COLOR_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (80, '#7c1608ff'),   # > 80: darkest-high
    (60, '#c47916ff'),   # > 60: high
    (40, '#1821acff'),   # > 40: mid
    (20, '#2781d4ff'),   # > 20: low
)
LOWEST_COLOR = '#183488ff'   # <= 20

# Direct-color tables only: region with no entry
FALLBACK_COLOR = '#bdbdbd'

# Legend lower bounds shown next to the map (rendered as "<bound>%+")
LEGEND_BOUNDS = (0, 20, 40, 60, 80)


# ============================================================================
# Renderer Style Constants
# ============================================================================

BASE_STYLE = MappingProxyType({
    'weight': 1.5,
    'opacity': 1,
    'color': 'white',
    'fillOpacity': 0.8,
})

HOVER_STYLE = MappingProxyType({
    'weight': 3,
    'color': '#333',
    'fillOpacity': 0.9,
})

INDIA_BOUNDS = ((6.0, 68.0), (36.0, 98.0))
INDIA_CENTER = (22.9734, 78.6569)


# ============================================================================
# Metric Tables
# ============================================================================

_ELECTRICITY: Dict[str, Value] = {
    'Andhra Pradesh': 85,
    'Arunachal Pradesh': 45,
    'Assam': 60,
    'Bihar': 52,
    'Gujarat': 95,
    'Karnataka': 88,
    'Kerala': 99,
    'Maharashtra': 92,
    'Orissa': 65,
    'Tamil Nadu': 98,
    'Uttar Pradesh': 70,
    'West Bengal': 82,
    'Rajasthan': 75,
    'Madhya Pradesh': 68,
    'Punjab': 90,
    'Haryana': 89,
}

_WATER: Dict[str, Value] = {
    'Andhra Pradesh': 70,
    'Gujarat': 80,
    'Karnataka': 75,
    'Kerala': 95,
    'Maharashtra': 85,
    'Orissa': 50,
    'Tamil Nadu': 90,
    'West Bengal': 60,
}

# Colors are curated by hand, not derived from the score
_UTILITY: Dict[str, RegionEntry] = {
    'Andhra Pradesh': RegionEntry(78, '#c47916ff'),
    'Assam': RegionEntry(55, '#5b8cc9ff'),
    'Bihar': RegionEntry(48, '#2781d4ff'),
    'Goa': RegionEntry(97, '#e9e911ff'),
    'Gujarat': RegionEntry(88, '#7c1608ff'),
    'Haryana': RegionEntry(84, '#a3341fff'),
    'Karnataka': RegionEntry(86, '#9e2a14ff'),
    'Kerala': RegionEntry(96, '#e9e911ff'),
    'Madhya Pradesh': RegionEntry(62, '#d39b3aff'),
    'Maharashtra': RegionEntry(89, '#7c1608ff'),
    'Odisha': RegionEntry(58, '#1821acff'),
    'Punjab': RegionEntry(87, '#9e2a14ff'),
    'Rajasthan': RegionEntry(66, '#c47916ff'),
    'Tamil Nadu': RegionEntry(93, '#e0c21cff'),
    'Telangana': RegionEntry(80, '#b0561aff'),
    'Uttar Pradesh': RegionEntry(57, '#1821acff'),
    'West Bengal': RegionEntry(71, '#c47916ff'),
}


# Category -> table
TABLES = MappingProxyType({
    'electricity': MappingProxyType(_ELECTRICITY),
    'water': MappingProxyType(_WATER),
    'utility': MappingProxyType(_UTILITY),
})

# Category -> coloring variant
VARIANTS = MappingProxyType({
    'electricity': BUCKETED,
    'water': BUCKETED,
    'utility': DIRECT,
})

# Category -> selector label
CATEGORY_LABELS = MappingProxyType({
    'electricity': 'Electricity Coverage',
    'water': 'Tap Water Access',
    'utility': 'Utility Score',
})

CATEGORIES = tuple(TABLES.keys())
DEFAULT_CATEGORY = 'electricity'
