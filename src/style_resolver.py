"""
Region style resolution for the utility map.

Maps a drawn region (state name) and the selected metric category to a
display value and a fill color. Two coloring variants exist:

1. Bucketed - color derived from the value via a fixed threshold ladder
2. Direct   - color stored per region and returned unchanged

The renderer calls resolve_style() once per polygon on every style pass, so
everything here is a pure function of its arguments and the static tables
in utility_data.

fill_style() is what map_builder feeds to plotly. hover_style() is for
renderers that restyle a polygon on mouseover (e.g. a Leaflet GeoJSON
layer); plotly has no equivalent, so map_builder does not use it.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Union

from utility_data import (
    BASE_STYLE,
    BUCKETED,
    COLOR_BUCKETS,
    FALLBACK_COLOR,
    HOVER_STYLE,
    LEGEND_BOUNDS,
    LOWEST_COLOR,
    TABLES,
    VARIANTS,
)


NO_DATA = 'no-data'


class UnknownCategoryError(ValueError):
    """Raised when a metric category is not configured."""


class RegionStyle(NamedTuple):
    """Resolved display value and fill color for one region."""
    value: Union[int, float, str]
    color: str

    @property
    def has_data(self) -> bool:
        return self.value != NO_DATA


def check_category(category: str) -> str:
    """Return the coloring variant of a category, failing fast if unknown."""
    if category not in TABLES:
        raise UnknownCategoryError(
            f"Unknown metric category: {category!r} "
            f"(configured: {', '.join(TABLES)})"
        )
    return VARIANTS[category]


def classify_bucket(value: float) -> str:
    """
    Pick a fill color from the threshold ladder.

    Buckets are evaluated top-down with strict '>' comparisons, so a value
    sitting exactly on a boundary falls into the lower bucket:

        > 80  darkest-high
        > 60  high
        > 40  mid
        > 20  low
        else  lowest

    Args:
        value: Numeric metric value (nominally 0-100)

    Returns:
        Hex color string
    """
    for lower_bound, color in COLOR_BUCKETS:
        if value > lower_bound:
            return color
    return LOWEST_COLOR


def resolve_style(region_key: Optional[str], category: str) -> RegionStyle:
    """
    Resolve the display value and fill color for a region.

    A region with no entry in the active table is valid and never raises:
    the value is reported as NO_DATA. Bucketed tables still color it as a
    value of 0 (lowest bucket); direct-color tables use FALLBACK_COLOR.

    Args:
        region_key: State name as extracted from the geography feature.
            Empty or None keys are treated as unknown regions.
        category: Configured metric category

    Returns:
        RegionStyle(value, color)

    Raises:
        UnknownCategoryError: If category is not configured
    """
    variant = check_category(category)
    entry = TABLES[category].get(region_key) if region_key else None

    if variant == BUCKETED:
        if entry is None:
            return RegionStyle(NO_DATA, classify_bucket(0))
        return RegionStyle(entry, classify_bucket(entry))

    if entry is None:
        return RegionStyle(NO_DATA, FALLBACK_COLOR)
    return RegionStyle(entry.value, entry.color)


# ============================================================================
# Renderer Helpers
# ============================================================================

def fill_style(style: RegionStyle) -> Dict[str, Any]:
    """Fill-style descriptor for a resolved region."""
    descriptor = {'fillColor': style.color}
    descriptor.update(BASE_STYLE)
    return descriptor


def hover_style(style: RegionStyle) -> Dict[str, Any]:
    """Highlight applied while the pointer is over a region."""
    descriptor = fill_style(style)
    descriptor.update(HOVER_STYLE)
    return descriptor


def format_display_value(style: RegionStyle) -> str:
    if not style.has_data:
        return 'N/A'
    value = style.value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def tooltip_text(region_name: str, style: RegionStyle) -> str:
    """Hover label, e.g. 'Kerala: 99%' or 'Nagaland: N/A%'."""
    return f"{region_name}: {format_display_value(style)}%"


def legend_entries(category: str) -> List[Dict[str, str]]:
    """
    Legend swatches for a category.

    Bucketed categories get one swatch per threshold ("0%+", "20%+", ...),
    colored as a value just above the bound. Direct-color categories get one
    swatch per distinct stored color, highest value first, followed by the
    no-data swatch.

    Args:
        category: Configured metric category

    Returns:
        List of {'label': ..., 'color': ...} dicts
    """
    variant = check_category(category)

    if variant == BUCKETED:
        return [
            {'label': f"{bound}%+", 'color': classify_bucket(bound + 1)}
            for bound in LEGEND_BOUNDS
        ]

    values_by_color: Dict[str, List[float]] = {}
    for entry in TABLES[category].values():
        values_by_color.setdefault(entry.color, []).append(entry.value)

    entries = []
    for color, values in sorted(
        values_by_color.items(), key=lambda item: max(item[1]), reverse=True
    ):
        low, high = min(values), max(values)
        label = f"{low}%" if low == high else f"{low}-{high}%"
        entries.append({'label': label, 'color': color})

    entries.append({'label': 'No data', 'color': FALLBACK_COLOR})
    return entries
