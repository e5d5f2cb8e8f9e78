"""
Plotly choropleth builder for the India utility map.

Drives the style resolver for every feature of a GeoJSON collection and
hands the resolved colors to plotly verbatim (no continuous color scale).
Region names are read with geo_utils.extract_region_key, so both the legacy
NAME_1 and newer shapeName geographies render.
"""

import copy
import logging
from typing import Any, Dict

import pandas as pd
import plotly.express as px

from geo_utils import extract_region_key
from style_resolver import (
    check_category,
    fill_style,
    format_display_value,
    resolve_style,
    tooltip_text
)
from utility_data import CATEGORY_LABELS, INDIA_BOUNDS, INDIA_CENTER

logger = logging.getLogger(__name__)

FEATURE_ID_KEY = 'feature_id'

FRAME_COLUMNS = [
    FEATURE_ID_KEY, 'region', 'value', 'display_value', 'color', 'plot_color',
    'tooltip', 'has_data'
]


def to_plotly_color(color: str) -> str:
    """
    Convert '#RRGGBBAA' to 'rgba(r, g, b, a)'.

    Plotly only accepts 3 or 6 digit hex strings. Other colors pass through.
    """
    if isinstance(color, str) and len(color) == 9 and color.startswith('#'):
        r, g, b, a = (int(color[i:i + 2], 16) for i in (1, 3, 5, 7))
        return f"rgba({r}, {g}, {b}, {round(a / 255, 3)})"
    return color


def _tag_features(geojson: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of the collection with a stable string id on every feature.

    Non-dict entries become empty features so ids stay aligned with the
    rows of build_region_frame.
    """
    tagged = copy.deepcopy(geojson)
    features = tagged.get('features', [])
    for idx, feature in enumerate(features):
        if not isinstance(feature, dict):
            feature = {'type': 'Feature', 'properties': {}, 'geometry': None}
            features[idx] = feature
        props = feature.get('properties') or {}
        props[FEATURE_ID_KEY] = str(idx)
        feature['properties'] = props
    return tagged


def build_region_frame(geojson: Dict[str, Any], category: str) -> pd.DataFrame:
    """
    Resolve every feature of a GeoJSON collection for one category.

    Features without a name are kept and get the no-data styling, so no
    polygon is dropped from the map.

    Args:
        geojson: GeoJSON FeatureCollection
        category: Configured metric category

    Returns:
        DataFrame with one row per feature (columns: FRAME_COLUMNS)

    Raises:
        UnknownCategoryError: If category is not configured
    """
    check_category(category)

    rows = []
    for idx, feature in enumerate(geojson.get('features', [])):
        region = extract_region_key(feature)
        style = resolve_style(region, category)
        descriptor = fill_style(style)
        rows.append({
            FEATURE_ID_KEY: str(idx),
            'region': region,
            'value': style.value,
            'display_value': format_display_value(style),
            'color': descriptor['fillColor'],
            'plot_color': to_plotly_color(descriptor['fillColor']),
            'tooltip': tooltip_text(region or 'Unknown', style),
            'has_data': style.has_data,
        })

    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def build_utility_map(geojson: Dict[str, Any], category: str):
    """
    Build the choropleth figure for one category.

    Args:
        geojson: GeoJSON FeatureCollection (not modified)
        category: Configured metric category

    Returns:
        plotly.graph_objects.Figure

    Raises:
        UnknownCategoryError: If category is not configured
    """
    frame = build_region_frame(geojson, category)
    tagged = _tag_features(geojson)

    logger.info(
        f"Building '{category}' map: {len(frame)} regions, "
        f"{int(frame['has_data'].sum())} with data"
    )

    fig = px.choropleth(
        frame,
        geojson=tagged,
        locations=FEATURE_ID_KEY,
        featureidkey=f"properties.{FEATURE_ID_KEY}",
        color='plot_color',
        color_discrete_map='identity',
        custom_data=['tooltip'],
    )

    # Stroke and opacity are the same for every region
    stroke = fill_style(resolve_style(None, category))

    fig.update_traces(
        hovertemplate='%{customdata[0]}<extra></extra>',
        marker_line_color=stroke['color'],
        marker_line_width=stroke['weight'],
        marker_opacity=stroke['fillOpacity'],
    )

    (lat_min, lon_min), (lat_max, lon_max) = INDIA_BOUNDS
    center_lat, center_lon = INDIA_CENTER

    fig.update_geos(
        visible=False,
        center=dict(lat=center_lat, lon=center_lon),
        lataxis_range=[lat_min, lat_max],
        lonaxis_range=[lon_min, lon_max],
    )

    fig.update_layout(
        title=CATEGORY_LABELS[category],
        height=600,
        margin=dict(l=0, r=0, t=50, b=0),
        showlegend=False,
    )

    return fig
