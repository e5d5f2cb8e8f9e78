"""
Tests for region name extraction, coverage diagnostics and GeoJSON loading.

Network access is mocked; nothing here downloads real boundaries.

Run with pytest, or directly: python scripts/test_geo_utils.py
"""

import json
import sys
from pathlib import Path
from unittest import mock

import pytest
import requests

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import geo_utils
from geo_utils import (
    extract_region_key,
    find_unmatched_regions,
    load_india_states_geojson,
    normalize_state_name,
    suggest_region_matches
)
from style_resolver import UnknownCategoryError
from utility_data import TABLES


def _feature(**props):
    return {'type': 'Feature', 'properties': props, 'geometry': None}


def _collection(*features):
    return {'type': 'FeatureCollection', 'features': list(features)}


# ============================================================================
# Region keys
# ============================================================================

def test_extract_prefers_legacy_name():
    feature = _feature(NAME_1="Orissa", shapeName="Odisha")
    assert extract_region_key(feature) == "Orissa"


def test_extract_falls_back_to_shape_name():
    assert extract_region_key(_feature(shapeName="Odisha")) == "Odisha"
    assert extract_region_key(_feature(NAME_1="", shapeName="Odisha")) == "Odisha"
    assert extract_region_key(_feature(NAME_1=None, shapeName="Goa")) == "Goa"


def test_extract_strips_whitespace():
    assert extract_region_key(_feature(NAME_1="  Kerala ")) == "Kerala"


@pytest.mark.parametrize("feature", [
    _feature(),
    _feature(NAME_1="   "),
    _feature(NAME_1=42),
    {'type': 'Feature', 'properties': None},
    {'type': 'Feature'},
    None,
    "Kerala",
])
def test_extract_malformed_feature_returns_empty(feature):
    assert extract_region_key(feature) == ""


def test_extract_custom_keys():
    feature = _feature(ST_NM="Punjab", NAME_1="Panjab")
    assert extract_region_key(feature, keys=('ST_NM', 'NAME_1')) == "Punjab"


def test_normalize_state_name():
    assert normalize_state_name("Jammu & Kashmir") == "jammu and kashmir"
    assert normalize_state_name("  Tamil   Nadu ") == "tamil nadu"
    assert normalize_state_name("") == ""
    assert normalize_state_name(None) == ""


# ============================================================================
# Coverage diagnostics
# ============================================================================

def test_unmatched_regions_legacy_names_vs_new_geography():
    features = [_feature(shapeName=name) for name in TABLES['electricity'] if name != 'Orissa']
    features.append(_feature(shapeName="Odisha"))

    assert find_unmatched_regions(features, "electricity") == ["Orissa"]


def test_unmatched_regions_full_coverage():
    features = [_feature(NAME_1=name) for name in TABLES['water']]
    assert find_unmatched_regions(features, "water") == []


def test_unmatched_regions_unknown_category():
    with pytest.raises(UnknownCategoryError):
        find_unmatched_regions([], "gas")


def test_suggest_region_matches():
    candidates = ["Tamil Nadu", "Kerala", "Jammu and Kashmir"]

    assert suggest_region_matches("Tamilnadu", candidates)[0] == "Tamil Nadu"
    assert suggest_region_matches("Jammu & Kashmir", candidates)[0] == "Jammu and Kashmir"
    assert suggest_region_matches("", candidates) == []


def test_suggest_region_matches_respects_cutoff():
    assert suggest_region_matches("Kerala", ["Punjab", "Assam"]) == []


# ============================================================================
# GeoJSON loading
# ============================================================================

def _response(payload):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def test_load_from_cache(tmp_path):
    geojson = _collection(_feature(NAME_1="Kerala"))
    (tmp_path / geo_utils.CACHE_FILENAME).write_text(json.dumps(geojson), encoding='utf-8')

    with mock.patch.object(geo_utils.requests, 'get') as get:
        assert load_india_states_geojson(tmp_path) == geojson
        get.assert_not_called()


def test_download_and_cache(tmp_path):
    geojson = _collection(_feature(shapeName="Goa"))

    with mock.patch.object(geo_utils.requests, 'get', return_value=_response(geojson)):
        assert load_india_states_geojson(tmp_path) == geojson

    cached = json.loads((tmp_path / geo_utils.CACHE_FILENAME).read_text(encoding='utf-8'))
    assert cached == geojson


def test_invalid_cache_is_replaced(tmp_path):
    (tmp_path / geo_utils.CACHE_FILENAME).write_text("{not json", encoding='utf-8')
    geojson = _collection(_feature(NAME_1="Assam"))

    with mock.patch.object(geo_utils.requests, 'get', return_value=_response(geojson)):
        assert load_india_states_geojson(tmp_path) == geojson


def test_falls_back_to_next_source(tmp_path):
    geojson = _collection(_feature(NAME_1="Bihar"))
    responses = [requests.ConnectionError("offline"), _response(geojson)]

    with mock.patch.object(geo_utils.requests, 'get', side_effect=responses) as get:
        assert load_india_states_geojson(tmp_path) == geojson
        assert get.call_count == 2


def test_skips_source_without_features(tmp_path):
    geojson = _collection(_feature(NAME_1="Bihar"))
    responses = [_response(_collection()), _response(geojson)]

    with mock.patch.object(geo_utils.requests, 'get', side_effect=responses):
        assert load_india_states_geojson(tmp_path) == geojson


def test_force_skips_cache_and_keeps_it_on_failure(tmp_path):
    cached = _collection(_feature(NAME_1="Kerala"))
    cache = tmp_path / geo_utils.CACHE_FILENAME
    cache.write_text(json.dumps(cached), encoding='utf-8')

    with mock.patch.object(geo_utils.requests, 'get', side_effect=requests.ConnectionError("offline")) as get:
        assert load_india_states_geojson(tmp_path, force=True) is None
        assert get.call_count == len(geo_utils.INDIA_STATES_GEOJSON_URLS)

    assert json.loads(cache.read_text(encoding='utf-8')) == cached


def test_all_sources_fail(tmp_path):
    with mock.patch.object(geo_utils.requests, 'get', side_effect=requests.Timeout("slow")):
        assert load_india_states_geojson(tmp_path) is None

    assert not (tmp_path / geo_utils.CACHE_FILENAME).exists()


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
