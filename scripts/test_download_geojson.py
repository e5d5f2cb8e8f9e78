"""
Tests for the GeoJSON refresh script.

A refresh must never lose a good cached copy when every source fails.

Run with pytest, or directly: python scripts/test_download_geojson.py
"""

import json
import sys
from pathlib import Path
from unittest import mock

import pytest
import requests

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import download_geojson
import geo_utils


def _collection(name, key='NAME_1'):
    return {
        'type': 'FeatureCollection',
        'features': [{'type': 'Feature', 'properties': {key: name}, 'geometry': None}],
    }


def _response(payload):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


@pytest.fixture
def cache_file(tmp_path, monkeypatch):
    monkeypatch.setattr(download_geojson, 'CACHE_DIR', tmp_path)
    cache = tmp_path / geo_utils.CACHE_FILENAME
    cache.write_text(json.dumps(_collection("Kerala")), encoding='utf-8')
    return cache


def test_failed_refresh_keeps_cache(cache_file):
    with mock.patch.object(geo_utils.requests, 'get', side_effect=requests.ConnectionError("offline")):
        assert download_geojson.main() == 1

    assert cache_file.exists()
    assert json.loads(cache_file.read_text(encoding='utf-8')) == _collection("Kerala")


def test_refresh_replaces_cache(cache_file):
    fresh = _collection("Odisha", key='shapeName')

    with mock.patch.object(geo_utils.requests, 'get', return_value=_response(fresh)) as get:
        assert download_geojson.main() == 0
        get.assert_called_once()

    assert json.loads(cache_file.read_text(encoding='utf-8')) == fresh
    assert not cache_file.with_name(cache_file.name + ".part").exists()


def test_detect_naming_convention():
    assert download_geojson.detect_naming_convention(_collection("Orissa")) == 'NAME_1'
    assert download_geojson.detect_naming_convention(_collection("Odisha", key='shapeName')) == 'shapeName'
    assert download_geojson.detect_naming_convention({'features': []}) == 'unknown'


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
