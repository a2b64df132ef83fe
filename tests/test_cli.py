"""
Tests for the command-line interface
"""

import json
from unittest.mock import Mock

import pytest

import cli
from osmlib.errors import APINotFound
from osmlib.models import Node


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_parse_command(sample_file, tmp_path):
    geojson_path = tmp_path / "out.json"
    assert cli.main(["--backend", "expat", "parse", sample_file, "--geojson", str(geojson_path)]) == 0

    data = json.loads(geojson_path.read_text(encoding="utf-8"))
    assert data["type"] == "FeatureCollection"
    assert [f["id"] for f in data["features"]] == ["node/1", "way/10", "way/11"]
    assert data["features"][0]["geometry"] == {"type": "Point", "coordinates": [7.1, 53.1]}


def test_parse_command_missing_file(tmp_path):
    assert cli.main(["parse", str(tmp_path / "missing.osm")]) == 1


def test_parse_command_bad_document(tmp_path):
    path = tmp_path / "bad.osm"
    path.write_text('<osm version="0.4"/>', encoding="utf-8")
    assert cli.main(["parse", str(path)]) == 1


@pytest.fixture
def fake_api(monkeypatch):
    api = Mock()
    monkeypatch.setattr(cli, "OSMAPIClient", Mock(return_value=api))
    return api


def test_get_command_prints_xml(fake_api, capsys):
    fake_api.get_object.return_value = Node(3437, lon=7.4, lat=53.2, tags={"amenity": "pub"})
    assert cli.main(["get", "node", "3437"]) == 0
    fake_api.get_object.assert_called_once_with("node", 3437)

    out = capsys.readouterr().out
    assert out.startswith('<node id="3437"')
    assert '<tag k="amenity" v="pub" />' in out


def test_get_command_writes_file(fake_api, tmp_path):
    fake_api.get_object.return_value = Node(1, lon=1, lat=2)
    path = tmp_path / "node.xml"
    assert cli.main(["get", "node", "1", "-o", str(path)]) == 0
    assert path.read_text(encoding="utf-8").startswith('<node id="1"')


def test_get_command_not_in_response(fake_api):
    fake_api.get_object.return_value = None
    assert cli.main(["get", "way", "5"]) == 1


def test_get_command_api_error(fake_api):
    fake_api.get_object.side_effect = APINotFound("HTTP 404", status=404)
    assert cli.main(["get", "relation", "5"]) == 1


def test_bbox_command(fake_api, tmp_path):
    from osmlib.database import Database

    db = Database()
    db << Node(1, lon=7.41, lat=53.205)
    fake_api.get_bbox.return_value = db
    path = tmp_path / "area.osm"

    assert cli.main(["bbox", "7.40", "53.20", "7.42", "53.21", "-o", str(path)]) == 0
    fake_api.get_bbox.assert_called_once_with(7.40, 53.20, 7.42, 53.21)
    assert '<node id="1"' in path.read_text(encoding="utf-8")
    assert db.nodes == {}
