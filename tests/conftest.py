"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from osmlib.ids import IdAllocator, set_allocator
from osmlib.parser import BACKENDS


SAMPLE_OSM = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <bounds minlat="53.0" minlon="7.0" maxlat="54.0" maxlon="8.0"/>
  <node id="1" lon="7.1" lat="53.1" user="alice" uid="10" version="2" timestamp="2008-01-01T10:00:00Z">
    <tag k="amenity" v="cafe"/>
    <tag k="name" v="Corner Cafe"/>
  </node>
  <node id="2" lon="7.2" lat="53.1"/>
  <node id="3" lon="7.2" lat="53.2"/>
  <node id="4" lon="7.1" lat="53.2"/>
  <way id="10" user="bob" timestamp="2008-01-02T10:00:00+01:00">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <nd ref="4"/>
    <nd ref="1"/>
    <tag k="building" v="yes"/>
  </way>
  <way id="11">
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="residential"/>
    <tag k="oneway" v="yes"/>
  </way>
  <relation id="100">
    <member type="way" ref="10" role="outer"/>
    <member type="node" ref="1" role=""/>
    <tag k="type" v="site"/>
  </relation>
</osm>
"""


@pytest.fixture(autouse=True)
def allocator():
    """Fresh placeholder id allocator for every test."""
    fresh = IdAllocator()
    previous = set_allocator(fresh)
    yield fresh
    set_allocator(previous)


@pytest.fixture(params=sorted(BACKENDS))
def backend(request):
    """Run a test once per XML backend."""
    return request.param


@pytest.fixture
def sample_osm():
    return SAMPLE_OSM


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.osm"
    path.write_text(SAMPLE_OSM, encoding="utf-8")
    return str(path)
