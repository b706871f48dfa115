"""
Shared fixtures: small OSM XML maps built in code

Node positions are given in unit map space. The bounding box is 0.01° on
each side at the equator, so a unit coordinate u becomes u * 0.01 degrees
and comes back out of the projection almost unchanged.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from osm_router.map import MapModel
from osm_router.routing import RouteGraph

SPAN_DEG = 0.01

Tags = Sequence[Tuple[str, str]]


def build_osm(
    nodes: Dict[str, Tuple[float, float]],
    ways: Sequence[Tuple[str, List[str], Tags]] = (),
    relations: Sequence[Tuple[str, List[Tuple[str, str, str]], Tags]] = (),
    bounds: Optional[str] = None,
) -> bytes:
    """
    Render an OSM XML document

    Args:
        nodes: node id -> (x, y) in unit map space
        ways: (way id, node refs, tags)
        relations: (relation id, [(member type, ref, role)], tags)
        bounds: Replacement <bounds> element ("" to omit it)
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', '<osm version="0.6">']
    if bounds is None:
        bounds = f'<bounds minlat="0" minlon="0" maxlat="{SPAN_DEG}" maxlon="{SPAN_DEG}"/>'
    if bounds:
        lines.append(bounds)

    for node_id, (x, y) in nodes.items():
        lines.append(f'<node id="{node_id}" lat="{y * SPAN_DEG:.9f}" lon="{x * SPAN_DEG:.9f}"/>')

    for way_id, refs, tags in ways:
        lines.append(f'<way id="{way_id}">')
        lines.extend(f'  <nd ref="{ref}"/>' for ref in refs)
        lines.extend(f'  <tag k="{k}" v="{v}"/>' for k, v in tags)
        lines.append('</way>')

    for relation_id, members, tags in relations:
        lines.append(f'<relation id="{relation_id}">')
        lines.extend(
            f'  <member type="{member_type}" ref="{ref}" role="{role}"/>'
            for member_type, ref, role in members
        )
        lines.extend(f'  <tag k="{k}" v="{v}"/>' for k, v in tags)
        lines.append('</relation>')

    lines.append('</osm>')
    return "\n".join(lines).encode("utf-8")


RESIDENTIAL = [("highway", "residential")]
FOOTWAY = [("highway", "footway")]


@pytest.fixture
def make_osm():
    return build_osm


@pytest.fixture
def diamond_xml() -> bytes:
    """
    Five nodes, two roads from S to E

    Road 101 bends far north through X; road 102 runs just above the
    straight line through M1 and M2 and is the shorter route.
    """
    nodes = {
        "1": (0.0, 0.0),    # S
        "2": (0.3, 0.9),    # X
        "3": (0.33, 0.05),  # M1
        "4": (0.66, 0.05),  # M2
        "5": (1.0, 0.0),    # E
    }
    ways = [
        ("101", ["1", "2", "5"], RESIDENTIAL),
        ("102", ["1", "3", "4", "5"], RESIDENTIAL),
    ]
    return build_osm(nodes, ways)


@pytest.fixture
def grid_xml() -> bytes:
    """
    3x3 street grid (0, 0.5, 1 on both axes) plus a footway shortcut, a
    footway-only node, a building and a railway
    """
    nodes = {}
    for row in range(3):
        for col in range(3):
            nodes[f"{row}{col}"] = (col * 0.5, row * 0.5)
    nodes["f1"] = (0.26, 0.24)  # only on the footway
    nodes["b1"] = (0.6, 0.6)
    nodes["b2"] = (0.7, 0.6)
    nodes["b3"] = (0.7, 0.7)

    ways = []
    for row in range(3):
        ways.append((f"h{row}", [f"{row}0", f"{row}1", f"{row}2"], [("highway", "secondary")]))
    for col in range(3):
        ways.append((f"v{col}", [f"0{col}", f"1{col}", f"2{col}"], [("highway", "tertiary")]))
    ways.append(("foot", ["00", "f1", "22"], FOOTWAY))
    ways.append(("bld", ["b1", "b2", "b3", "b1"], [("building", "yes")]))
    ways.append(("rail", ["00", "22"], [("railway", "rail")]))
    return build_osm(nodes, ways)


def _two_clusters(link_tags: Tags) -> bytes:
    nodes = {
        "1": (0.1, 0.1),
        "2": (0.3, 0.1),
        "3": (0.3, 0.3),
        "4": (0.7, 0.7),
        "5": (0.9, 0.7),
        "6": (0.9, 0.9),
    }
    ways = [
        ("a", ["1", "2", "3"], RESIDENTIAL),
        ("b", ["4", "5", "6"], RESIDENTIAL),
    ]
    if link_tags:
        ways.append(("link", ["3", "4"], link_tags))
    return build_osm(nodes, ways)


@pytest.fixture
def disconnected_xml() -> bytes:
    return _two_clusters(())


@pytest.fixture
def two_clusters():
    """Two clusters joined by a single way with the given tags"""
    return _two_clusters


@pytest.fixture
def diamond_graph(diamond_xml) -> RouteGraph:
    return RouteGraph(MapModel(diamond_xml))


@pytest.fixture
def grid_model(grid_xml) -> MapModel:
    return MapModel(grid_xml)


@pytest.fixture
def grid_graph(grid_model) -> RouteGraph:
    return RouteGraph(grid_model)
