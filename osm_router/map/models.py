"""
Map data models

Data classes for the geometric entities of a loaded map: points, ways,
roads, railways and multipolygon areas
"""

from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field

from shapely.geometry import MultiPolygon, Polygon

if TYPE_CHECKING:
    from .model import MapModel


class RoadType(str, Enum):
    INVALID = "invalid"
    UNCLASSIFIED = "unclassified"
    SERVICE = "service"
    RESIDENTIAL = "residential"
    TERTIARY = "tertiary"
    SECONDARY = "secondary"
    PRIMARY = "primary"
    TRUNK = "trunk"
    MOTORWAY = "motorway"
    FOOTWAY = "footway"


class LanduseType(str, Enum):
    INVALID = "invalid"
    COMMERCIAL = "commercial"
    CONSTRUCTION = "construction"
    GRASS = "grass"
    FOREST = "forest"
    INDUSTRIAL = "industrial"
    RAILWAY = "railway"
    RESIDENTIAL = "residential"


class FeatureKind(str, Enum):
    BUILDING = "building"
    LEISURE = "leisure"
    WATER = "water"
    LANDUSE = "landuse"


@dataclass(frozen=True)
class Point:
    """A point in normalized map space"""
    x: float
    y: float


@dataclass
class Way:
    """Ordered polyline of point indices"""
    nodes: List[int] = field(default_factory=list)

    def is_closed(self) -> bool:
        return len(self.nodes) > 1 and self.nodes[0] == self.nodes[-1]


@dataclass(frozen=True)
class Road:
    """A classified way"""
    way: int
    type: RoadType


@dataclass(frozen=True)
class Railway:
    way: int


@dataclass
class Multipolygon:
    """
    Area feature made of outer and inner rings

    Buildings, leisure areas, water and landuse share this record; ``kind``
    tells them apart and ``landuse`` is only meaningful for landuse areas.
    Rings are stored as way indices.
    """
    kind: FeatureKind
    outer: List[int] = field(default_factory=list)
    inner: List[int] = field(default_factory=list)
    landuse: Optional[LanduseType] = None

    def to_shapely(self, model: "MapModel"):
        """
        Build a shapely geometry in normalized coordinates

        Each inner ring becomes a hole of the first outer ring containing it.
        Rings with fewer than three distinct points are skipped.

        Returns:
            Polygon, MultiPolygon, or None when no usable outer ring exists
        """
        outers = [p for p in (self._ring_polygon(model, w) for w in self.outer) if p is not None]
        if not outers:
            return None

        holes: List[List[list]] = [[] for _ in outers]
        for way_index in self.inner:
            ring = self._ring_polygon(model, way_index)
            if ring is None:
                continue
            inside = ring.representative_point()
            for i, outer in enumerate(outers):
                if outer.contains(inside):
                    holes[i].append(list(ring.exterior.coords))
                    break

        polygons = [
            Polygon(outer.exterior.coords, ring_holes)
            for outer, ring_holes in zip(outers, holes)
        ]
        if len(polygons) == 1:
            return polygons[0]
        return MultiPolygon(polygons)

    @staticmethod
    def _ring_polygon(model: "MapModel", way_index: int) -> Optional[Polygon]:
        coords = [(p.x, p.y) for p in model.way_points(way_index)]
        if len(set(coords)) < 3:
            return None
        return Polygon(coords)


# ============================================================
# Raw OSM elements (as read from the XML, before classification)
# ============================================================

@dataclass
class OSMBounds:
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: str
    lat: float
    lon: float


@dataclass
class OSMWay:
    """Represents an OSM way with its raw node references"""
    id: str
    node_refs: List[str]
    tags: List[Tuple[str, str]]


@dataclass
class OSMMember:
    type: str
    ref: str
    role: str


@dataclass
class OSMRelation:
    id: str
    members: List[OSMMember]
    tags: List[Tuple[str, str]]


@dataclass
class OSMDocument:
    """Everything the parser pulled out of one OSM XML document"""
    bounds: OSMBounds
    nodes: List[OSMNode]
    ways: List[OSMWay]
    relations: List[OSMRelation]
