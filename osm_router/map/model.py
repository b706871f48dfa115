"""
Map model

Loads an OSM XML extract into points, ways and typed features, and
normalizes every coordinate into a unit map space once at load time.
"""

import math
import os
from typing import Dict, List, Optional, Tuple

from loguru import logger
from shapely.geometry import LineString

from .features import FeatureProcessor
from .models import FeatureKind, Multipolygon, OSMBounds, OSMDocument, Point, Railway, Road, Way
from .parser import OSMXmlParser, ParseError
from .roads import RoadProcessor
from ..config import get_config, RouterConfig


class MapModel:
    """
    In-memory map built from OSM XML

    Usage:
        model = MapModel.from_file("map.osm")
        for road in model.roads:
            points = model.way_points(road.way)

    Node coordinates are normalized so that the shorter side of the bounding
    box spans [0, 1]. Multiply a normalized length by ``metric_scale`` to get
    meters.
    """

    def __init__(self, data: bytes, config: Optional[RouterConfig] = None):
        self.config = config or get_config()
        self.parser = OSMXmlParser()
        self.road_processor = RoadProcessor(self.config)
        self.feature_processor = FeatureProcessor(self.road_processor, self.config)

        self._nodes: List[Point] = []
        self._node_ids: List[str] = []
        self._node_index_by_id: Dict[str, int] = {}
        self._ways: List[Way] = []
        self._roads: List[Road] = []
        self._railways: List[Railway] = []
        self._buildings: List[Multipolygon] = []
        self._leisures: List[Multipolygon] = []
        self._waters: List[Multipolygon] = []
        self._landuses: List[Multipolygon] = []
        self._areas_by_kind = {
            FeatureKind.BUILDING: self._buildings,
            FeatureKind.LEISURE: self._leisures,
            FeatureKind.WATER: self._waters,
            FeatureKind.LANDUSE: self._landuses,
        }

        self._bounds: Optional[OSMBounds] = None
        self._unit_m = 1.0
        self._min_x = 0.0
        self._min_y = 0.0
        self._metric_scale = 1.0

        document = self.parser.parse(data)
        self._load_data(document)
        self._adjust_coordinates(document)

        logger.info(
            f"Loaded map: {len(self._nodes)} nodes, {len(self._ways)} ways, "
            f"{len(self._roads)} roads, {len(self._railways)} railways, "
            f"{len(self._buildings)} buildings, {len(self._leisures)} leisure areas, "
            f"{len(self._waters)} water areas, {len(self._landuses)} landuse areas"
        )

    @classmethod
    def from_file(cls, path: str, config: Optional[RouterConfig] = None) -> "MapModel":
        """
        Load a map from an .osm file

        Raises:
            FileNotFoundError: If the file doesn't exist
            ParseError: If the file cannot be parsed
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Map file not found: {path}")

        with open(path, "rb") as map_file:
            data = map_file.read()

        logger.info(f"Reading map data from {path} ({len(data):,} bytes)")
        return cls(data, config=config)

    # ============================================================
    # Accessors
    # ============================================================

    @property
    def metric_scale(self) -> float:
        return self._metric_scale

    @property
    def bounds(self) -> OSMBounds:
        return self._bounds

    @property
    def nodes(self) -> Tuple[Point, ...]:
        return tuple(self._nodes)

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(self._node_ids)

    @property
    def ways(self) -> Tuple[Way, ...]:
        return tuple(self._ways)

    @property
    def roads(self) -> Tuple[Road, ...]:
        return tuple(self._roads)

    @property
    def railways(self) -> Tuple[Railway, ...]:
        return tuple(self._railways)

    @property
    def buildings(self) -> Tuple[Multipolygon, ...]:
        return tuple(self._buildings)

    @property
    def leisures(self) -> Tuple[Multipolygon, ...]:
        return tuple(self._leisures)

    @property
    def waters(self) -> Tuple[Multipolygon, ...]:
        return tuple(self._waters)

    @property
    def landuses(self) -> Tuple[Multipolygon, ...]:
        return tuple(self._landuses)

    def node_id(self, index: int) -> str:
        """OSM id of the node at the given position"""
        return self._node_ids[index]

    def node_index(self, osm_id: str) -> int:
        """Position of the node with the given OSM id (KeyError if unknown)"""
        return self._node_index_by_id[str(osm_id)]

    def way_points(self, way_index: int) -> List[Point]:
        return [self._nodes[i] for i in self._ways[way_index].nodes]

    def way_geometry(self, way_index: int) -> LineString:
        """Shapely line through a way's points (normalized coordinates)"""
        return LineString([(p.x, p.y) for p in self.way_points(way_index)])

    def to_lonlat(self, x: float, y: float) -> Tuple[float, float]:
        """Convert normalized coordinates back to (lon, lat) degrees"""
        radius = self.config.map.earth_radius_m
        mx = x * self._unit_m + self._min_x
        my = y * self._unit_m + self._min_y
        lon = math.degrees(mx / radius)
        lat = math.degrees(2.0 * math.atan(math.exp(my / radius)) - math.pi / 2.0)
        return lon, lat

    # ============================================================
    # Loading
    # ============================================================

    def _load_data(self, document: OSMDocument) -> None:
        for node in document.nodes:
            self._node_index_by_id[node.id] = len(self._node_ids)
            self._node_ids.append(node.id)

        way_index_by_id: Dict[str, int] = {}
        dropped_refs = 0
        for osm_way in document.ways:
            way_index = len(self._ways)
            way_index_by_id[osm_way.id] = way_index

            way = Way()
            for ref in osm_way.node_refs:
                node_index = self._node_index_by_id.get(ref)
                if node_index is None:
                    dropped_refs += 1
                    continue
                way.nodes.append(node_index)
            self._ways.append(way)

            features = self.feature_processor.parse_way(way_index, osm_way.tags)
            self._roads.extend(features.roads)
            self._railways.extend(features.railways)
            for area in features.areas:
                self._add_area(area)

        if dropped_refs:
            logger.warning(f"Dropped {dropped_refs} way references to nodes missing from the extract")

        for relation in document.relations:
            area = self.feature_processor.parse_relation(relation, way_index_by_id, self._ways)
            if area is not None:
                self._add_area(area)

    def _add_area(self, area: Multipolygon) -> None:
        self._areas_by_kind[area.kind].append(area)

    def _adjust_coordinates(self, document: OSMDocument) -> None:
        """Project lon/lat to Web Mercator and rescale into the unit map space"""
        bounds = document.bounds
        radius = self.config.map.earth_radius_m

        def lat_to_y(lat: float) -> float:
            return math.log(math.tan(math.radians(lat) / 2.0 + math.pi / 4.0)) * radius

        def lon_to_x(lon: float) -> float:
            return math.radians(lon) * radius

        try:
            self._min_x = lon_to_x(bounds.min_lon)
            self._min_y = lat_to_y(bounds.min_lat)
            dx = lon_to_x(bounds.max_lon) - self._min_x
            dy = lat_to_y(bounds.max_lat) - self._min_y
        except ValueError as e:
            raise ParseError(f"Map bounds are outside the projectable range: {e}") from e

        self._unit_m = min(dx, dy)
        if self._unit_m <= 0:
            raise ParseError(
                f"Map bounds are empty or inverted: lat [{bounds.min_lat}, {bounds.max_lat}], "
                f"lon [{bounds.min_lon}, {bounds.max_lon}]"
            )

        # Mercator stretches distances by 1/cos(lat); correct at the map's center latitude
        center_lat = (bounds.min_lat + bounds.max_lat) / 2.0
        self._metric_scale = self._unit_m * math.cos(math.radians(center_lat))
        self._bounds = bounds

        for node in document.nodes:
            try:
                x = (lon_to_x(node.lon) - self._min_x) / self._unit_m
                y = (lat_to_y(node.lat) - self._min_y) / self._unit_m
            except ValueError as e:
                raise ParseError(f"Node {node.id} has an unprojectable latitude {node.lat}") from e
            self._nodes.append(Point(x, y))

        logger.debug(f"Metric scale: {self._metric_scale:.2f} m per map unit")
