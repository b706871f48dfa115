"""
Feature parsing for railways, buildings, leisure, water and landuse

Handles classification of OSM way and relation tags into map features
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .models import (
    FeatureKind, LanduseType, Multipolygon, OSMRelation, Railway, Road, Way,
)
from .roads import RoadProcessor
from .rings import build_rings
from ..config import get_config, RouterConfig


@dataclass
class WayFeatures:
    """Features produced by one way"""
    roads: List[Road] = field(default_factory=list)
    railways: List[Railway] = field(default_factory=list)
    areas: List[Multipolygon] = field(default_factory=list)


class FeatureProcessor:
    """Classifies ways and relations into typed map features"""

    def __init__(
        self,
        road_processor: Optional[RoadProcessor] = None,
        config: Optional[RouterConfig] = None,
    ):
        self.config = config or get_config()
        self.road_processor = road_processor or RoadProcessor(self.config)

    def classify_landuse_type(self, value: str) -> LanduseType:
        if value in self.config.map.landuse_types:
            return LanduseType(value)
        return LanduseType.INVALID

    def parse_way(self, way_index: int, tags: List[Tuple[str, str]]) -> WayFeatures:
        """
        Classify one way by its tags

        Every tag is looked at in order, so a way tagged both highway and
        building yields a road and a building.
        """
        features = WayFeatures()
        for category, value in tags:
            if category == "highway":
                road = self.road_processor.parse_road(way_index, value)
                if road is not None:
                    features.roads.append(road)

            if category == "railway":
                features.railways.append(Railway(way=way_index))
            elif category == "building":
                features.areas.append(Multipolygon(kind=FeatureKind.BUILDING, outer=[way_index]))
            elif self._is_leisure(category, value):
                features.areas.append(Multipolygon(kind=FeatureKind.LEISURE, outer=[way_index]))
            elif category == "natural" and value == "water":
                features.areas.append(Multipolygon(kind=FeatureKind.WATER, outer=[way_index]))
            elif category == "landuse":
                landuse = self.classify_landuse_type(value)
                if landuse is not LanduseType.INVALID:
                    features.areas.append(
                        Multipolygon(kind=FeatureKind.LANDUSE, outer=[way_index], landuse=landuse)
                    )
        return features

    def parse_relation(
        self,
        relation: OSMRelation,
        way_index_by_id: Dict[str, int],
        ways: List[Way],
    ) -> Optional[Multipolygon]:
        """
        Turn a multipolygon relation into an area feature

        The first building, water or known landuse tag decides the kind.
        Members with role 'outer' form the outer rings, every other role the
        inner rings. Fragments are stitched into closed rings, which are
        appended to ``ways``.

        Returns:
            Multipolygon, or None when the relation is not an area we keep
        """
        outer: List[int] = []
        inner: List[int] = []
        for member in relation.members:
            if member.type != "way":
                continue
            way_index = way_index_by_id.get(member.ref)
            if way_index is None:
                continue
            (outer if member.role == "outer" else inner).append(way_index)

        area = None
        for category, value in relation.tags:
            if category == "building":
                area = Multipolygon(kind=FeatureKind.BUILDING)
                break
            if category == "natural" and value == "water":
                area = Multipolygon(kind=FeatureKind.WATER)
                break
            if category == "landuse":
                landuse = self.classify_landuse_type(value)
                if landuse is not LanduseType.INVALID:
                    area = Multipolygon(kind=FeatureKind.LANDUSE, landuse=landuse)
                    break

        if area is None:
            return None

        area.outer = build_rings(ways, outer)
        area.inner = build_rings(ways, inner)
        if not area.outer:
            logger.warning(f"Relation {relation.id} has no closed outer ring")
        return area

    def _is_leisure(self, category: str, value: str) -> bool:
        return (
            category == "leisure"
            or (category == "natural" and value in self.config.map.leisure_natural_types)
            or (category == "landcover" and value == "grass")
        )
