"""
Road-specific logic

Handles road classification from OSM highway tags
"""

from typing import Optional

from .models import Road, RoadType
from ..config import get_config, RouterConfig


class RoadProcessor:
    """Classifies roads from OSM data"""

    def __init__(self, config: Optional[RouterConfig] = None):
        self.config = config or get_config()

    def classify_road_type(self, highway_type: str) -> RoadType:
        """Map a highway tag value to a road type (INVALID when unknown)"""
        type_name = self.config.map.highway_types.get(highway_type)
        if type_name is None:
            return RoadType.INVALID
        return RoadType(type_name)

    def parse_road(self, way_index: int, highway_type: str) -> Optional[Road]:
        """
        Build a road for a way tagged highway=<highway_type>

        Args:
            way_index: Index of the way in the model
            highway_type: Value of the highway tag

        Returns:
            Road, or None when the highway type is not one we route or draw
        """
        road_type = self.classify_road_type(highway_type)
        if road_type is RoadType.INVALID:
            return None
        return Road(way=way_index, type=road_type)

    def is_drivable(self, road: Road) -> bool:
        """Footways (and any other excluded type) are not part of the road graph"""
        return road.type.value not in self.config.routing.excluded_road_types
