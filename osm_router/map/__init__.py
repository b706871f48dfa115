"""
Map loading module

Components:
- Parser: OSM XML parsing
- Models: Data structures (Point, Way, Road, Multipolygon)
- Roads: Road classification
- Features: Railway and area classification
- Rings: Multipolygon ring assembly
- Model: Main map model with coordinate normalization
"""

from .models import (
    FeatureKind, LanduseType, Multipolygon, Point, Railway, Road, RoadType, Way,
)
from .parser import OSMXmlParser, ParseError
from .roads import RoadProcessor
from .model import MapModel

__all__ = [
    "FeatureKind",
    "LanduseType",
    "Multipolygon",
    "Point",
    "Railway",
    "Road",
    "RoadType",
    "Way",
    "OSMXmlParser",
    "ParseError",
    "RoadProcessor",
    "MapModel",
]
