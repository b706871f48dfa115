"""
OSM Router - shortest driving routes over OpenStreetMap extracts
"""

from .map import MapModel, ParseError
from .routing import RouteGraph, RoutePlanner, RouteResult, SearchStatus, NoRouteFound, GraphError

__all__ = [
    "MapModel",
    "ParseError",
    "RouteGraph",
    "RoutePlanner",
    "RouteResult",
    "SearchStatus",
    "NoRouteFound",
    "GraphError",
]
