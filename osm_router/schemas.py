"""
Pydantic models for route output
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .map import MapModel
from .routing import RoutePlanner, RouteResult


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lon, lat], ...]


# ============================================================
# Route Models
# ============================================================

class RouteEndpoint(BaseModel):
    node_id: str  # OSM node id
    location: GeoJSONPoint


class RouteSummary(BaseModel):
    status: str
    distance_m: Optional[float] = None
    node_count: int = 0
    expanded_nodes: int = 0
    start: RouteEndpoint
    end: RouteEndpoint
    path: Optional[GeoJSONLineString] = None
    map_metric_scale: float
    generated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


def _endpoint(model: MapModel, index: int, x: float, y: float) -> RouteEndpoint:
    lon, lat = model.to_lonlat(x, y)
    return RouteEndpoint(
        node_id=model.node_id(index),
        location=GeoJSONPoint(coordinates=[lon, lat]),
    )


def build_route_summary(model: MapModel, planner: RoutePlanner, result: RouteResult) -> RouteSummary:
    """Assemble the JSON-ready summary of a search"""
    path = None
    if result.found:
        path = GeoJSONLineString(
            coordinates=[list(model.to_lonlat(node.x, node.y)) for node in result.path]
        )

    start, end = planner.start_node, planner.end_node
    return RouteSummary(
        status=result.status.value,
        distance_m=result.distance if result.found else None,
        node_count=len(result.path),
        expanded_nodes=result.expanded,
        start=_endpoint(model, start.index, start.x, start.y),
        end=_endpoint(model, end.index, end.x, end.y),
        path=path,
        map_metric_scale=model.metric_scale,
    )
