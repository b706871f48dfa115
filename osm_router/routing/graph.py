"""
Navigable road graph

Wraps a MapModel with the structure the route search needs: one graph node
per map point, an index from each point to the drivable roads touching it,
and closest-node lookup.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from ..config import RouterConfig
from ..map import MapModel, Road, RoadProcessor
from .state import SearchState


class GraphError(RuntimeError):
    """Raised when the graph cannot answer a query (e.g. it has no drivable roads)"""


@dataclass(frozen=True)
class GraphNode:
    """A map point as seen by the route search"""
    index: int
    x: float
    y: float

    def distance(self, other: "GraphNode") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class RouteGraph:
    """
    Road graph derived from a map model

    Usage:
        graph = RouteGraph(MapModel.from_file("map.osm"))
        start = graph.find_closest_node(0.1, 0.1)

    The graph itself holds no search state. ``path`` is the shared result
    slot: the last successful search writes its route there.
    """

    def __init__(self, model: MapModel, config: Optional[RouterConfig] = None):
        self.model = model
        self.config = config or model.config
        self.road_processor = RoadProcessor(self.config)
        self.nodes: List[GraphNode] = [
            GraphNode(index, point.x, point.y) for index, point in enumerate(model.nodes)
        ]
        self.path: List[GraphNode] = []

        self._ways = model.ways
        self._drivable_roads: List[Road] = [
            road for road in model.roads if self.road_processor.is_drivable(road)
        ]
        self._node_to_roads: Dict[int, List[Road]] = {}
        self._create_node_to_road_index()

        # Road members in road-then-way order; repeats are kept so the first
        # occurrence decides ties in find_closest_node
        candidates = [
            node_index
            for road in self._drivable_roads
            for node_index in self._ways[road.way].nodes
        ]
        self._candidate_indices = np.array(candidates, dtype=np.int64)
        self._candidate_xy = np.array(
            [(self.nodes[i].x, self.nodes[i].y) for i in candidates], dtype=np.float64
        ).reshape(-1, 2)

        logger.info(
            f"Built route graph: {len(self.nodes)} nodes, {len(self._drivable_roads)} drivable roads, "
            f"{len(self._node_to_roads)} road nodes"
        )

    @property
    def metric_scale(self) -> float:
        return self.model.metric_scale

    @property
    def drivable_roads(self) -> List[Road]:
        return list(self._drivable_roads)

    def roads_at(self, index: int) -> List[Road]:
        """Drivable roads touching the node (empty if none)"""
        return list(self._node_to_roads.get(index, ()))

    def has_road_node(self, index: int) -> bool:
        return index in self._node_to_roads

    def distance(self, a: GraphNode, b: GraphNode) -> float:
        return a.distance(b)

    def _create_node_to_road_index(self) -> None:
        for road in self._drivable_roads:
            for node_index in self._ways[road.way].nodes:
                roads = self._node_to_roads.setdefault(node_index, [])
                # Closed ways list their first node twice
                if not roads or roads[-1] is not road:
                    roads.append(road)

    def find_closest_node(self, x: float, y: float) -> GraphNode:
        """
        Find the drivable-road node nearest to (x, y)

        Args:
            x: Normalized x coordinate
            y: Normalized y coordinate

        Returns:
            The closest node; ties go to the first node met walking roads in order

        Raises:
            GraphError: If the map has no drivable roads
        """
        if len(self._candidate_indices) == 0:
            raise GraphError("Map has no drivable roads to snap to")

        dx = self._candidate_xy[:, 0] - x
        dy = self._candidate_xy[:, 1] - y
        closest = int(np.argmin(dx * dx + dy * dy))
        return self.nodes[int(self._candidate_indices[closest])]

    def find_neighbors(self, index: int, state: SearchState) -> List[int]:
        """
        Discover a node's neighbours for the current search

        For every drivable road through the node, the neighbour is the road's
        closest point that is not yet visited and not at the node's own
        position. A road without such a point adds nothing. The list is
        computed once per search and cached in ``state``.

        Returns:
            Indices of the neighbour nodes
        """
        node_state = state.get(index)
        if node_state.neighbors is not None:
            return node_state.neighbors

        node = self.nodes[index]
        neighbors: List[int] = []
        for road in self._node_to_roads.get(index, ()):
            neighbor = self._find_neighbor(node, self._ways[road.way].nodes, state)
            if neighbor is not None:
                neighbors.append(neighbor)

        node_state.neighbors = neighbors
        return neighbors

    def _find_neighbor(
        self, node: GraphNode, node_indices: List[int], state: SearchState
    ) -> Optional[int]:
        closest_index: Optional[int] = None
        closest_distance = math.inf
        for candidate_index in node_indices:
            distance = node.distance(self.nodes[candidate_index])
            if distance == 0 or state.is_visited(candidate_index):
                continue
            if distance < closest_distance:
                closest_index = candidate_index
                closest_distance = distance
        return closest_index
