"""
A* route planner

Finds the shortest drivable route between two points of a RouteGraph.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from loguru import logger

from ..config import RouterConfig
from .graph import GraphNode, RouteGraph
from .state import SearchState


class NoRouteFound(RuntimeError):
    """Raised when a route is requested after a search that exhausted its frontier"""


class SearchStatus(str, Enum):
    READY = "ready"
    SEARCHING = "searching"
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass
class RouteResult:
    """Outcome of one A* search"""
    status: SearchStatus
    path: List[GraphNode] = field(default_factory=list)
    distance: float = 0.0  # meters
    expanded: int = 0  # nodes taken off the frontier

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


class RoutePlanner:
    """
    Shortest route between two points using A*

    Start and end are given as percentages (0-100) of the map's bounding box
    and snapped to the closest drivable-road node.

    Usage:
        planner = RoutePlanner(graph, 10, 10, 90, 90)
        result = planner.a_star_search()
        if result.found:
            print(planner.get_distance())
    """

    def __init__(
        self,
        graph: RouteGraph,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
        config: Optional[RouterConfig] = None,
    ):
        self.graph = graph
        self.config = config or graph.config

        for name, value in (("start_x", start_x), ("start_y", start_y), ("end_x", end_x), ("end_y", end_y)):
            self._check_percent(name, value)

        # Convert inputs from percent to normalized map units
        scale = self.config.routing.percent_scale
        self.start_node = graph.find_closest_node(start_x * scale, start_y * scale)
        self.end_node = graph.find_closest_node(end_x * scale, end_y * scale)

        self.status = SearchStatus.READY
        self._state = SearchState()
        self._open_list: List[GraphNode] = []
        self._result: Optional[RouteResult] = None

    def _check_percent(self, name: str, value: float) -> None:
        routing = self.config.routing
        if not routing.min_coordinate_percent <= value <= routing.max_coordinate_percent:
            raise ValueError(
                f"{name} must be between {routing.min_coordinate_percent} and "
                f"{routing.max_coordinate_percent}, got {value}"
            )

    def get_distance(self) -> float:
        """
        Length in meters of the route found by the last search

        Raises:
            RuntimeError: If no search has been run yet
            NoRouteFound: If the last search found no route
        """
        if self._result is None:
            raise RuntimeError("a_star_search() has not been run")
        if not self._result.found:
            raise NoRouteFound(
                f"No route between node {self.start_node.index} and node {self.end_node.index}"
            )
        return self._result.distance

    def calculate_h_value(self, node: GraphNode) -> float:
        """Straight-line distance to the end node"""
        return node.distance(self.end_node)

    def add_neighbors(self, current_node: GraphNode) -> None:
        """Discover the current node's neighbours and push them onto the frontier"""
        state = self._state
        current = state.get(current_node.index)
        for neighbor_index in self.graph.find_neighbors(current_node.index, state):
            neighbor_node = self.graph.nodes[neighbor_index]
            neighbor = state.get(neighbor_index)
            neighbor.parent = current_node.index
            neighbor.h = self.calculate_h_value(neighbor_node)
            neighbor.g = current.g + current_node.distance(neighbor_node)
            neighbor.visited = True
            self._open_list.append(neighbor_node)

    def next_node(self) -> GraphNode:
        """Pop the frontier node with the lowest g + h (stable for ties)"""
        state = self._state
        self._open_list.sort(key=lambda node: state.get(node.index).f)
        return self._open_list.pop(0)

    def construct_final_path(self, current_node: GraphNode) -> RouteResult:
        """
        Walk parent links back from the end node

        Returns:
            RouteResult with the start-to-end node list and the length in meters
        """
        distance = 0.0
        path_found: List[GraphNode] = []
        while current_node.index != self.start_node.index:
            path_found.append(current_node)
            parent = self.graph.nodes[self._state.get(current_node.index).parent]
            distance += current_node.distance(parent)
            current_node = parent

        path_found.append(self.start_node)
        path_found.reverse()

        # Scale normalized map units to meters
        distance *= self.graph.metric_scale
        return RouteResult(status=SearchStatus.FOUND, path=path_found, distance=distance)

    def a_star_search(self) -> RouteResult:
        """
        Run A* from the start node to the end node

        Each call starts from a fresh search state. On success the path is
        also written to ``graph.path``.

        Returns:
            RouteResult with status FOUND, or EXHAUSTED when no route exists
        """
        self._state = SearchState()
        self._open_list = []
        self.status = SearchStatus.SEARCHING
        expanded = 0

        start = self._state.get(self.start_node.index)
        start.visited = True
        start.g = 0.0
        start.h = self.calculate_h_value(self.start_node)
        self._open_list.append(self.start_node)

        while self._open_list:
            current_node = self.next_node()
            expanded += 1

            if current_node.index == self.end_node.index:
                result = self.construct_final_path(current_node)
                result.expanded = expanded
                self.graph.path = list(result.path)
                self.status = SearchStatus.FOUND
                self._result = result
                logger.info(
                    f"Route found: {len(result.path)} nodes, {result.distance:.1f} m "
                    f"({expanded} nodes expanded)"
                )
                return result

            self.add_neighbors(current_node)

        self.status = SearchStatus.EXHAUSTED
        self._result = RouteResult(status=SearchStatus.EXHAUSTED, expanded=expanded)
        logger.warning(
            f"No route between node {self.start_node.index} and node {self.end_node.index} "
            f"({expanded} nodes expanded)"
        )
        return self._result
