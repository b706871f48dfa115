"""
Route search module

Components:
- Graph: Graph nodes, node-to-road index, closest-node lookup, neighbour discovery
- State: Per-search A* bookkeeping
- Planner: A* search and path reconstruction
"""

from .graph import GraphError, GraphNode, RouteGraph
from .state import NodeState, SearchState
from .planner import NoRouteFound, RoutePlanner, RouteResult, SearchStatus

__all__ = [
    "GraphError",
    "GraphNode",
    "RouteGraph",
    "NodeState",
    "SearchState",
    "NoRouteFound",
    "RoutePlanner",
    "RouteResult",
    "SearchStatus",
]
