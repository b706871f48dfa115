"""
Per-search node state

A* bookkeeping (cost so far, heuristic, visited flag, parent link and the
discovered neighbour list) lives here instead of on the graph nodes, so the
graph stays read-only and every search starts from a clean table.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class NodeState:
    g: float = 0.0
    h: float = math.inf
    visited: bool = False
    parent: Optional[int] = None
    neighbors: Optional[List[int]] = None  # None until discovered

    @property
    def f(self) -> float:
        return self.g + self.h


class SearchState:
    """Lazily allocated table of NodeState keyed by node index"""

    def __init__(self):
        self._states: Dict[int, NodeState] = {}

    def get(self, index: int) -> NodeState:
        state = self._states.get(index)
        if state is None:
            state = NodeState()
            self._states[index] = state
        return state

    def is_visited(self, index: int) -> bool:
        state = self._states.get(index)
        return state is not None and state.visited

    def __len__(self) -> int:
        return len(self._states)
