"""
Multipolygon ring assembly

Relations list their boundary as loose way fragments in no particular order,
some of them reversed. Rings are stitched end to end until they close.
"""

from typing import List

from loguru import logger

from .models import Way


def build_rings(ways: List[Way], way_indices: List[int]) -> List[int]:
    """
    Join way fragments into closed rings

    Closed fragments are kept as they are. Open fragments are chained: the
    first unprocessed fragment starts a ring, which is extended by any
    unprocessed fragment whose head or tail matches the ring's tail
    (reversed when the tail matches) until it closes or nothing fits.
    Every closed chain is appended to ``ways`` as a new way. Chains that
    never close are dropped.

    Args:
        ways: The model's way list (new rings are appended to it)
        way_indices: Indices of the fragments making up one side (outer or inner)

    Returns:
        Indices of closed rings
    """
    closed: List[int] = []
    open_ways: List[int] = []
    for way_index in way_indices:
        (closed if ways[way_index].is_closed() else open_ways).append(way_index)

    processed = [False] * len(open_ways)
    while True:
        start = next((i for i, done in enumerate(processed) if not done), None)
        if start is None:
            break

        processed[start] = True
        nodes = list(ways[open_ways[start]].nodes)
        if not nodes:
            continue

        while nodes[0] != nodes[-1]:
            extended = False
            for i, way_index in enumerate(open_ways):
                if processed[i]:
                    continue
                fragment = ways[way_index].nodes
                if not fragment:
                    processed[i] = True
                    continue
                if fragment[0] == nodes[-1]:
                    nodes.extend(fragment[1:])
                elif fragment[-1] == nodes[-1]:
                    nodes.extend(reversed(fragment[:-1]))
                else:
                    continue
                processed[i] = True
                extended = True
                break
            if not extended:
                break

        if len(nodes) > 1 and nodes[0] == nodes[-1]:
            ways.append(Way(nodes=nodes))
            closed.append(len(ways) - 1)
        else:
            logger.debug(f"Discarding unclosed ring starting at way {open_ways[start]}")

    return closed
