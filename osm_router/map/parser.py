"""
OSM XML parser

Parses raw OpenStreetMap XML into OSMNode, OSMWay and OSMRelation objects
"""

import xml.etree.ElementTree as ET
from typing import List, Tuple

from loguru import logger

from .models import OSMBounds, OSMDocument, OSMMember, OSMNode, OSMRelation, OSMWay


class ParseError(ValueError):
    """Raised when map data is malformed or structurally incomplete"""


class OSMXmlParser:
    """Parses OSM XML documents"""

    @staticmethod
    def parse(data: bytes) -> OSMDocument:
        """
        Parse an OSM XML document

        Args:
            data: Raw XML bytes

        Returns:
            OSMDocument with bounds, nodes, ways and relations in document order

        Raises:
            ParseError: If the XML is malformed or a required element/attribute is missing
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise ParseError(f"Malformed map XML: {e}") from e

        if root.tag != "osm":
            raise ParseError(f"Expected <osm> root element, got <{root.tag}>")

        bounds = OSMXmlParser._parse_bounds(root)
        nodes = [OSMXmlParser._parse_node(n) for n in root.iter("node")]
        ways = [OSMXmlParser._parse_way(w) for w in root.iter("way")]
        relations = [OSMXmlParser._parse_relation(r) for r in root.iter("relation")]

        logger.debug(
            f"Parsed OSM XML: {len(nodes)} nodes, {len(ways)} ways, {len(relations)} relations"
        )
        return OSMDocument(bounds=bounds, nodes=nodes, ways=ways, relations=relations)

    @staticmethod
    def _parse_bounds(root: ET.Element) -> OSMBounds:
        element = root.find("bounds")
        if element is None:
            raise ParseError("Map bounds are not defined")
        return OSMBounds(
            min_lat=_float_attr(element, "minlat"),
            min_lon=_float_attr(element, "minlon"),
            max_lat=_float_attr(element, "maxlat"),
            max_lon=_float_attr(element, "maxlon"),
        )

    @staticmethod
    def _parse_node(element: ET.Element) -> OSMNode:
        return OSMNode(
            id=_required_attr(element, "id"),
            lat=_float_attr(element, "lat"),
            lon=_float_attr(element, "lon"),
        )

    @staticmethod
    def _parse_way(element: ET.Element) -> OSMWay:
        return OSMWay(
            id=_required_attr(element, "id"),
            node_refs=[_required_attr(nd, "ref") for nd in element.findall("nd")],
            tags=_parse_tags(element),
        )

    @staticmethod
    def _parse_relation(element: ET.Element) -> OSMRelation:
        members = [
            OSMMember(
                type=member.get("type", ""),
                ref=_required_attr(member, "ref"),
                role=member.get("role", ""),
            )
            for member in element.findall("member")
        ]
        return OSMRelation(
            id=_required_attr(element, "id"),
            members=members,
            tags=_parse_tags(element),
        )


def _parse_tags(element: ET.Element) -> List[Tuple[str, str]]:
    return [(tag.get("k", ""), tag.get("v", "")) for tag in element.findall("tag")]


def _required_attr(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise ParseError(f"<{element.tag}> element is missing the '{name}' attribute")
    return value


def _float_attr(element: ET.Element, name: str) -> float:
    value = _required_attr(element, name)
    try:
        return float(value)
    except ValueError as e:
        raise ParseError(f"<{element.tag}> has a non-numeric '{name}': {value!r}") from e
