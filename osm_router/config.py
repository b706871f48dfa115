"""
Configuration settings for OSM Router
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import os

from dotenv import load_dotenv
from loguru import logger


@dataclass
class MapConfig:
    """OSM tag tables and projection settings used while loading a map"""
    # Spherical Web Mercator radius (meters)
    earth_radius_m: float = 6378137.0

    # highway=<value> -> road type name (values not listed are ignored)
    highway_types: Dict[str, str] = field(default_factory=lambda: {
        "motorway": "motorway",
        "trunk": "trunk",
        "primary": "primary",
        "secondary": "secondary",
        "tertiary": "tertiary",
        "residential": "residential",
        "living_street": "residential",
        "service": "service",
        "unclassified": "unclassified",
        "footway": "footway",
        "bridleway": "footway",
        "steps": "footway",
        "path": "footway",
        "pedestrian": "footway",
    })

    # landuse=<value> values that produce a landuse area
    landuse_types: List[str] = field(default_factory=lambda: [
        "commercial",
        "construction",
        "grass",
        "forest",
        "industrial",
        "railway",
        "residential",
    ])

    # natural=<value> values drawn as leisure areas
    leisure_natural_types: List[str] = field(default_factory=lambda: [
        "wood",
        "tree_row",
        "scrub",
        "grassland",
    ])


@dataclass
class RoutingConfig:
    """Route search settings"""
    # Start/end inputs are percentages of the map bounding box
    min_coordinate_percent: float = 0.0
    max_coordinate_percent: float = 100.0
    percent_scale: float = 0.01

    # Road types excluded from the drivable graph
    excluded_road_types: List[str] = field(default_factory=lambda: ["footway"])


@dataclass
class RouterConfig:
    """Top-level configuration"""
    # Map file used when none is given on the command line
    map_file: str = "map.osm"

    # Output settings
    output_dir: str = "output"

    map: MapConfig = field(default_factory=MapConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)


# Global config instance
config = RouterConfig()


def get_config() -> RouterConfig:
    """Get global configuration"""
    return config


def load_env_overrides(config: RouterConfig, env_path: Optional[str] = None) -> RouterConfig:
    """
    Apply overrides from environment variables (and a .env file if present).

    Recognised variables:
        OSM_ROUTER_MAP_FILE: default map file
        OSM_ROUTER_OUTPUT_DIR: default output directory
    """
    if env_path:
        load_dotenv(env_path, override=False)  # Don't override existing env vars
    else:
        load_dotenv()

    map_file = os.getenv("OSM_ROUTER_MAP_FILE")
    if map_file:
        logger.debug(f"Map file overridden from environment: {map_file}")
        config.map_file = map_file

    output_dir = os.getenv("OSM_ROUTER_OUTPUT_DIR")
    if output_dir:
        config.output_dir = output_dir

    return config


def validate_config(config: RouterConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not config.map_file:
        errors.append("map_file is required in config but not set")

    if config.map is None:
        errors.append("map configuration is required but not set")
    else:
        if config.map.earth_radius_m <= 0:
            errors.append(f"map.earth_radius_m must be positive, got {config.map.earth_radius_m}")
        if not config.map.highway_types:
            errors.append("map.highway_types must not be empty")

    if config.routing is None:
        errors.append("routing configuration is required but not set")
    else:
        routing = config.routing
        if routing.percent_scale <= 0:
            errors.append(f"routing.percent_scale must be positive, got {routing.percent_scale}")
        if routing.min_coordinate_percent >= routing.max_coordinate_percent:
            errors.append(
                "routing.min_coordinate_percent must be below routing.max_coordinate_percent, "
                f"got {routing.min_coordinate_percent} and {routing.max_coordinate_percent}"
            )

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
