"""
Tests for the route summary schema and the command-line interface
"""

import argparse
import json
import sys

import pytest

import cli
from osm_router.config import get_config
from osm_router.map import MapModel
from osm_router.routing import RouteGraph, RoutePlanner
from osm_router.schemas import RouteSummary, build_route_summary


def test_summary_for_found_route(grid_model):
    graph = RouteGraph(grid_model)
    planner = RoutePlanner(graph, 0, 0, 100, 100)
    result = planner.a_star_search()

    summary = build_route_summary(grid_model, planner, result)

    assert summary.status == "found"
    assert summary.distance_m == pytest.approx(result.distance)
    assert summary.node_count == len(result.path)
    assert len(summary.path.coordinates) == len(result.path)
    assert summary.start.node_id == "00"
    assert summary.end.node_id == "22"
    lon, lat = summary.end.location.coordinates
    assert lon == pytest.approx(0.01, abs=1e-9)
    assert lat == pytest.approx(0.01, abs=1e-9)


def test_summary_for_missing_route(disconnected_xml):
    model = MapModel(disconnected_xml)
    planner = RoutePlanner(RouteGraph(model), 10, 10, 90, 90)
    result = planner.a_star_search()

    summary = build_route_summary(model, planner, result)

    assert summary.status == "exhausted"
    assert summary.distance_m is None
    assert summary.path is None
    assert RouteSummary.model_validate(summary.model_dump()) == summary


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["cli.py", *argv])
    return cli.main()


def test_route_command_writes_summary(monkeypatch, tmp_path, grid_xml, capsys):
    map_path = tmp_path / "grid.osm"
    map_path.write_bytes(grid_xml)
    output = tmp_path / "out" / "route.json"

    code = _run(
        monkeypatch, "route", "--map", str(map_path),
        "--start", "0", "0", "--end", "100", "100", "--output", str(output), "--summary",
    )

    assert code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["status"] == "found"
    assert data["path"]["type"] == "LineString"
    printed = json.loads(capsys.readouterr().out)
    assert printed["start"] == "00"


def test_route_command_without_route_exits_2(monkeypatch, tmp_path, disconnected_xml):
    map_path = tmp_path / "islands.osm"
    map_path.write_bytes(disconnected_xml)

    assert _run(monkeypatch, "route", "--map", str(map_path), "--start", "10", "10", "--end", "90", "90") == 2


def test_route_command_with_missing_map_exits_1(monkeypatch, tmp_path):
    missing = tmp_path / "missing.osm"

    assert _run(monkeypatch, "route", "--map", str(missing), "--start", "1", "1", "--end", "2", "2") == 1


def test_route_command_rejects_out_of_range_points(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        _run(monkeypatch, "route", "--map", "x.osm", "--start", "150", "1", "--end", "2", "2")


def test_batch_command_routes_every_row(monkeypatch, tmp_path, two_clusters):
    map_path = tmp_path / "clusters.osm"
    map_path.write_bytes(two_clusters([("highway", "residential")]))
    queries = tmp_path / "queries.csv"
    queries.write_text(
        "name,start_x,start_y,end_x,end_y\n"
        "Across Town,10,10,90,90\n"
        "bad,10,10,500,90\n"
        ",30,30,10,10\n",
        encoding="utf-8",
    )
    output_dir = tmp_path / "routes"

    code = _run(
        monkeypatch, "batch", "--map", str(map_path),
        "--input", str(queries), "--output", str(output_dir),
    )

    assert code == 0
    assert sorted(p.name for p in output_dir.iterdir()) == ["across_town.json", "route_002.json"]


def test_info_command_prints_counts(monkeypatch, tmp_path, grid_xml, capsys):
    map_path = tmp_path / "grid.osm"
    map_path.write_bytes(grid_xml)

    assert _run(monkeypatch, "info", "--map", str(map_path)) == 0

    info = json.loads(capsys.readouterr().out)
    assert info["roads"] == 7
    assert info["buildings"] == 1
    assert info["railways"] == 1


def test_batch_names_stay_inside_output_and_do_not_collide(monkeypatch, tmp_path, two_clusters):
    map_path = tmp_path / "clusters.osm"
    map_path.write_bytes(two_clusters([("highway", "residential")]))
    queries = tmp_path / "queries.csv"
    queries.write_text(
        "name,start_x,start_y,end_x,end_y\n"
        "Depot,10,10,90,90\n"
        "depot,90,90,10,10\n"
        "north/south,10,10,30,30\n"
        "../escape,30,30,10,10\n",
        encoding="utf-8",
    )
    output_dir = tmp_path / "routes"

    code = _run(
        monkeypatch, "batch", "--map", str(map_path),
        "--input", str(queries), "--output", str(output_dir),
    )

    assert code == 0
    written = sorted(p.name for p in output_dir.iterdir())
    assert written == ["depot.json", "depot_002.json", "escape.json", "north_south.json"]
    assert all(p.is_file() for p in output_dir.iterdir())
    assert sorted(p.name for p in tmp_path.iterdir()) == ["clusters.osm", "queries.csv", "routes"]


@pytest.mark.parametrize("name, index, expected", [
    ("Across Town", 1, "across_town.json"),
    ("", 7, "route_007.json"),
    ("..", 3, "route_003.json"),
    ("a\\b:c", 2, "a_b_c.json"),
])
def test_summary_filename(name, index, expected):
    assert cli.summary_filename(name, index, set()) == expected


def test_percent_follows_configured_range(monkeypatch):
    monkeypatch.setattr(get_config().routing, "max_coordinate_percent", 50.0)

    assert cli.percent("50") == 50.0
    with pytest.raises(argparse.ArgumentTypeError):
        cli.percent("75")
