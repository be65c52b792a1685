from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

Point = tuple[float, float]
Ring = tuple[Point, ...]
Polygon = tuple[Ring, ...]


@dataclass(frozen=True)
class GeoFeature:
    name: str
    polygons: tuple[Polygon, ...]

    def points(self) -> list[Point]:
        return [point for polygon in self.polygons for ring in polygon for point in ring]


def decode_arcs(topology: dict[str, Any]) -> list[list[Point]]:
    """Return absolute (lon, lat) positions for every arc of a topology.

    Quantized topologies store delta-encoded integer positions plus a
    ``transform``; unquantized ones store absolute positions.
    """
    transform = topology.get("transform")
    decoded: list[list[Point]] = []
    for arc in topology.get("arcs", []):
        if transform is None:
            decoded.append([(float(x), float(y)) for x, y, *_ in arc])
            continue
        scale_x, scale_y = transform["scale"]
        translate_x, translate_y = transform["translate"]
        x = y = 0
        points: list[Point] = []
        for dx, dy, *_ in arc:
            x += dx
            y += dy
            points.append((x * scale_x + translate_x, y * scale_y + translate_y))
        decoded.append(points)
    return decoded


def _arc_points(arcs: list[list[Point]], index: int) -> list[Point]:
    if index < 0:
        return list(reversed(arcs[~index]))
    return list(arcs[index])


def _ring(arcs: list[list[Point]], indexes: list[int]) -> Ring:
    points: list[Point] = []
    for index in indexes:
        arc_points = _arc_points(arcs, index)
        # Consecutive arcs share their joining position.
        points.extend(arc_points[1:] if points else arc_points)
    return tuple(points)


def _geometry_polygons(geometry: dict[str, Any], arcs: list[list[Point]]) -> tuple[Polygon, ...]:
    geometry_type = geometry.get("type")
    if geometry_type == "Polygon":
        return (tuple(_ring(arcs, ring) for ring in geometry.get("arcs", [])),)
    if geometry_type == "MultiPolygon":
        return tuple(
            tuple(_ring(arcs, ring) for ring in polygon) for polygon in geometry.get("arcs", [])
        )
    return ()


def topology_features(topology: dict[str, Any], object_name: str) -> list[GeoFeature]:
    objects = topology.get("objects") or {}
    if object_name not in objects:
        raise ValueError(f"Topology has no object named {object_name!r}")
    arcs = decode_arcs(topology)
    features: list[GeoFeature] = []
    for geometry in objects[object_name].get("geometries", []):
        properties = geometry.get("properties") or {}
        features.append(
            GeoFeature(
                name=str(properties.get("name", "")),
                polygons=_geometry_polygons(geometry, arcs),
            )
        )
    return features


def load_geography(path: Path, object_name: str = "countries") -> list[GeoFeature]:
    with path.open("r", encoding="utf-8") as handle:
        topology = json.load(handle)
    if topology.get("type") != "Topology":
        raise ValueError(f"Not a topology file: {path}")
    features = topology_features(topology, object_name)
    LOGGER.info("Loaded %d geography features from %s", len(features), path)
    return features


def filter_region(features: list[GeoFeature], region_name: str) -> list[GeoFeature]:
    return [feature for feature in features if feature.name == region_name]
