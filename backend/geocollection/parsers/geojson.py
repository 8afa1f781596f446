"""
GeoJSON for geometry values.

Values are written with ``shapely.geometry.mapping``. Reading builds the values
directly from the positions, because shapely closes open polygon rings on
construction and an open ring must be reported as ``UnclosedRing``.

GeoJSON positions have no measure, so measured (M) geometries are rejected in
both directions rather than having their M read back as Z.
"""

from typing import Any

from pydantic import BaseModel
from shapely.geometry import mapping as shapely_mapping

from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.shapes import to_shapely
from geocollection.geometry.values import (
    GeometryCollection,
    GeometryValue,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)


def _check_unmeasured(geometry: GeometryValue):
    layout = geometry.layout
    if layout is not None and layout.has_m:
        raise ValueError(f'GeoJSON positions cannot carry measures ({layout.value})')

def mapping(geometry: GeometryValue) -> dict[str, Any]:
    """GeoJSON-like dict of a geometry value."""
    _check_unmeasured(geometry)
    return shapely_mapping(to_shapely(geometry))

def _from_positions(kind: GeometryKind, coordinates, srid: int | None) -> GeometryValue:
    if kind == GeometryKind.POINT:
        return Point(coordinates, srid=srid)
    if kind == GeometryKind.MULTIPOINT:
        return MultiPoint(coordinates, srid=srid)
    if kind == GeometryKind.LINESTRING:
        return LineString(coordinates, srid=srid)
    if kind == GeometryKind.MULTILINESTRING:
        return MultiLineString(coordinates, srid=srid)
    if kind == GeometryKind.POLYGON:
        return Polygon(coordinates, srid=srid)
    if kind == GeometryKind.MULTIPOLYGON:
        return MultiPolygon(coordinates, srid=srid)
    raise NotImplementedError(kind)

def from_geojson(data: BaseModel | dict[str, Any], srid: int | None = None) -> GeometryValue:
    if isinstance(data, BaseModel):
        data = data.model_dump()

    try:
        kind = GeometryKind(data['type'])
    except (KeyError, ValueError):
        raise ValueError(f'Unsupported GeoJSON geometry: {data.get("type")!r}') from None

    if kind == GeometryKind.GEOMETRYCOLLECTION:
        return GeometryCollection(tuple(from_geojson(member, srid) for member in data['geometries']), srid=srid)

    geometry = _from_positions(kind, data['coordinates'], srid)
    _check_unmeasured(geometry)
    return geometry
