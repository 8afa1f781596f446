"""
Conversion between geometry values and shapely geometries.

shapely's constructors only build XY and XYZ coordinates, so measured values
(and Z collections holding empty members, whose dimension GEOS would lose)
are handed to ``shapely.from_wkt`` as ISO text instead.
"""

import shapely
from shapely import geometry as sg

from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.enums.geometry_kind import GeometryKind
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


def _iso_sequence(sequence) -> str:
    return '(' + ', '.join(' '.join(repr(value) for value in coordinate) for coordinate in sequence) + ')'

def _iso_body(geometry: GeometryValue, layout: CoordinateLayout) -> str:
    kind = geometry.kind
    if kind == GeometryKind.POINT:
        return _iso_sequence([geometry.coordinates])
    if kind in (GeometryKind.MULTIPOINT, GeometryKind.LINESTRING):
        return _iso_sequence(geometry.coordinates)
    if kind in (GeometryKind.MULTILINESTRING, GeometryKind.POLYGON):
        return '(' + ', '.join(_iso_sequence(part) for part in geometry.coordinates) + ')'
    if kind == GeometryKind.MULTIPOLYGON:
        return '(' + ', '.join(
            '(' + ', '.join(_iso_sequence(ring) for ring in rings) + ')' for rings in geometry.coordinates
        ) + ')'
    return '(' + ', '.join(_iso_text(member, layout) for member in geometry.members) + ')'

def _iso_text(geometry: GeometryValue, inherited: CoordinateLayout | None = None) -> str:
    # empty members take the dimension tag of their collection
    layout = geometry.layout or inherited or CoordinateLayout.XY
    head = f'{geometry.kind.wkt_name} {layout.wkt_suffix}'.rstrip()
    if geometry.is_empty:
        return f'{head} EMPTY'
    return f'{head} {_iso_body(geometry, layout)}'

def _has_empty_member(collection: GeometryCollection) -> bool:
    return any(
        member.is_empty or (member.kind == GeometryKind.GEOMETRYCOLLECTION and _has_empty_member(member))
        for member in collection.members
    )

def _needs_text(geometry: GeometryValue) -> bool:
    layout = geometry.layout
    if layout is None:
        return False
    if layout.has_m:
        return True
    return geometry.kind == GeometryKind.GEOMETRYCOLLECTION and layout.has_z and _has_empty_member(geometry)

def _polygon_parts(rings) -> tuple:
    return rings[0], list(rings[1:])

def to_shapely(geometry: GeometryValue) -> shapely.Geometry:
    """
    Build the shapely geometry of a value, Z and M included.

    Raises ``InconsistentDimensionality`` for a collection mixing layouts.
    """
    if _needs_text(geometry):
        return shapely.from_wkt(_iso_text(geometry))

    kind = geometry.kind
    if kind == GeometryKind.POINT:
        return sg.Point(geometry.coordinates)
    if kind == GeometryKind.MULTIPOINT:
        return sg.MultiPoint(list(geometry.coordinates))
    if kind == GeometryKind.LINESTRING:
        return sg.LineString(geometry.coordinates)
    if kind == GeometryKind.MULTILINESTRING:
        return sg.MultiLineString([list(line) for line in geometry.coordinates])
    if kind == GeometryKind.POLYGON:
        return sg.Polygon(*_polygon_parts(geometry.coordinates))
    if kind == GeometryKind.MULTIPOLYGON:
        return sg.MultiPolygon([_polygon_parts(rings) for rings in geometry.coordinates])
    if kind == GeometryKind.GEOMETRYCOLLECTION:
        return sg.GeometryCollection([to_shapely(member) for member in geometry.members])
    raise NotImplementedError(kind)

def _coordinates(shape: shapely.Geometry) -> list[list[float]]:
    return shapely.get_coordinates(
        shape, include_z=bool(shapely.has_z(shape)), include_m=bool(shapely.has_m(shape)),
    ).tolist()

def _polygon_rings(polygon: sg.Polygon) -> list[list[list[float]]]:
    return [_coordinates(polygon.exterior)] + [_coordinates(interior) for interior in polygon.interiors]

def from_shapely(shape: shapely.Geometry, srid: int | None = None) -> GeometryValue:
    try:
        kind = GeometryKind(shape.geom_type)
    except ValueError:
        raise ValueError(f'Unsupported shapely geometry: {shape.geom_type}') from None
    if shape.is_empty and kind in (GeometryKind.POINT, GeometryKind.LINESTRING, GeometryKind.POLYGON):
        raise ValueError(f'Empty {kind} geometries are not supported')

    measured = bool(shapely.has_m(shape))
    if kind == GeometryKind.POINT:
        return Point(_coordinates(shape)[0], srid=srid, measured=measured)
    if kind == GeometryKind.MULTIPOINT:
        return MultiPoint(_coordinates(shape), srid=srid, measured=measured)
    if kind == GeometryKind.LINESTRING:
        return LineString(_coordinates(shape), srid=srid, measured=measured)
    if kind == GeometryKind.MULTILINESTRING:
        return MultiLineString([_coordinates(line) for line in shape.geoms], srid=srid, measured=measured)
    if kind == GeometryKind.POLYGON:
        return Polygon(_polygon_rings(shape), srid=srid, measured=measured)
    if kind == GeometryKind.MULTIPOLYGON:
        return MultiPolygon([_polygon_rings(polygon) for polygon in shape.geoms], srid=srid, measured=measured)
    if kind == GeometryKind.GEOMETRYCOLLECTION:
        return GeometryCollection(tuple(from_shapely(member, srid) for member in shape.geoms), srid=srid)
    raise NotImplementedError(kind)
