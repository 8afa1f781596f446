from enum import StrEnum


class GeometryKind(StrEnum):
    POINT = 'Point'
    MULTIPOINT = 'MultiPoint'
    LINESTRING = 'LineString'
    MULTILINESTRING = 'MultiLineString'
    POLYGON = 'Polygon'
    MULTIPOLYGON = 'MultiPolygon'
    GEOMETRYCOLLECTION = 'GeometryCollection'

    @property
    def wkt_name(self) -> str:
        return self.name

    @property
    def is_multi(self) -> bool:
        return self in _MULTI_TO_SINGLE

    @property
    def single(self) -> 'GeometryKind':
        """The single-part kind a multi kind decomposes into (itself otherwise)."""
        return _MULTI_TO_SINGLE.get(self, self)


_MULTI_TO_SINGLE = {
    GeometryKind.MULTIPOINT: GeometryKind.POINT,
    GeometryKind.MULTILINESTRING: GeometryKind.LINESTRING,
    GeometryKind.MULTIPOLYGON: GeometryKind.POLYGON,
}

EXTRACTABLE_KINDS = frozenset(_MULTI_TO_SINGLE.values())
