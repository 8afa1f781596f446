import pytest

from geocollection.core.exceptions import GeometryError, InconsistentDimensionality, WKTParseError
from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.geometry.builder import build
from geocollection.geometry.values import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from geocollection.parsers import wkt


RING = [(0, 1), (0, 4), (4, 6), (6, 1), (0, 1)]


class TestDumps:

    @pytest.mark.parametrize('geometry, expected', [
        (Point((1, 2)), 'POINT (1 2)'),
        (Point((1.5, 2, 3)), 'POINT Z (1.5 2 3)'),
        (Point((1, 2, 3), measured=True), 'POINT M (1 2 3)'),
        (Point((1, 2, 3, 4)), 'POINT ZM (1 2 3 4)'),
        (MultiPoint([(1, 2), (3, 4)]), 'MULTIPOINT ((1 2), (3 4))'),
        (LineString([(0, 0), (1, 1)]), 'LINESTRING (0 0, 1 1)'),
        (MultiLineString([[(0, 0), (1, 1)], [(2, 2), (3, 3)]]), 'MULTILINESTRING ((0 0, 1 1), (2 2, 3 3))'),
        (Polygon([RING]), 'POLYGON ((0 1, 0 4, 4 6, 6 1, 0 1))'),
        (MultiPolygon([[RING]]), 'MULTIPOLYGON (((0 1, 0 4, 4 6, 6 1, 0 1)))'),
        (MultiLineString([]), 'MULTILINESTRING EMPTY'),
        (GeometryCollection(), 'GEOMETRYCOLLECTION EMPTY'),
    ])
    def test_iso_text(self, geometry, expected):
        assert wkt.dumps(geometry) == expected

    def test_collection(self):
        collection = build([Point((1, 2)), LineString([(0, 0), (1, 1)])])

        assert wkt.dumps(collection) == 'GEOMETRYCOLLECTION (POINT (1 2), LINESTRING (0 0, 1 1))'

    def test_empty_member_takes_collection_dimension(self):
        collection = build([Point((1, 2, 3)), MultiLineString([])])

        text = wkt.dumps(collection)

        assert text.startswith('GEOMETRYCOLLECTION Z (POINT Z (1 2 3), MULTILINESTRING')
        assert wkt.loads(text) == collection

    def test_mixed_dimensions(self):
        with pytest.raises(InconsistentDimensionality):
            wkt.dumps(build([Point((1, 2)), Point((1, 2, 3))]))

    def test_measured(self):
        collection = build([Point((1, 2, 3), measured=True), LineString([(0, 0, 1), (1, 1, 2)], measured=True)])

        assert wkt.dumps(collection) == 'GEOMETRYCOLLECTION M (POINT M (1 2 3), LINESTRING M (0 0 1, 1 1 2))'

    def test_full_precision(self):
        point = Point((0.1, 123456.789012345))

        assert wkt.loads(wkt.dumps(point)) == point


class TestLoads:

    def test_postgis_output(self):
        """Test reading the compact text ST_AsText produces"""
        geometry = wkt.loads('GEOMETRYCOLLECTION(MULTIPOINT((3.2 4),(3 4.6)),POLYGON((0 1,0 4,4 6,6 1,0 1)))', srid=4326)

        assert geometry == build([
            MultiPoint([(3.2, 4), (3, 4.6)], srid=4326),
            Polygon([RING], srid=4326),
        ])

    def test_srid_prefix(self):
        point = wkt.loads('SRID=3857;POINT(1 2)', srid=4326)

        assert point == Point((1, 2), srid=3857)

    def test_dimension_tags(self):
        assert wkt.loads('POINT M (1 2 3)').layout == CoordinateLayout.XYM
        assert wkt.loads('POINT Z (1 2 3)').layout == CoordinateLayout.XYZ
        assert wkt.loads('POINT(1 2 3)').layout == CoordinateLayout.XYZ
        assert wkt.loads('POINT ZM (1 2 3 4)').layout == CoordinateLayout.XYZM

    def test_measured_collection_members(self):
        collection = wkt.loads('GEOMETRYCOLLECTION M (POINT M (1 2 3), LINESTRING M (0 0 1, 1 1 2))')

        assert all(member.layout == CoordinateLayout.XYM for member in collection)

    def test_multipoint_without_parentheses(self):
        assert wkt.loads('MULTIPOINT (1 2, 3 4)') == MultiPoint([(1, 2), (3, 4)])

    def test_numbers(self):
        point = wkt.loads('POINT (-1.5e3 0.25)')

        assert point.coordinates == (-1500.0, 0.25)

    def test_empty_members(self):
        collection = wkt.loads('GEOMETRYCOLLECTION Z (POINT Z (1 2 3), MULTILINESTRING Z EMPTY)')

        assert collection == build([Point((1, 2, 3)), MultiLineString([])])

    def test_nested_collection_round_trip(self):
        collection = build([
            Point((1, 2), srid=4326),
            build([LineString([(0.1, 0.2), (1.25, 1e-7)], srid=4326), MultiPoint([], srid=4326)]),
            Polygon([RING, [(1, 2), (1, 3), (2, 3), (1, 2)]], srid=4326),
        ])

        assert wkt.loads(wkt.dumps(collection), srid=4326) == collection

    def test_unclosed_ring(self):
        with pytest.raises(GeometryError):
            wkt.loads('POLYGON ((0 1, 0 4, 4 6, 6 1))')

    def test_measured_round_trip(self):
        collection = build([
            Point((1, 2, 3), srid=31370, measured=True),
            Polygon([[(0, 0, 1), (0, 1, 2), (1, 1, 3), (0, 0, 1)]], srid=31370, measured=True),
        ])

        read_back = wkt.loads(wkt.dumps(collection), srid=31370)

        assert read_back == collection
        assert all(member.layout == CoordinateLayout.XYM for member in read_back)

    @pytest.mark.parametrize('text', [
        'POINT (1 2',
        'CIRCLE (1 2)',
        'POINT (1 2) POINT (3 4)',
        'POINT (1 a)',
        'POINT EMPTY',
        'SRID=x;POINT (1 2)',
    ])
    def test_invalid_text(self, text):
        with pytest.raises(WKTParseError):
            wkt.loads(text)
