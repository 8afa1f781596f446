import pytest

from geocollection.core.constants import WEB_MERCATOR_SRID, WGS_84_SRID
from geocollection.core.exceptions import CrsMismatch
from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.geometry.builder import build
from geocollection.geometry.values import LineString, MultiLineString, Point, Polygon
from geocollection.utils import check_crs, crs_of, geometries_almost_equal, transform_geometry


RING = [(0, 1), (0, 4), (4, 6), (6, 1), (0, 1)]


class TestTransform:

    def test_web_mercator(self):
        """Test a known reprojection: the antimeridian on the equator"""
        point = transform_geometry(Point((180, 0), srid=WGS_84_SRID), WEB_MERCATOR_SRID)

        assert point.srid == WEB_MERCATOR_SRID
        assert point.x == pytest.approx(20037508.342789244)
        assert point.y == pytest.approx(0, abs=1e-6)

    def test_round_trip(self):
        polygon = Polygon([RING], srid=WGS_84_SRID)

        projected = transform_geometry(polygon, WEB_MERCATOR_SRID)
        back = transform_geometry(projected, WGS_84_SRID)

        assert projected.kind == polygon.kind
        assert geometries_almost_equal(back, polygon, tolerance=1e-7)

    def test_measure_is_carried(self):
        point = Point((0, 0, 7), srid=WGS_84_SRID, measured=True)

        projected = transform_geometry(point, WEB_MERCATOR_SRID)

        assert projected.layout == CoordinateLayout.XYM
        assert projected.coordinates[2] == pytest.approx(7)

    def test_collection_members_are_tagged(self):
        collection = build([Point((1, 2)), MultiLineString([[(0, 0), (1, 1)]])], srid=WGS_84_SRID)

        projected = transform_geometry(collection, WEB_MERCATOR_SRID)

        assert projected.srid == WEB_MERCATOR_SRID
        assert all(member.srid == WEB_MERCATOR_SRID for member in projected)

    def test_same_crs(self):
        line = LineString([(0, 0), (1, 1)], srid=WGS_84_SRID)

        assert transform_geometry(line, WGS_84_SRID) == line

    def test_undeclared_crs(self):
        with pytest.raises(CrsMismatch):
            transform_geometry(Point((1, 2)), WEB_MERCATOR_SRID)

    def test_explicit_source(self):
        point = transform_geometry(Point((180, 0)), WEB_MERCATOR_SRID, source_srid=WGS_84_SRID)

        assert point.x == pytest.approx(20037508.342789244)

    def test_member_in_other_crs(self):
        collection = build([Point((1, 2), srid=WGS_84_SRID), Point((1, 2), srid=WEB_MERCATOR_SRID)], srid=WGS_84_SRID)

        with pytest.raises(CrsMismatch):
            transform_geometry(collection, 31370)


class TestCheckCrs:

    def test_crs_of(self):
        assert crs_of(Point((1, 2), srid=31370)) == 31370
        assert crs_of(Point((1, 2))) is None

    def test_matching(self):
        check_crs(build([Point((1, 2), srid=4326), Point((3, 4))]), 4326)

    def test_nested_mismatch(self):
        collection = build([Point((1, 2), srid=4326), build([Point((3, 4), srid=3857)])])

        with pytest.raises(CrsMismatch, match='Member 1'):
            check_crs(collection, 4326)
