import geopandas as gpd
import pytest
from shapely.geometry import Point as ShapelyPoint, box

from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.values import Point
from geocollection.parsers.shapefile import read_shapefile


@pytest.fixture
def point_layer(tmp_path):
    """Point shapefile in WGS84"""
    frame = gpd.GeoDataFrame(
        {
            'name': ['a', 'b', 'c'],
            'geometry': [ShapelyPoint(0, 0), ShapelyPoint(1, 1), ShapelyPoint(2, 2)],
        },
        crs='EPSG:4326',
    )
    path = tmp_path / 'points.shp'
    frame.to_file(path)
    return path


@pytest.fixture
def polygon_layer(tmp_path):
    """Polygon shapefile in Web Mercator"""
    frame = gpd.GeoDataFrame(
        {
            'zone': [1, 2],
            'geometry': [box(0, 0, 1000, 1000), box(2000, 0, 3000, 1000)],
        },
        crs='EPSG:3857',
    )
    path = tmp_path / 'polygons.shp'
    frame.to_file(path)
    return path


class TestReadShapefile:

    def test_reads_all_features(self, point_layer):
        points = read_shapefile(point_layer)

        assert points == [
            Point((0, 0), srid=4326),
            Point((1, 1), srid=4326),
            Point((2, 2), srid=4326),
        ]

    def test_filters(self, point_layer):
        assert read_shapefile(point_layer, filters={'name': 'b'}) == [Point((1, 1), srid=4326)]

    def test_rows(self, point_layer):
        assert len(read_shapefile(point_layer, rows=2)) == 2

    def test_unknown_attribute(self, point_layer):
        with pytest.raises(ValueError, match='unknown attribute'):
            read_shapefile(point_layer, filters={'missing': 1})

    def test_polygons(self, polygon_layer):
        polygons = read_shapefile(polygon_layer)

        assert [polygon.kind for polygon in polygons] == [GeometryKind.POLYGON, GeometryKind.POLYGON]
        assert all(polygon.srid == 3857 for polygon in polygons)
        assert len(polygons[0].exterior) == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(Exception):
            read_shapefile(tmp_path / 'missing.shp')
