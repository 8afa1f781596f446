"""
End-to-end walkthrough of building, simplifying, storing and reading back a
geometry collection.

Steps, in order:

1. construct the primitive geometries from coordinate arrays,
2. combine a multipoint and a polygon into one collection and extract them
   back by kind,
3. read a subset of a polygon layer and a point layer from shapefiles,
4. simplify the polygons and reproject them to the CRS of the points,
5. merge both layers into one collection,
6. store the collection in PostGIS and read it back.

A database that cannot be reached only skips step 6.
"""

from dataclasses import dataclass, field
from os import PathLike
import logging

from geocollection.core import repository
from geocollection.core.constants import DEFAULT_TABLE_NAME
from geocollection.core.database import connect
from geocollection.core.exceptions import ConnectionUnavailable
from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.builder import build
from geocollection.geometry.extractor import extract
from geocollection.geometry.values import (
    GeometryCollection,
    GeometryValue,
    LineString,
    MultiLineString,
    MultiPoint,
    Point,
    Polygon,
)
from geocollection.parsers.shapefile import read_shapefile
from geocollection.utils import geometries_almost_equal, simplify_geometry, transform_geometry


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 100.0
DEFAULT_POLYGON_ROWS = 5
DEFAULT_POINT_ROWS = 20


@dataclass
class WalkthroughReport:
    primitives: dict[GeometryKind, GeometryValue] = field(default_factory=dict)
    combined: GeometryCollection | None = None
    extracted_points: list[GeometryValue] = field(default_factory=list)
    extracted_polygons: list[GeometryValue] = field(default_factory=list)
    merged: GeometryCollection | None = None
    srid: int | None = None
    stored_id: int | None = None
    read_back: GeometryCollection | None = None
    persistence_skipped: bool = False

    @property
    def verified(self) -> bool | None:
        """``None`` when the round trip was skipped."""
        if self.read_back is None:
            return None
        return geometries_almost_equal(self.merged, self.read_back)


def build_primitives(srid: int | None = None) -> dict[GeometryKind, GeometryValue]:
    return {
        GeometryKind.POINT: Point((5, 2), srid=srid),
        GeometryKind.MULTIPOINT: MultiPoint([(3.2, 4), (3, 4.6), (3.8, 4.4), (3.5, 3.8)], srid=srid),
        GeometryKind.LINESTRING: LineString([(0, 3), (0, 4), (1, 5), (2, 5)], srid=srid),
        GeometryKind.MULTILINESTRING: MultiLineString(
            [
                [(0, 3), (0, 4), (1, 5), (2, 5)],
                [(0.2, 3), (0.2, 4), (1, 4.8), (2, 4.8)],
                [(0, 4.4), (0.6, 5)],
            ],
            srid=srid,
        ),
        GeometryKind.POLYGON: Polygon(
            [
                [(0, 1), (0, 4), (4, 6), (6, 1), (0, 1)],
                [(1, 2), (1, 3), (2, 3), (1, 2)],
            ],
            srid=srid,
        ),
    }

def run_walkthrough(
    polygon_path: str | PathLike,
    point_path: str | PathLike,
    database_url: str | None = None,
    table_name: str = DEFAULT_TABLE_NAME,
    target_srid: int | None = None,
    tolerance: float = DEFAULT_TOLERANCE,
    polygon_rows: int | None = DEFAULT_POLYGON_ROWS,
    point_rows: int | None = DEFAULT_POINT_ROWS,
) -> WalkthroughReport:
    report = WalkthroughReport()

    report.primitives = build_primitives()
    report.combined = build([report.primitives[GeometryKind.MULTIPOINT], report.primitives[GeometryKind.POLYGON]])
    report.extracted_points = extract(report.combined, GeometryKind.POINT)
    report.extracted_polygons = extract(report.combined, GeometryKind.POLYGON)
    logger.info(
        'Combined collection: %d points, %d polygons',
        len(report.extracted_points), len(report.extracted_polygons),
    )

    polygons = read_shapefile(polygon_path, rows=polygon_rows)
    points = read_shapefile(point_path, rows=point_rows)

    report.srid = target_srid or (points[0].srid if points else None)
    if report.srid is None:
        raise ValueError(f'{point_path} declares no CRS and no target_srid was given')

    polygons = [transform_geometry(simplify_geometry(polygon, tolerance), report.srid) for polygon in polygons]
    points = [transform_geometry(point, report.srid) for point in points]
    report.merged = build(polygons + points, srid=report.srid)
    logger.info('Merged %d polygons and %d points in EPSG:%d', len(polygons), len(points), report.srid)

    try:
        with connect(database_url) as connection:
            report.stored_id = repository.write(connection, report.merged, report.srid, table_name)
            report.read_back, _ = repository.read_table(connection, table_name, row_id=report.stored_id)
    except ConnectionUnavailable:
        logger.warning('Skipping the database round trip: connection unavailable')
        report.persistence_skipped = True
        return report

    logger.info('Round trip %s', 'verified' if report.verified else 'FAILED')
    return report
