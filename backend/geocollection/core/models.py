from geocollection.core.constants import DEFAULT_GEOMETRY_COLUMN
from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.enums.geometry_kind import GeometryKind
from sqlalchemy import Column, Integer, MetaData, Table
from geoalchemy2 import Geometry


def geometry_collection_type(srid: int, layout: CoordinateLayout | None) -> Geometry:
    suffix = layout.wkt_suffix if layout is not None else ''
    return Geometry(
        geometry_type=f'{GeometryKind.GEOMETRYCOLLECTION.wkt_name}{suffix}',
        srid=srid,
        spatial_index=False,
    )

def geometry_collection_table(
    table_name: str,
    srid: int,
    layout: CoordinateLayout | None,
    schema: str | None = None,
    geometry_column: str = DEFAULT_GEOMETRY_COLUMN,
) -> Table:
    """Table holding one geometry collection per row, typed with the collection CRS and dimensions."""
    return Table(
        table_name,
        MetaData(),
        Column('id', Integer, primary_key=True, autoincrement=True),
        Column(geometry_column, geometry_collection_type(srid, layout)),
        schema=schema,
    )

def untyped_geometry_table(table_name: str, schema: str | None = None, geometry_column: str = DEFAULT_GEOMETRY_COLUMN) -> Table:
    # only used to build SELECT statements against an existing table
    return Table(
        table_name,
        MetaData(),
        Column('id', Integer, primary_key=True),
        Column(geometry_column, Geometry()),
        schema=schema,
    )
