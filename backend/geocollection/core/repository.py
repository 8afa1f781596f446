import logging

from geoalchemy2 import WKTElement
from sqlalchemy import Connection, Select, TextClause, func, insert, select, text
from sqlalchemy.exc import SQLAlchemyError

from geocollection.core.constants import DEFAULT_GEOMETRY_COLUMN
from geocollection.core.exceptions import GeometryError, QueryFailure, RowNotFound
from geocollection.core.models import geometry_collection_table, untyped_geometry_table
from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.values import GeometryCollection
from geocollection.parsers import wkt
from geocollection.utils import check_crs, fully_qualified_table_name


logger = logging.getLogger(__name__)

# PostgreSQL error code of a missing relation
UNDEFINED_TABLE = '42P01'


def write(
    connection: Connection,
    collection: GeometryCollection,
    crs: int,
    table_name: str,
    schema: str | None = None,
    geometry_column: str = DEFAULT_GEOMETRY_COLUMN,
    replace: bool = True,
) -> int:
    """
    Store ``collection`` as one row of ``table_name`` and return the row id.

    Every declared srid in the collection must equal ``crs``; members without
    one adopt it. The table is dropped first when ``replace`` is set, then
    created if missing with a geometry column typed with ``crs``.
    """
    if collection.kind != GeometryKind.GEOMETRYCOLLECTION:
        raise TypeError(f'Only geometry collections can be stored, got {collection.kind}')

    # both checks happen before any statement reaches the database
    check_crs(collection, crs)
    layout = collection.layout

    table = geometry_collection_table(table_name, crs, layout, schema=schema, geometry_column=geometry_column)
    element = WKTElement(wkt.dumps(collection), srid=crs)

    try:
        if replace:
            table.drop(connection, checkfirst=True)
        table.create(connection, checkfirst=True)
        result = connection.execute(
            insert(table).values({geometry_column: element}).returning(table.c.id)
        )
        row_id = result.scalar_one()
        connection.commit()
    except SQLAlchemyError as e:
        connection.rollback()
        raise QueryFailure(f'Could not write to {fully_qualified_table_name(table)}: {e}') from e

    logger.info(
        'Stored collection with %d members in %s (id=%d, srid=%d)',
        len(collection), fully_qualified_table_name(table), row_id, crs,
    )
    return row_id

def _fetch_collection(connection: Connection, stmt: Select | TextClause) -> tuple[GeometryCollection, int | None]:
    logger.debug('Reading collection: %s', stmt)
    try:
        row = connection.execute(stmt).first()
    except SQLAlchemyError as e:
        connection.rollback()
        if getattr(getattr(e, 'orig', None), 'sqlstate', None) == UNDEFINED_TABLE:
            raise RowNotFound(f'Table does not exist: {e.orig}') from e
        raise QueryFailure(f'Could not read collection: {e}') from e

    if row is None:
        raise RowNotFound('Query returned no rows')
    if row.wkt is None:
        raise QueryFailure('Query returned a NULL geometry')

    crs = row.srid or None
    try:
        geometry = wkt.loads(row.wkt, srid=crs)
    except GeometryError as e:
        raise QueryFailure(f'Stored geometry could not be decoded: {e}') from e
    if geometry.kind != GeometryKind.GEOMETRYCOLLECTION:
        raise QueryFailure(f'Expected a GeometryCollection, the query returned a {geometry.kind}')

    logger.info('Read collection with %d members (srid=%s)', len(geometry), crs)
    return geometry, crs

def read(
    connection: Connection,
    query: str,
    geometry_column: str = DEFAULT_GEOMETRY_COLUMN,
) -> tuple[GeometryCollection, int | None]:
    """
    Run ``query`` and decode ``geometry_column`` of its first row.

    The query is wrapped as a subquery, so any SELECT returning the column
    works, e.g. ``SELECT geom FROM my_table WHERE id = 3``.
    """
    column = connection.dialect.identifier_preparer.quote(geometry_column)
    stmt = text(
        f'SELECT ST_AsText(q.{column}) AS wkt, ST_SRID(q.{column}) AS srid '
        f'FROM ({query.strip().rstrip(";")}) AS q'
    )
    return _fetch_collection(connection, stmt)

def read_table(
    connection: Connection,
    table_name: str,
    schema: str | None = None,
    geometry_column: str = DEFAULT_GEOMETRY_COLUMN,
    row_id: int | None = None,
) -> tuple[GeometryCollection, int | None]:
    """Read the row ``row_id`` of a table written by ``write``, or its latest row."""
    table = untyped_geometry_table(table_name, schema=schema, geometry_column=geometry_column)
    geometry = table.c[geometry_column]
    stmt = select(
        func.ST_AsText(geometry).label('wkt'),
        func.ST_SRID(geometry).label('srid'),
    )
    if row_id is not None:
        stmt = stmt.where(table.c.id == row_id)
    else:
        stmt = stmt.order_by(table.c.id.desc()).limit(1)
    return _fetch_collection(connection, stmt)
