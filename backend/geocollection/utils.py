from functools import lru_cache
import logging
import math
import numpy as np
from pyproj import Transformer
from sqlalchemy import Table

from geocollection.core.constants import STORAGE_PRECISION
from geocollection.core.exceptions import CrsMismatch
from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.shapes import from_shapely, to_shapely
from geocollection.geometry.values import CoordinateSequence, GeometryCollection, GeometryValue


logger = logging.getLogger(__name__)


def crs_of(geometry: GeometryValue) -> int | None:
    return geometry.srid

def check_crs(geometry: GeometryValue, srid: int):
    """Raise ``CrsMismatch`` if any declared srid in ``geometry`` differs from ``srid``."""
    if geometry.srid is not None and geometry.srid != srid:
        raise CrsMismatch(f'{geometry.kind} is in EPSG:{geometry.srid}, expected EPSG:{srid}')
    if geometry.kind == GeometryKind.GEOMETRYCOLLECTION:
        for index, member in enumerate(geometry.members):
            try:
                check_crs(member, srid)
            except CrsMismatch as e:
                raise CrsMismatch(f'Member {index}: {e}') from None

@lru_cache(maxsize=32)
def _get_transformer(source_srid: int, dest_srid: int) -> Transformer:
    return Transformer.from_crs(source_srid, dest_srid, always_xy=True)

def _transform_sequence(transformer: Transformer, sequence: CoordinateSequence, layout: CoordinateLayout) -> list:
    array = np.asarray(sequence, dtype=float)
    if layout.has_z:
        columns = list(transformer.transform(array[:, 0], array[:, 1], array[:, 2]))
    else:
        columns = list(transformer.transform(array[:, 0], array[:, 1]))
    if layout.has_m:
        columns.append(array[:, -1])
    return np.column_stack(columns).tolist()

def transform_geometry(geometry: GeometryValue, dest_srid: int, source_srid: int | None = None) -> GeometryValue:
    source_srid = source_srid if source_srid is not None else geometry.srid
    if source_srid is None:
        raise CrsMismatch(f'Cannot reproject a {geometry.kind} without a declared CRS')
    check_crs(geometry, source_srid)
    if source_srid == dest_srid:
        return geometry.map_sequences(lambda sequence, layout: sequence, dest_srid)
    transformer = _get_transformer(source_srid, dest_srid)
    return geometry.map_sequences(lambda sequence, layout: _transform_sequence(transformer, sequence, layout), dest_srid)

def simplify_geometry(geometry: GeometryValue, tolerance: float, preserve_topology: bool = True) -> GeometryValue:
    """
    Simplify ``geometry`` with shapely (Douglas-Peucker).

    The result keeps the kind and srid of the input. A geometry that the
    tolerance would collapse (empty, or of another kind) is returned unchanged.
    """
    if tolerance < 0:
        raise ValueError(f'Tolerance must be non-negative, got {tolerance}')
    if tolerance == 0:
        return geometry
    if geometry.kind == GeometryKind.GEOMETRYCOLLECTION:
        return GeometryCollection(
            tuple(simplify_geometry(member, tolerance, preserve_topology) for member in geometry.members),
            srid=geometry.srid,
        )
    if geometry.layout is not None and geometry.layout.has_m:
        raise ValueError(f'Measured geometries cannot be simplified ({geometry.layout.value})')

    simplified = to_shapely(geometry).simplify(tolerance, preserve_topology=preserve_topology)
    if simplified.is_empty != geometry.is_empty or simplified.geom_type != geometry.kind:
        logger.debug('%s collapses at tolerance %s, keeping it unchanged', geometry.kind, tolerance)
        return geometry
    return from_shapely(simplified, srid=geometry.srid)

def fully_qualified_table_name(table: Table) -> str:
    if table.schema is None:
        return f'"{table.name}"'
    return f'"{table.schema}"."{table.name}"'

def _close(left, right, tolerance: float) -> bool:
    if isinstance(left, tuple) and isinstance(right, tuple):
        return len(left) == len(right) and all(_close(a, b, tolerance) for a, b in zip(left, right))
    if isinstance(left, tuple) or isinstance(right, tuple):
        return False
    return math.isclose(left, right, rel_tol=tolerance, abs_tol=tolerance)

def geometries_almost_equal(left: GeometryValue, right: GeometryValue, tolerance: float = STORAGE_PRECISION) -> bool:
    """Structural equality with coordinates compared within ``tolerance``."""
    if left.kind != right.kind or left.srid != right.srid:
        return False
    if left.kind == GeometryKind.GEOMETRYCOLLECTION:
        return len(left) == len(right) and all(
            geometries_almost_equal(a, b, tolerance) for a, b in zip(left.members, right.members)
        )
    return left.layout == right.layout and _close(left.coordinates, right.coordinates, tolerance)
