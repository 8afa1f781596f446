"""
ISO well-known text for geometry values, read and written by shapely.

``dumps`` writes the ISO flavour (``POINT Z (1 2 3)``, ``POINT M (1 2 3)``)
that PostGIS ``ST_AsText`` produces and ``ST_GeomFromEWKT`` accepts.
``loads`` also accepts an EWKT ``SRID=...;`` prefix.
"""

import shapely
from shapely.errors import ShapelyError

from geocollection.core.exceptions import GeometryError, WKTParseError
from geocollection.geometry.shapes import from_shapely, to_shapely
from geocollection.geometry.values import GeometryValue


SRID_PREFIX = 'SRID='


def dumps(geometry: GeometryValue) -> str:
    """Serialize ``geometry`` to ISO WKT. Collections must have a single coordinate layout."""
    return shapely.to_wkt(to_shapely(geometry), rounding_precision=-1, trim=True, output_dimension=4)

def _split_srid(text: str) -> tuple[int | None, str]:
    text = text.strip()
    if not text.upper().startswith(SRID_PREFIX):
        return None, text
    head, separator, body = text.partition(';')
    if not separator:
        raise WKTParseError(f'Missing ";" after the SRID in {text!r}')
    try:
        return int(head[len(SRID_PREFIX):]), body
    except ValueError:
        raise WKTParseError(f'Invalid SRID: {head!r}') from None

def loads(text: str, srid: int | None = None) -> GeometryValue:
    """
    Parse WKT or EWKT. An ``SRID=...;`` prefix wins over the ``srid`` argument.
    """
    embedded_srid, body = _split_srid(text)
    try:
        shape = shapely.from_wkt(body)
    except ShapelyError as e:
        raise WKTParseError(f'Invalid WKT {body!r}: {e}') from e
    try:
        return from_shapely(shape, srid=embedded_srid if embedded_srid is not None else srid)
    except GeometryError:
        raise
    except ValueError as e:
        raise WKTParseError(str(e)) from e
