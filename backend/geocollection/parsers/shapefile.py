from os import PathLike
from typing import Any
import logging

import geopandas as gpd

from geocollection.geometry.shapes import from_shapely
from geocollection.geometry.values import GeometryValue


logger = logging.getLogger(__name__)


def read_layer_srid(frame: gpd.GeoDataFrame) -> int | None:
    if frame.crs is None:
        return None
    return frame.crs.to_epsg()

def read_shapefile(
    path: str | PathLike,
    filters: dict[str, Any] | None = None,
    rows: int | None = None,
) -> list[GeometryValue]:
    """
    Read a subset of a shapefile layer as geometry values.

    ``filters`` keeps the features whose attributes equal the given values,
    ``rows`` keeps the first features after filtering. Every value is tagged
    with the EPSG code of the layer's .prj sidecar, when it has one.
    """
    frame = gpd.read_file(path)
    srid = read_layer_srid(frame)

    for column, value in (filters or {}).items():
        if column not in frame.columns:
            raise ValueError(f'{path}: unknown attribute {column!r}')
        frame = frame[frame[column] == value]
    if rows is not None:
        frame = frame.head(rows)

    geometries = []
    for shape in frame.geometry:
        if shape is None or shape.is_empty:
            logger.debug('%s: skipping empty feature', path)
            continue
        geometries.append(from_shapely(shape, srid=srid))

    logger.info('%s: read %d geometries (srid=%s)', path, len(geometries), srid)
    return geometries
