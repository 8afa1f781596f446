from geocollection.schemas.responses.collection import StoredCollection
from geocollection.schemas.responses.geojson import (
    Feature,
    FeatureCollection,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
