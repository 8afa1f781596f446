WGS_84_SRID = 4326
WEB_MERCATOR_SRID = 3857

DEFAULT_GEOMETRY_COLUMN = 'geom'
DEFAULT_TABLE_NAME = 'geometry_collection'

# PostGIS ST_AsText keeps 15 significant digits
STORAGE_PRECISION = 1e-9
