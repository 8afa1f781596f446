from geocollection.schemas.responses.geojson import GeometryCollection
from pydantic import BaseModel, Field


class StoreCollection(BaseModel):
    srid: int = Field(..., description="SRID of the collection coordinates")
    geometry: GeometryCollection
    replace: bool = Field(True, description="Drop and recreate the table before writing")
