from geocollection.core import repository
from geocollection.core.deps import get_db
from geocollection.core.exceptions import RowNotFound
from geocollection.enums.geometry_kind import GeometryKind
from geocollection.geometry.extractor import extract
from geocollection.geometry.values import GeometryCollection, GeometryValue
from geocollection.parsers.geojson import from_geojson, mapping
from geocollection.schemas import requests, responses
from geocollection.utils import transform_geometry
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import Connection


api_router = APIRouter(prefix='')


def _read_collection(db: Connection, table_name: str, destination_srid: int | None) -> tuple[GeometryCollection, int | None]:
    try:
        collection, srid = repository.read_table(db, table_name)
    except RowNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f'Collection not found: {table_name} ({e})')
    if destination_srid is not None:
        collection = transform_geometry(collection, destination_srid)
        srid = destination_srid
    return collection, srid

def _geojson(geometry: GeometryValue) -> dict:
    try:
        return mapping(geometry)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@api_router.put('/{table_name}')
def store_collection(table_name: str, store: requests.StoreCollection, db: Connection = Depends(get_db)) -> responses.StoredCollection:
    collection = from_geojson(store.geometry, srid=store.srid)
    row_id = repository.write(db, collection, store.srid, table_name, replace=store.replace)
    return responses.StoredCollection(
        id=row_id,
        table_name=table_name,
        srid=store.srid,
        member_count=len(collection),
    )


@api_router.get('/{table_name}')
def get_collection(table_name: str, destination_srid: int | None = None, db: Connection = Depends(get_db)) -> responses.Feature:
    collection, srid = _read_collection(db, table_name, destination_srid)
    return responses.Feature(
        type='Feature',
        geometry=_geojson(collection),
        properties={
            'srid': srid,
            'member_count': len(collection),
        },
    )


@api_router.get('/{table_name}/extract/{kind}')
def extract_members(table_name: str, kind: GeometryKind, destination_srid: int | None = None, db: Connection = Depends(get_db)) -> responses.FeatureCollection:
    collection, srid = _read_collection(db, table_name, destination_srid)
    try:
        members = extract(collection, kind)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    features = [
        responses.Feature(
            type='Feature',
            geometry=_geojson(member),
            properties={
                'kind': member.kind.value,
                'srid': srid,
            },
            id=index,
        )
        for index, member in enumerate(members)
    ]
    return responses.FeatureCollection(
        type='FeatureCollection',
        features=features,
    )
