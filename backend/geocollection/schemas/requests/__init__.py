from geocollection.schemas.requests.store_collection import StoreCollection
