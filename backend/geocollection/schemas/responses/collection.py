from dataclasses import dataclass


@dataclass
class StoredCollection:
    id: int
    table_name: str
    srid: int
    member_count: int
