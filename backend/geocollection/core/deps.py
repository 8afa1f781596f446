from collections.abc import Iterator

from sqlalchemy import Connection

from geocollection.core.database import connect


def get_db() -> Iterator[Connection]:
    with connect() as connection:
        yield connection
