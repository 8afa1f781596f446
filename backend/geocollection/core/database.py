from collections.abc import Iterator
from contextlib import contextmanager
import logging

from sqlalchemy import Connection, Engine, create_engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from geocollection.core.exceptions import ConnectionUnavailable
from geocollection.core.settings import Settings


logger = logging.getLogger(__name__)

_engines: dict[str, Engine] = {}


def get_engine(url: str | None = None) -> Engine:
    url = url or Settings.DATABASE_URL
    engine = _engines.get(url)
    if engine is None:
        connect_args = {}
        if make_url(url).get_backend_name() == 'postgresql':
            connect_args['connect_timeout'] = Settings.DATABASE_CONNECT_TIMEOUT
        engine = create_engine(url, echo=Settings.DATABASE_ECHO, connect_args=connect_args)
        _engines[url] = engine
    return engine

def dispose_engines():
    while _engines:
        _, engine = _engines.popitem()
        engine.dispose()

@contextmanager
def connect(url: str | None = None) -> Iterator[Connection]:
    """
    Open one connection and release it on every exit path.

    A failed attempt raises ``ConnectionUnavailable``; callers decide whether
    the steps depending on the database are skipped.
    """
    try:
        connection = get_engine(url).connect()
    except SQLAlchemyError as e:
        logger.warning('Database unavailable: %s', e.__class__.__name__)
        raise ConnectionUnavailable(f'Could not connect to the database: {e}') from e

    try:
        yield connection
    finally:
        connection.close()
