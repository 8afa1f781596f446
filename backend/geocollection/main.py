import logging

from geocollection.core.database import dispose_engines
from geocollection.core.exceptions import ConnectionUnavailable, CrsMismatch, GeometryError, QueryFailure
from geocollection.core.settings import Settings
from geocollection.routers import collections as collections_router
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse


logging.basicConfig(level=Settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def lifespan(app: FastAPI):
    yield
    dispose_engines()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"], # Allows all methods
    allow_headers=["*"], # Allows all headers
)

app.include_router(collections_router.api_router, prefix='/collections', tags=['collections'])


@app.exception_handler(GeometryError)
@app.exception_handler(CrsMismatch)
async def invalid_geometry(request: Request, exc: ValueError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={'detail': str(exc)})

@app.exception_handler(ConnectionUnavailable)
async def database_unavailable(request: Request, exc: ConnectionUnavailable):
    logger.warning('%s %s: database unavailable', request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={'detail': 'Database unavailable'})

@app.exception_handler(QueryFailure)
async def query_failure(request: Request, exc: QueryFailure):
    logger.error('%s %s: %s', request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={'detail': str(exc)})
