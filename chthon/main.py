from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from chthon.api.v1.router import api_router
from chthon.core.config import settings
from chthon.core.logging import configure_logging
from chthon.core.tiers import get_tier_registry
from chthon.db.init_db import init_db
from chthon.services.storage_service import UPLOADS_ROUTE, upload_root

configure_logging(settings.LOG_LEVEL, serialize=settings.LOG_JSON)


@asynccontextmanager
async def lifespan(_: FastAPI):
    get_tier_registry()
    init_db()
    logger.info('app.startup', env=settings.ENV, database=settings.DATABASE_URL.split(':', 1)[0])
    yield

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.warning('request.invalid', path=request.url.path, method=request.method, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def handle_uncaught(request: Request, exc: Exception):
    logger.opt(exception=exc).error('request.unhandled', path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


app.include_router(api_router)

uploads_dir = upload_root()
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_ROUTE, StaticFiles(directory=uploads_dir), name='uploads')
