from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from chthon.db.session import engine

router = APIRouter()


@router.get('/health')
def health():
    try:
        with engine.connect() as connection:
            connection.execute(text('SELECT 1'))
    except SQLAlchemyError:
        logger.exception('health.database_unavailable')
        return JSONResponse(
            status_code=500,
            content={'status': 'unhealthy', 'detail': 'Database connection failed'},
        )
    return {
        'status': 'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'detail': 'Database connection successful',
    }
