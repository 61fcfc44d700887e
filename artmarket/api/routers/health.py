# artmarket/api/routers/health.py
from functools import lru_cache

import redis
from redis.exceptions import RedisError
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from artmarket.data.database import get_db
from artmarket.utils.settings import RATE_LIMIT_STORAGE_URI
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@lru_cache
def _redis_client(uri: str) -> redis.Redis:
    # jeden klient (i pula) na uri, nie nowy przy kazdym /health
    return redis.Redis.from_url(uri, socket_timeout=1)


def check_limiter_storage(uri: str = RATE_LIMIT_STORAGE_URI) -> str:
    #memory:// nie ma czego sprawdzac, redis pingujemy
    if not uri.startswith(("redis://", "rediss://")):
        return "memory"
    try:
        _redis_client(uri).ping()
    except RedisError as e:
        logger.error(f"Health check: rate limit storage unavailable: {e}")
        return "unavailable"
    return "ok"


@router.get("/health")
def health(db: Session = Depends(get_db)):
    body = {"status": "ok", "database": "ok", "rate_limit_storage": check_limiter_storage()}

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check: database unavailable: {e}")
        body.update(status="degraded", database="unavailable")
        return JSONResponse(status_code=503, content=body)

    if body["rate_limit_storage"] == "unavailable":
        body["status"] = "degraded"
    return body
