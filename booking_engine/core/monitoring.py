"""Liveness and dependency health checks for the booking engine"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
import logging

from booking_engine.config.database import get_db
from booking_engine.config.redis import get_redis

logger = logging.getLogger(__name__)

health_router = APIRouter()

HEALTHY = "healthy"


def _check_database(db: Session) -> str:
    try:
        db.execute(text("SELECT 1"))
        return HEALTHY
    except Exception as e:
        logger.error(f"Database unreachable: {e}")
        return f"unhealthy: {e}"


async def _check_cache() -> str:
    # Redis only backs the month availability cache
    try:
        cache = await get_redis()
        await cache.ping()
        return HEALTHY
    except Exception as e:
        logger.warning(f"Availability cache unreachable: {e}")
        return f"unhealthy: {e}"


@health_router.get("")
async def health_check():
    return {"status": HEALTHY, "service": "booking-engine"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Database and cache status; ``overall`` is degraded if either fails"""
    checks = {
        "api": HEALTHY,
        "database": _check_database(db),
        "redis": await _check_cache(),
    }
    checks["overall"] = HEALTHY if all(v == HEALTHY for v in checks.values()) else "degraded"
    return checks
