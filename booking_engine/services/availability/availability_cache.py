# booking_engine/services/availability/availability_cache.py
"""Short-lived Redis cache for month availability views"""
import json
import logging
from typing import Dict, Optional

from booking_engine.config.redis import RedisKeys, get_redis
from booking_engine.config.settings import get_settings

logger = logging.getLogger(__name__)


class AvailabilityCache:
    """
    Month views are advisory, so serving them a few seconds stale is fine.
    Redis errors never fail the request; they are logged and the caller
    recomputes.
    """

    @staticmethod
    def _key(establishment_id, service_id, year: int, month: int) -> str:
        return RedisKeys.MONTH_AVAILABILITY.format(
            establishment_id=establishment_id,
            service_id=service_id,
            year=year,
            month=month,
        )

    @staticmethod
    def enabled() -> bool:
        return get_settings().AVAILABILITY_CACHE_TTL_SECONDS > 0

    @staticmethod
    async def get_month(establishment_id, service_id, year: int, month: int) -> Optional[Dict[str, str]]:
        if not AvailabilityCache.enabled():
            return None
        try:
            redis_client = await get_redis()
            cached = await redis_client.get(AvailabilityCache._key(establishment_id, service_id, year, month))
        except Exception as e:
            logger.warning(f"Availability cache read failed: {e}")
            return None
        return json.loads(cached) if cached else None

    @staticmethod
    async def set_month(establishment_id, service_id, year: int, month: int, day_status: Dict[str, str]) -> None:
        if not AvailabilityCache.enabled():
            return
        try:
            redis_client = await get_redis()
            await redis_client.set(
                AvailabilityCache._key(establishment_id, service_id, year, month),
                json.dumps(day_status),
                ex=get_settings().AVAILABILITY_CACHE_TTL_SECONDS,
            )
        except Exception as e:
            logger.warning(f"Availability cache write failed: {e}")
