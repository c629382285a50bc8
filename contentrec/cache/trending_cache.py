import json
import logging
from typing import List, Optional

from redis.exceptions import RedisError

from ..models.recommendation import TrendingEntry

logger = logging.getLogger(__name__)


class TrendingCache:
    """Short-lived Redis copy of the aggregated trending ranking.

    Only the ranking is cached, never the final item list: exclusions and the
    recency backfill are still applied per request. A cache that cannot be
    reached, or holds an unreadable entry, behaves like an empty one.
    """

    def __init__(self, redis, ttl: int):
        self.redis = redis
        self.ttl = ttl

    @property
    def enabled(self) -> bool:
        return self.redis is not None and self.ttl > 0

    @staticmethod
    def key(window_field: str, window_days: int, candidates: int) -> str:
        return f"trending:{window_field}:{window_days}d:{candidates}"

    async def get(self, key: str) -> Optional[List[TrendingEntry]]:
        if not self.enabled:
            return None
        try:
            cached = await self.redis.get(key)
        except (RedisError, OSError) as e:
            logger.warning(f"Trending cache read failed: {str(e)}")
            return None
        if not cached:
            return None
        try:
            return [TrendingEntry(**entry) for entry in json.loads(cached)]
        except (ValueError, TypeError) as e:
            logger.warning(f"Dropping unreadable trending cache entry {key}: {str(e)}")
            await self.delete(key)
            return None

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except (RedisError, OSError) as e:
            logger.warning(f"Trending cache delete failed: {str(e)}")

    async def set(self, key: str, entries: List[TrendingEntry]) -> None:
        if not self.enabled:
            return
        try:
            await self.redis.set(key, json.dumps([e.model_dump() for e in entries]), ex=self.ttl)
        except (RedisError, OSError) as e:
            logger.warning(f"Trending cache write failed: {str(e)}")
