"""
Trending aggregation with recency backfill.

The ranking is a rolling-window aggregate over activity records, grouped by
item. Which timestamp the window applies to is configurable; the default is
the record's creation time, so a record first created before the window does
not count even when it was revisited inside it.

Degradation order for a request:

1. Aggregated ranking, minus excluded ids, truncated to ``limit``.
2. Most recently created items that are neither excluded nor already picked,
   when step 1 comes up short.
3. Most recently created items overall, ignoring exclusions, when the
   aggregation or the catalog lookup fails.
4. An empty list when even step 3 fails.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional

from ..cache.trending_cache import TrendingCache
from ..models.activity import utcnow
from ..models.content import ContentItem
from ..models.recommendation import TrendingEntry
from ..repositories.base import ActivityRepository, ContentRepository
from .candidates import CandidatePool
from .scoring import TrendingWeights

logger = logging.getLogger(__name__)


class TrendingService:
    def __init__(
        self,
        activities: ActivityRepository,
        content: ContentRepository,
        weights: TrendingWeights = TrendingWeights(),
        window_days: int = 7,
        window_field: str = "created_at",
        candidate_multiplier: int = 2,
        cache: Optional[TrendingCache] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.activities = activities
        self.content = content
        self.weights = weights
        self.window_days = window_days
        self.window_field = window_field
        self.candidate_multiplier = candidate_multiplier
        self.cache = cache
        self.clock = clock

    def window_start(self) -> datetime:
        return self.clock() - timedelta(days=self.window_days)

    async def rank(self, candidates: int) -> List[TrendingEntry]:
        """Aggregated ranking for the current window, best first."""
        key = TrendingCache.key(self.window_field, self.window_days, candidates)
        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                return cached

        entries = await self.activities.aggregate_trending(
            since=self.window_start(),
            window_field=self.window_field,
            weights=self.weights,
            limit=candidates,
        )
        if self.cache is not None:
            await self.cache.set(key, entries)
        return entries

    async def get_trending(self, limit: int, exclude_items: Iterable[str] = ()) -> List[ContentItem]:
        if limit <= 0:
            return []
        pool = CandidatePool(limit, exclude_items)
        try:
            ranking = await self.rank(limit * self.candidate_multiplier)
            ranked_ids = [e.item for e in ranking if e.item not in pool.excluded][:limit]
            pool.extend(await self.content.find_by_ids(ranked_ids))

            if not pool.is_full:
                logger.info(f"Trending short by {pool.remaining} items, backfilling with recent posts")
                pool.extend(await self.content.find_recent(pool.remaining, exclude=pool.taken_ids()))
            return pool.items
        except Exception as e:
            logger.error(f"Error getting trending blogs: {str(e)}")
            return await self.most_recent(limit)

    async def most_recent(self, limit: int) -> List[ContentItem]:
        """Last-resort list: newest posts, exclusions ignored."""
        try:
            return await self.content.find_recent(limit)
        except Exception as e:
            logger.error(f"Recent-posts fallback failed: {str(e)}")
            return []
