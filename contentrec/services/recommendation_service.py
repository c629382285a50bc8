import logging
from typing import List, Tuple

from ..models.activity import ActivityRecord
from ..models.content import ContentItem
from ..models.recommendation import InterestProfile
from ..repositories.base import ActivityRepository, ContentRepository
from .candidates import CandidatePool
from .interests import JoinedActivity, extract_interests
from .scoring import InterestWeights
from .trending import TrendingService

logger = logging.getLogger(__name__)

STRATEGY_PERSONALIZED = "personalized"
STRATEGY_MIXED = "personalized+trending"
STRATEGY_TRENDING = "trending"


class RecommendationService:
    def __init__(
        self,
        activities: ActivityRepository,
        content: ContentRepository,
        trending: TrendingService,
        weights: InterestWeights = InterestWeights(),
    ):
        self.activities = activities
        self.content = content
        self.trending = trending
        self.weights = weights

    async def _join(self, records: List[ActivityRecord]) -> List[JoinedActivity]:
        items = await self.content.find_by_ids([r.item for r in records])
        by_id = {item.id: item for item in items}
        return [JoinedActivity(record=r, content=by_id.get(r.item)) for r in records]

    async def get_interest_profile(self, user: str) -> InterestProfile:
        """Taste profile of one user, recomputed from scratch on every call."""
        records = await self.activities.find_by_user(user)
        if not records:
            return InterestProfile()
        return extract_interests(await self._join(records), self.weights)

    async def get_personalized(self, user: str, limit: int) -> List[ContentItem]:
        items, _ = await self.recommend(user, limit)
        return items

    async def recommend(self, user: str, limit: int) -> Tuple[List[ContentItem], str]:
        """Personalized list plus the name of the strategy that produced it.

        Interest-matched posts come first, trending posts fill what is left.
        Posts the user already has activity on never appear.
        """
        if limit <= 0:
            return [], STRATEGY_PERSONALIZED

        try:
            records = await self.activities.find_by_user(user)
        except Exception as e:
            logger.warning(f"Could not load history for user {user}, serving trending: {str(e)}")
            return await self.trending.get_trending(limit), STRATEGY_TRENDING

        if not records:
            return await self.trending.get_trending(limit), STRATEGY_TRENDING

        consumed = [r.item for r in records]
        pool = CandidatePool(limit, exclude=consumed)
        matched = 0
        try:
            profile = extract_interests(await self._join(records), self.weights)
            if not profile.is_empty():
                matched = pool.extend(await self.content.find_matching(
                    categories=profile.category_names,
                    tags=profile.tag_names,
                    exclude=consumed,
                    limit=limit,
                ))
        except Exception as e:
            logger.warning(f"Interest matching failed for user {user}, backfilling with trending: {str(e)}")

        if not pool.is_full:
            pool.extend(await self.trending.get_trending(pool.remaining, exclude_items=pool.taken_ids()))

        if matched and matched == len(pool.items):
            strategy = STRATEGY_PERSONALIZED
        elif matched:
            strategy = STRATEGY_MIXED
        else:
            strategy = STRATEGY_TRENDING
        return pool.items, strategy
