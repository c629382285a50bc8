import logging
from dataclasses import dataclass
from typing import Optional

from ..cache.trending_cache import TrendingCache
from ..core.config import Settings
from ..data.seed import generate_sample_blogs
from ..models.content import ContentItem
from ..repositories import (
    ActivityRepository,
    ContentRepository,
    InMemoryActivityRepository,
    InMemoryContentRepository,
    MongoActivityRepository,
    MongoContentRepository,
)
from .activity_service import ActivityService
from .recommendation_service import RecommendationService
from .scoring import InterestWeights, TrendingWeights
from .trending import TrendingService

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    """The wired services one application instance serves requests with."""
    activities: ActivityRepository
    content: ContentRepository
    activity_service: ActivityService
    trending_service: TrendingService
    recommendation_service: RecommendationService


def build_engine(
    settings: Settings,
    activities: ActivityRepository,
    content: ContentRepository,
    redis=None,
) -> Engine:
    cache = TrendingCache(redis, settings.TRENDING_CACHE_TTL) if redis is not None else None
    trending = TrendingService(
        activities,
        content,
        weights=TrendingWeights.from_settings(settings),
        window_days=settings.TRENDING_WINDOW_DAYS,
        window_field=settings.TRENDING_WINDOW_FIELD,
        candidate_multiplier=settings.TRENDING_CANDIDATE_MULTIPLIER,
        cache=cache,
    )
    return Engine(
        activities=activities,
        content=content,
        activity_service=ActivityService(activities, content),
        trending_service=trending,
        recommendation_service=RecommendationService(
            activities,
            content,
            trending,
            weights=InterestWeights.from_settings(settings),
        ),
    )


def build_mongo_engine(settings: Settings, db, redis=None) -> Engine:
    return build_engine(
        settings,
        MongoActivityRepository(db[settings.ACTIVITY_COLLECTION]),
        MongoContentRepository(db[settings.CONTENT_COLLECTION], authors=db[settings.USER_COLLECTION]),
        redis=redis,
    )


def build_memory_engine(settings: Settings, content: Optional[InMemoryContentRepository] = None) -> Engine:
    logger.warning("Using the in-memory store; activity is lost on restart")
    if content is None:
        content = InMemoryContentRepository()
        if settings.MEMORY_SEED_BLOGS > 0:
            for doc in generate_sample_blogs(settings.MEMORY_SEED_BLOGS):
                content.add(ContentItem.from_document(doc))
    return build_engine(
        settings,
        InMemoryActivityRepository(),
        content,
    )
