from fastapi import APIRouter, Depends, Query, Request
import logging

from ..core.config import settings
from ..middleware.rate_limit import limiter
from ..models.activity import TrackActivityRequest, TrackActivityResponse
from ..models.recommendation import RecommendationsResponse
from ..services.engine import Engine
from ..services.recommendation_service import STRATEGY_TRENDING
from .deps import get_current_user_id, get_engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("/track-activity", response_model=TrackActivityResponse)
async def track_activity(
    activity: TrackActivityRequest,
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
):
    """Record a visit, read depth and interactions of the current user on a blog."""
    record = await engine.activity_service.track_activity(
        user=user_id,
        item=activity.blog_id,
        time_spent_seconds=activity.time_spent,
        read_percentage=activity.read_percentage,
        liked=activity.liked,
        commented=activity.commented,
        shared=activity.shared,
    )
    return TrackActivityResponse(success=True, visit_count=record.visit_count)


@router.get("/personalized", response_model=RecommendationsResponse)
async def get_personalized(
    limit: int = Query(settings.DEFAULT_LIMIT, ge=1, le=settings.MAX_LIMIT),
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
):
    """
    Get personalized blog recommendations for the current user.
    Users without any reading history get the trending list.
    """
    items, strategy = await engine.recommendation_service.recommend(user_id, limit)
    return RecommendationsResponse(items=items, strategy=strategy, total=len(items))


@router.get("/trending", response_model=RecommendationsResponse)
@limiter.limit(settings.TRENDING_RATE_LIMIT)
async def get_trending(
    request: Request,
    limit: int = Query(settings.DEFAULT_LIMIT, ge=1, le=settings.MAX_LIMIT),
    engine: Engine = Depends(get_engine),
):
    """Trending blogs of the last days. Available without authentication."""
    items = await engine.trending_service.get_trending(limit)
    return RecommendationsResponse(items=items, strategy=STRATEGY_TRENDING, total=len(items))
