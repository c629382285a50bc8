"""Shared fixtures: an in-memory catalog and store with a frozen clock."""

from datetime import datetime, timedelta, timezone

import pytest

from contentrec.models.activity import ActivityEvent
from contentrec.models.content import ContentItem
from contentrec.repositories.memory import InMemoryActivityRepository, InMemoryContentRepository
from contentrec.services.activity_service import ActivityService
from contentrec.services.recommendation_service import RecommendationService
from contentrec.services.trending import TrendingService

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def make_item(item_id, category="tech", tags=(), days_old=1):
    return ContentItem(
        id=item_id,
        title=f"Post {item_id}",
        excerpt=f"About {item_id}",
        category=category,
        tags=list(tags),
        created_at=NOW - timedelta(days=days_old),
    )


async def visit(activities, user, item, at=NOW, **fields):
    """Write one tracking event straight into the store at a given time."""
    return await activities.upsert(ActivityEvent(user=user, item=item, **fields), now=at)


@pytest.fixture
def content_repo():
    return InMemoryContentRepository([
        make_item("tech-1", "tech", ["python", "web"], days_old=10),
        make_item("tech-2", "tech", ["python"], days_old=9),
        make_item("tech-3", "tech", ["rust"], days_old=3),
        make_item("sci-1", "science", ["space"], days_old=8),
        make_item("sci-2", "science", ["python", "data"], days_old=2),
        make_item("biz-1", "business", ["startups"], days_old=5),
        make_item("biz-2", "business", ["finance"], days_old=4),
        make_item("travel-1", "travel", ["food"], days_old=1),
    ])


@pytest.fixture
def activity_repo():
    return InMemoryActivityRepository()


@pytest.fixture
def activity_service(activity_repo, content_repo):
    return ActivityService(activity_repo, content_repo, clock=lambda: NOW)


@pytest.fixture
def trending_service(activity_repo, content_repo):
    return TrendingService(activity_repo, content_repo, clock=lambda: NOW)


@pytest.fixture
def recommendation_service(activity_repo, content_repo, trending_service):
    return RecommendationService(activity_repo, content_repo, trending_service)
