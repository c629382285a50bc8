import random

import pytest

from contentrec.core.config import Settings
from contentrec.data.seed import CATEGORIES, generate_sample_blogs, seed_activity
from contentrec.models.content import ContentItem
from contentrec.repositories.memory import InMemoryActivityRepository, InMemoryContentRepository
from contentrec.services.activity_service import ActivityService
from contentrec.services.engine import build_memory_engine


def test_sample_blogs_look_like_catalog_documents():
    blogs = generate_sample_blogs(10, random.Random(1))

    assert len(blogs) == 10
    for doc in blogs:
        assert doc["category"] in CATEGORIES
        assert 1 <= len(doc["tags"]) <= 3
        item = ContentItem.from_document(doc)
        assert item.id == str(doc["_id"])
        assert item.created_at == doc["createdAt"]


@pytest.mark.asyncio
async def test_seeded_activity_goes_through_merge_path():
    blogs = generate_sample_blogs(5, random.Random(2))
    content = InMemoryContentRepository(ContentItem.from_document(d) for d in blogs)
    activities = InMemoryActivityRepository()
    service = ActivityService(activities, content)

    sent = await seed_activity(service, ["u1", "u2"], [str(b["_id"]) for b in blogs], 50, random.Random(3))

    assert sent == 50
    assert sum(r.visit_count for r in activities.records.values()) == 50
    assert len(activities.records) <= 10


def test_memory_engine_can_start_with_sample_catalog():
    engine = build_memory_engine(Settings(STORE_BACKEND="memory", MEMORY_SEED_BLOGS=7))
    assert len(engine.content.items) == 7
