import pytest
from httpx import ASGITransport, AsyncClient

from contentrec.core.config import settings
from contentrec.main import app
from contentrec.repositories.memory import InMemoryContentRepository
from contentrec.services.engine import build_memory_engine
from contentrec.tests.conftest import make_item

API = settings.API_V1_STR


@pytest.fixture
def engine():
    content = InMemoryContentRepository([
        make_item("tech-1", "tech", ["python"], days_old=6),
        make_item("tech-2", "tech", ["python"], days_old=5),
        make_item("biz-1", "business", ["startups"], days_old=3),
        make_item("travel-1", "travel", ["food"], days_old=1),
    ])
    wired = build_memory_engine(settings, content)
    app.state.engine = wired
    yield wired
    app.state.engine = None


@pytest.fixture
def client(engine):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def as_user(user_id):
    return {settings.USER_ID_HEADER: user_id}


@pytest.mark.asyncio
async def test_track_activity_merges_visits(client, engine):
    async with client:
        body = {"blog_id": "tech-1", "time_spent": 40, "read_percentage": 70, "liked": True}
        first = await client.post(f"{API}/recommendations/track-activity", json=body, headers=as_user("u1"))
        second = await client.post(
            f"{API}/recommendations/track-activity",
            json={"blog_id": "tech-1", "read_percentage": 20},
            headers=as_user("u1"),
        )

    assert first.status_code == 200
    assert first.json() == {"success": True, "visit_count": 1}
    assert second.json()["visit_count"] == 2
    record = engine.activities.records[("u1", "tech-1")]
    assert record.read_percentage == 70
    assert record.time_spent_seconds == 40
    assert record.interactions.liked is True


@pytest.mark.asyncio
async def test_track_activity_unknown_blog(client):
    async with client:
        response = await client.post(
            f"{API}/recommendations/track-activity",
            json={"blog_id": "nope"},
            headers=as_user("u1"),
        )

    assert response.status_code == 404
    assert response.json()["detail"]["error_code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"blog_id": "tech-1", "read_percentage": 120},
    {"blog_id": "tech-1", "time_spent": -5},
])
async def test_track_activity_rejects_bad_ranges(client, engine, body):
    async with client:
        response = await client.post(f"{API}/recommendations/track-activity", json=body, headers=as_user("u1"))

    assert response.status_code == 422
    assert engine.activities.records == {}


@pytest.mark.asyncio
async def test_track_activity_requires_user(client):
    async with client:
        response = await client.post(f"{API}/recommendations/track-activity", json={"blog_id": "tech-1"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_trending_is_public(client):
    async with client:
        response = await client.get(f"{API}/recommendations/trending", params={"limit": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["strategy"] == "trending"
    assert data["total"] == 2
    assert [i["id"] for i in data["items"]] == ["travel-1", "biz-1"]


@pytest.mark.asyncio
async def test_trending_reflects_activity(client):
    async with client:
        await client.post(
            f"{API}/recommendations/track-activity",
            json={"blog_id": "tech-1", "read_percentage": 100, "shared": True},
            headers=as_user("u1"),
        )
        response = await client.get(f"{API}/recommendations/trending", params={"limit": 1})

    assert [i["id"] for i in response.json()["items"]] == ["tech-1"]


@pytest.mark.asyncio
async def test_personalized_flow(client):
    async with client:
        cold = await client.get(f"{API}/recommendations/personalized", headers=as_user("u1"))
        await client.post(
            f"{API}/recommendations/track-activity",
            json={"blog_id": "tech-1", "read_percentage": 90, "liked": True},
            headers=as_user("u1"),
        )
        warm = await client.get(
            f"{API}/recommendations/personalized", params={"limit": 2}, headers=as_user("u1")
        )

    assert cold.json()["strategy"] == "trending"
    data = warm.json()
    ids = [i["id"] for i in data["items"]]
    assert ids[0] == "tech-2"
    assert "tech-1" not in ids
    assert data["strategy"] == "personalized+trending"
    assert data["total"] == 2


@pytest.mark.asyncio
async def test_limit_is_bounded(client):
    async with client:
        response = await client.get(
            f"{API}/recommendations/personalized",
            params={"limit": settings.MAX_LIMIT + 1},
            headers=as_user("u1"),
        )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_health(client):
    async with client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["store"] == settings.STORE_BACKEND
