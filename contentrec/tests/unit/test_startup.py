from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from pymongo.errors import OperationFailure

from contentrec import main
from contentrec.core.config import settings
from contentrec.db.mongodb import mongodb


@pytest.fixture
def mongo_startup(monkeypatch):
    monkeypatch.setattr(settings, "STORE_BACKEND", "mongodb")
    monkeypatch.setattr(settings, "TRENDING_CACHE_TTL", 0)
    monkeypatch.setattr(mongodb, "connect", AsyncMock())
    monkeypatch.setattr(mongodb, "close", AsyncMock())
    monkeypatch.setattr(mongodb, "get_db", lambda: {})
    return mongodb


@pytest.mark.asyncio
async def test_failed_unique_index_aborts_startup(mongo_startup, monkeypatch):
    monkeypatch.setattr(
        mongo_startup,
        "ensure_indexes",
        AsyncMock(side_effect=OperationFailure("E11000 duplicate key error index: user_item_unique")),
    )
    app = FastAPI()

    with pytest.raises(OperationFailure):
        await main._connect_engine(app)

    assert getattr(app.state, "engine", None) is None
    mongo_startup.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_engine_is_wired_once_indexes_exist(mongo_startup, monkeypatch):
    monkeypatch.setattr(mongo_startup, "ensure_indexes", AsyncMock())
    monkeypatch.setattr(main, "build_mongo_engine", lambda settings, db, redis=None: "engine")
    app = FastAPI()

    await main._connect_engine(app)

    assert app.state.engine == "engine"
