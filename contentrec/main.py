from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .api import health, recommendations
from .core.config import settings
from .core.logging import setup_logging
from .middleware.logging import log_request
from .middleware.rate_limit import limiter
from .services.engine import build_memory_engine, build_mongo_engine

setup_logging()
logger = logging.getLogger(__name__)


async def _connect_engine(app: FastAPI):
    if settings.STORE_BACKEND == "memory":
        app.state.engine = build_memory_engine(settings)
        return

    from .db.mongodb import mongodb
    await mongodb.connect()
    try:
        await mongodb.ensure_indexes()
    except Exception as e:
        # The unique (user, item) index must exist before any activity is written
        logger.error(f"Error ensuring MongoDB indexes, refusing to start: {str(e)}")
        await mongodb.close()
        raise

    redis = None
    if settings.TRENDING_CACHE_TTL > 0:
        from .db.redis import redis_client
        try:
            await redis_client.ping()
            redis = redis_client
            logger.info("Connected to Redis, trending cache enabled")
        except Exception as e:
            logger.warning(f"Redis unavailable, trending cache disabled: {str(e)}")

    app.state.engine = build_mongo_engine(settings, mongodb.get_db(), redis=redis)


async def _disconnect_engine():
    if settings.STORE_BACKEND == "memory":
        return
    from .db.mongodb import mongodb
    await mongodb.close()
    if settings.TRENDING_CACHE_TTL > 0:
        from .db.redis import redis_client
        try:
            await redis_client.aclose()
        except Exception as e:
            logger.error(f"Error closing Redis connection: {str(e)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up application...")
    # Tests wire their own engine before the app starts
    if getattr(app.state, "engine", None) is None:
        await _connect_engine(app)
    logger.info(f"API Version: {settings.API_V1_STR}, store backend: {settings.STORE_BACKEND}")
    yield
    logger.info("Shutting down application...")
    await _disconnect_engine()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.middleware("http")(log_request)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"status": "healthy", "message": settings.PROJECT_NAME}


app.include_router(health.router)
app.include_router(recommendations.router, prefix=settings.API_V1_STR)
