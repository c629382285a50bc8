from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from pydantic import BaseModel

from ..core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    store: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness plus a ping of the activity store"""
    database = "connected"
    status = "healthy"
    if settings.STORE_BACKEND == "mongodb":
        try:
            from ..db.mongodb import mongodb
            await mongodb.ping()
        except Exception as e:
            logger.warning(f"Health check could not reach MongoDB: {str(e)}")
            database = "unreachable"
            status = "degraded"
    else:
        database = "in-memory"

    return HealthResponse(
        status=status,
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        store=settings.STORE_BACKEND,
        database=database,
    )
