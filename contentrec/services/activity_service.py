import logging
import math
from datetime import datetime
from typing import Callable, Optional

from ..core.errors import NotFoundError, ValidationError
from ..models.activity import ActivityEvent, ActivityRecord, utcnow
from ..repositories.base import ActivityRepository, ContentRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Write path for engagement events. Errors propagate; nothing is dropped silently."""

    def __init__(
        self,
        activities: ActivityRepository,
        content: ContentRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.activities = activities
        self.content = content
        self.clock = clock

    async def track_activity(
        self,
        user: str,
        item: str,
        time_spent_seconds: Optional[int] = None,
        read_percentage: Optional[float] = None,
        liked: Optional[bool] = None,
        commented: Optional[bool] = None,
        shared: Optional[bool] = None,
    ) -> ActivityRecord:
        """Merge one visit into the (user, item) record, creating it on first sight."""
        time_spent_seconds = time_spent_seconds or 0
        read_percentage = read_percentage or 0.0

        if time_spent_seconds < 0:
            raise ValidationError("time spent must not be negative", field="time_spent")
        if math.isnan(read_percentage) or not 0 <= read_percentage <= 100:
            raise ValidationError("read percentage must be between 0 and 100", field="read_percentage")

        if not await self.content.exists(item):
            raise NotFoundError("Blog", item)

        event = ActivityEvent(
            user=user,
            item=item,
            time_spent_seconds=int(time_spent_seconds),
            read_percentage=float(read_percentage),
            liked=bool(liked),
            commented=bool(commented),
            shared=bool(shared),
        )
        record = await self.activities.upsert(event, self.clock())
        logger.debug(f"Tracked activity {user}/{item}, visit {record.visit_count}")
        return record
