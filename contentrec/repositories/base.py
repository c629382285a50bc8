from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Sequence

from ..models.activity import ActivityEvent, ActivityRecord
from ..models.content import ContentItem
from ..models.recommendation import TrendingEntry
from ..services.scoring import TrendingWeights


class ActivityRepository(ABC):
    """Persistence capability for activity records keyed by (user, item)."""

    @abstractmethod
    async def upsert(self, event: ActivityEvent, now: datetime) -> ActivityRecord:
        """Atomically merge one tracking event into the pair's record."""

    @abstractmethod
    async def find_by_user(self, user: str) -> List[ActivityRecord]:
        """All records of a user, most recent visit first."""

    @abstractmethod
    async def aggregate_trending(
        self,
        since: datetime,
        window_field: str,
        weights: TrendingWeights,
        limit: int,
    ) -> List[TrendingEntry]:
        """Per-item aggregates of records whose window_field >= since, best first."""


class ContentRepository(ABC):
    """Read-only view of the blog catalog."""

    @abstractmethod
    async def exists(self, item_id: str) -> bool:
        ...

    @abstractmethod
    async def find_by_ids(self, item_ids: Sequence[str]) -> List[ContentItem]:
        """Items for the given ids in the same order; unknown ids are skipped."""

    @abstractmethod
    async def find_matching(
        self,
        categories: Sequence[str],
        tags: Sequence[str],
        exclude: Iterable[str],
        limit: int,
    ) -> List[ContentItem]:
        """Newest items in any of the categories or sharing any of the tags."""

    @abstractmethod
    async def find_recent(self, limit: int, exclude: Iterable[str] = ()) -> List[ContentItem]:
        """Newest items overall, optionally skipping some ids."""
