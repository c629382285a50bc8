import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Sequence, Tuple

from ..models.activity import ActivityEvent, ActivityRecord, Interactions
from ..models.content import ContentItem
from ..models.recommendation import TrendingEntry
from ..services.scoring import TrendingWeights, trending_engagement_score
from .base import ActivityRepository, ContentRepository

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryActivityRepository(ActivityRepository):
    """Process-local store for development and tests. Merges are serialised by a lock."""

    def __init__(self):
        self.records: Dict[Tuple[str, str], ActivityRecord] = {}
        self._lock = asyncio.Lock()

    async def upsert(self, event: ActivityEvent, now: datetime) -> ActivityRecord:
        key = (event.user, event.item)
        async with self._lock:
            current = self.records.get(key)
            if current is None:
                record = ActivityRecord(
                    user=event.user,
                    item=event.item,
                    time_spent_seconds=event.time_spent_seconds,
                    read_percentage=event.read_percentage,
                    interactions=Interactions(
                        liked=event.liked,
                        commented=event.commented,
                        shared=event.shared,
                    ),
                    visit_count=1,
                    last_visited_at=now,
                    created_at=now,
                    updated_at=now,
                )
            else:
                flags = current.interactions
                record = current.model_copy(update={
                    "time_spent_seconds": current.time_spent_seconds + event.time_spent_seconds,
                    "read_percentage": max(current.read_percentage, event.read_percentage),
                    "interactions": Interactions(
                        liked=flags.liked or event.liked,
                        commented=flags.commented or event.commented,
                        shared=flags.shared or event.shared,
                    ),
                    "visit_count": current.visit_count + 1,
                    "last_visited_at": now,
                    "updated_at": now,
                })
            self.records[key] = record
            return record

    async def find_by_user(self, user: str) -> List[ActivityRecord]:
        mine = [r for (u, _), r in self.records.items() if u == user]
        return sorted(mine, key=lambda r: r.last_visited_at, reverse=True)

    async def aggregate_trending(
        self,
        since: datetime,
        window_field: str,
        weights: TrendingWeights,
        limit: int,
    ) -> List[TrendingEntry]:
        groups: Dict[str, List[ActivityRecord]] = {}
        for record in self.records.values():
            if getattr(record, window_field) >= since:
                groups.setdefault(record.item, []).append(record)

        entries = []
        for item, records in groups.items():
            entry = TrendingEntry(
                item=item,
                total_visits=sum(r.visit_count for r in records),
                avg_read_percentage=sum(r.read_percentage for r in records) / len(records),
                comment_count=sum(1 for r in records if r.interactions.commented),
                like_count=sum(1 for r in records if r.interactions.liked),
                share_count=sum(1 for r in records if r.interactions.shared),
            )
            entry.engagement_score = trending_engagement_score(entry, weights)
            entries.append(entry)

        entries.sort(key=lambda e: (-e.engagement_score, e.item))
        return entries[:limit]


class InMemoryContentRepository(ContentRepository):
    def __init__(self, items: Iterable[ContentItem] = ()):
        self.items: Dict[str, ContentItem] = {}
        for item in items:
            self.add(item)

    def add(self, item: ContentItem) -> ContentItem:
        self.items[item.id] = item
        return item

    def _newest_first(self, items: Iterable[ContentItem]) -> List[ContentItem]:
        return sorted(items, key=lambda i: i.created_at or _OLDEST, reverse=True)

    async def exists(self, item_id: str) -> bool:
        return item_id in self.items

    async def find_by_ids(self, item_ids: Sequence[str]) -> List[ContentItem]:
        return [self.items[i] for i in item_ids if i in self.items]

    async def find_matching(
        self,
        categories: Sequence[str],
        tags: Sequence[str],
        exclude: Iterable[str],
        limit: int,
    ) -> List[ContentItem]:
        if limit <= 0:
            return []
        excluded = set(exclude)
        wanted_categories = set(categories)
        wanted_tags = set(tags)
        matches = [
            item for item in self.items.values()
            if item.id not in excluded
            and (item.category in wanted_categories or wanted_tags.intersection(item.tags))
        ]
        return self._newest_first(matches)[:limit]

    async def find_recent(self, limit: int, exclude: Iterable[str] = ()) -> List[ContentItem]:
        if limit <= 0:
            return []
        excluded = set(exclude)
        candidates = [item for item in self.items.values() if item.id not in excluded]
        return self._newest_first(candidates)[:limit]
