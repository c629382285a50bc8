from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence
import logging

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..core.errors import TransientStoreError
from ..models.activity import ActivityEvent, ActivityRecord
from ..models.content import ContentItem
from ..models.recommendation import TrendingEntry
from ..services.scoring import TrendingWeights
from .base import ActivityRepository, ContentRepository

logger = logging.getLogger(__name__)

INTERACTION_FLAGS = ("liked", "commented", "shared")


def build_activity_update(event: ActivityEvent, now: datetime) -> Dict[str, Any]:
    """Field-wise merge of one event: sum time and visits, max read depth, OR flags.

    Flags are only ever written as True by $set. The False defaults go through
    $setOnInsert so a later event can never reset a flag.
    """
    set_fields: Dict[str, Any] = {"last_visited_at": now, "updated_at": now}
    on_insert: Dict[str, Any] = {"created_at": now}
    for flag in INTERACTION_FLAGS:
        if getattr(event, flag):
            set_fields[f"interactions.{flag}"] = True
        else:
            on_insert[f"interactions.{flag}"] = False

    return {
        "$inc": {"time_spent_seconds": event.time_spent_seconds, "visit_count": 1},
        "$max": {"read_percentage": event.read_percentage},
        "$set": set_fields,
        "$setOnInsert": on_insert,
    }


def build_trending_pipeline(
    since: datetime,
    window_field: str,
    weights: TrendingWeights,
    limit: int,
) -> List[Dict[str, Any]]:
    def flag_count(flag: str) -> Dict[str, Any]:
        return {"$sum": {"$cond": [{"$eq": [f"$interactions.{flag}", True]}, 1, 0]}}

    return [
        {"$match": {window_field: {"$gte": since}}},
        {
            "$group": {
                "_id": "$item",
                "total_visits": {"$sum": "$visit_count"},
                "avg_read_percentage": {"$avg": "$read_percentage"},
                "comment_count": flag_count("commented"),
                "like_count": flag_count("liked"),
                "share_count": flag_count("shared"),
            }
        },
        {
            "$addFields": {
                "engagement_score": {
                    "$add": [
                        {"$multiply": ["$total_visits", weights.visit]},
                        {"$multiply": ["$avg_read_percentage", weights.read]},
                        {"$multiply": ["$comment_count", weights.comment]},
                        {"$multiply": ["$like_count", weights.like]},
                        {"$multiply": ["$share_count", weights.share]},
                    ]
                }
            }
        },
        {"$sort": {"engagement_score": -1, "_id": 1}},
        {"$limit": limit},
    ]


def _record_from_document(doc: Dict[str, Any]) -> ActivityRecord:
    return ActivityRecord(
        user=str(doc["user"]),
        item=str(doc["item"]),
        time_spent_seconds=doc.get("time_spent_seconds", 0),
        read_percentage=doc.get("read_percentage", 0.0),
        interactions=doc.get("interactions") or {},
        visit_count=doc.get("visit_count", 1),
        last_visited_at=doc["last_visited_at"],
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at", doc["last_visited_at"]),
    )


def as_object_id(item_id: Any) -> Any:
    """Blog ids are ObjectIds in the catalog; anything else is matched verbatim."""
    if isinstance(item_id, str) and ObjectId.is_valid(item_id):
        return ObjectId(item_id)
    return item_id


class MongoActivityRepository(ActivityRepository):
    def __init__(self, collection):
        self.collection = collection

    async def upsert(self, event: ActivityEvent, now: datetime) -> ActivityRecord:
        query = {"user": event.user, "item": event.item}
        update = build_activity_update(event, now)
        try:
            try:
                doc = await self._apply(query, update)
            except DuplicateKeyError:
                # Two first events for the pair raced on insert; the loser merges.
                logger.warning(f"Upsert race on activity {event.user}/{event.item}, retrying")
                doc = await self._apply(query, update)
        except PyMongoError as e:
            logger.error(f"Error tracking activity: {str(e)}")
            raise TransientStoreError("track_activity", str(e)) from e
        return _record_from_document(doc)

    async def _apply(self, query, update):
        return await self.collection.find_one_and_update(
            query,
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def find_by_user(self, user: str) -> List[ActivityRecord]:
        try:
            cursor = self.collection.find({"user": user}).sort("last_visited_at", -1)
            return [_record_from_document(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Error loading activity for user {user}: {str(e)}")
            raise TransientStoreError("find_by_user", str(e)) from e

    async def aggregate_trending(
        self,
        since: datetime,
        window_field: str,
        weights: TrendingWeights,
        limit: int,
    ) -> List[TrendingEntry]:
        pipeline = build_trending_pipeline(since, window_field, weights, limit)
        try:
            entries = []
            async for doc in self.collection.aggregate(pipeline):
                entries.append(TrendingEntry(
                    item=str(doc["_id"]),
                    total_visits=doc["total_visits"],
                    avg_read_percentage=doc["avg_read_percentage"] or 0.0,
                    comment_count=doc["comment_count"],
                    like_count=doc["like_count"],
                    share_count=doc["share_count"],
                    engagement_score=doc["engagement_score"],
                ))
            return entries
        except PyMongoError as e:
            logger.error(f"Error aggregating trending activity: {str(e)}")
            raise TransientStoreError("aggregate_trending", str(e)) from e


class MongoContentRepository(ContentRepository):
    def __init__(self, collection, authors=None):
        self.collection = collection
        # Blog authors are references into the users collection
        self.authors = authors

    async def exists(self, item_id: str) -> bool:
        try:
            doc = await self.collection.find_one({"_id": as_object_id(item_id)}, {"_id": 1})
        except PyMongoError as e:
            raise TransientStoreError("content_exists", str(e)) from e
        return doc is not None

    async def find_by_ids(self, item_ids: Sequence[str]) -> List[ContentItem]:
        if not item_ids:
            return []
        try:
            cursor = self.collection.find({"_id": {"$in": [as_object_id(i) for i in item_ids]}})
            docs = [doc async for doc in cursor]
            await self._populate_authors(docs)
        except PyMongoError as e:
            raise TransientStoreError("find_by_ids", str(e)) from e
        by_id = {}
        for doc in docs:
            item = ContentItem.from_document(doc)
            by_id[item.id] = item
        return [by_id[i] for i in item_ids if i in by_id]

    async def find_matching(
        self,
        categories: Sequence[str],
        tags: Sequence[str],
        exclude: Iterable[str],
        limit: int,
    ) -> List[ContentItem]:
        clauses = []
        if categories:
            clauses.append({"category": {"$in": list(categories)}})
        if tags:
            clauses.append({"tags": {"$in": list(tags)}})
        if not clauses or limit <= 0:
            return []
        query = {"_id": {"$nin": [as_object_id(i) for i in exclude]}, "$or": clauses}
        return await self._find(query, limit, "find_matching")

    async def find_recent(self, limit: int, exclude: Iterable[str] = ()) -> List[ContentItem]:
        if limit <= 0:
            return []
        excluded = [as_object_id(i) for i in exclude]
        query = {"_id": {"$nin": excluded}} if excluded else {}
        return await self._find(query, limit, "find_recent")

    async def _find(self, query, limit, operation) -> List[ContentItem]:
        try:
            cursor = self.collection.find(query).sort("createdAt", -1).limit(limit)
            docs = [doc async for doc in cursor]
            await self._populate_authors(docs)
        except PyMongoError as e:
            raise TransientStoreError(operation, str(e)) from e
        return [ContentItem.from_document(doc) for doc in docs]

    async def _populate_authors(self, docs: List[Dict[str, Any]]) -> None:
        """Replace author references with {name} sub-documents, in place."""
        author_ids = {doc["author"] for doc in docs if isinstance(doc.get("author"), ObjectId)}
        if not author_ids or self.authors is None:
            return
        cursor = self.authors.find({"_id": {"$in": list(author_ids)}}, {"name": 1})
        names = {user["_id"]: user.get("name") async for user in cursor}
        for doc in docs:
            author = doc.get("author")
            if isinstance(author, ObjectId):
                doc["author"] = {"name": names.get(author)}
