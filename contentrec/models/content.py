from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field


class ContentItem(BaseModel):
    """Blog summary as served to clients. The catalog owns the full document."""
    id: str
    title: str
    excerpt: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    author: Optional[str] = None
    read_time: Optional[str] = None
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_document(cls, doc: dict) -> "ContentItem":
        author = doc.get("author")
        if isinstance(author, dict):
            author = author.get("name")
        elif isinstance(author, ObjectId):
            # Unresolved user reference, never shown as a raw id
            author = None
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title", ""),
            excerpt=doc.get("excerpt"),
            category=doc.get("category"),
            tags=list(doc.get("tags") or []),
            author=str(author) if author is not None else None,
            read_time=doc.get("readTime"),
            cover_image=doc.get("coverImage"),
            created_at=doc.get("createdAt"),
        )
