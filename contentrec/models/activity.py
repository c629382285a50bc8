from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Interactions(BaseModel):
    liked: bool = False
    commented: bool = False
    shared: bool = False


class ActivityRecord(BaseModel):
    """Accumulated engagement of one user with one item."""
    user: str
    item: str
    time_spent_seconds: int = 0
    read_percentage: float = 0.0
    interactions: Interactions = Field(default_factory=Interactions)
    visit_count: int = 1
    last_visited_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True


class ActivityEvent(BaseModel):
    """One tracking call. Absent values count as zero/false for this call only."""
    user: str
    item: str
    time_spent_seconds: int = 0
    read_percentage: float = 0.0
    liked: bool = False
    commented: bool = False
    shared: bool = False


class TrackActivityRequest(BaseModel):
    blog_id: str = Field(..., min_length=1)
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds spent on the article")
    read_percentage: Optional[float] = Field(None, ge=0, le=100)
    liked: Optional[bool] = None
    commented: Optional[bool] = None
    shared: Optional[bool] = None


class TrackActivityResponse(BaseModel):
    success: bool = True
    visit_count: int
