from typing import List

from pydantic import BaseModel, Field

from .content import ContentItem


class WeightedTerm(BaseModel):
    name: str
    weight: float


class InterestProfile(BaseModel):
    categories: List[WeightedTerm] = Field(default_factory=list)
    tags: List[WeightedTerm] = Field(default_factory=list)

    @property
    def category_names(self) -> List[str]:
        return [c.name for c in self.categories]

    @property
    def tag_names(self) -> List[str]:
        return [t.name for t in self.tags]

    def is_empty(self) -> bool:
        return not self.categories and not self.tags


class TrendingEntry(BaseModel):
    item: str
    total_visits: int = 0
    avg_read_percentage: float = 0.0
    comment_count: int = 0
    like_count: int = 0
    share_count: int = 0
    engagement_score: float = 0.0


class RecommendationsResponse(BaseModel):
    """Response model for personalized and trending lists"""
    items: List[ContentItem]
    strategy: str
    total: int
