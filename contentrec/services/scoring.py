"""
Engagement scoring shared by interest extraction and trending aggregation.

Both scores are plain weighted sums. The weights are hand-tuned and therefore
live in settings; these dataclasses are the resolved, immutable view of them
that the services and repositories pass around.
"""

from dataclasses import dataclass

from ..core.config import Settings, settings as default_settings
from ..models.activity import ActivityRecord
from ..models.recommendation import TrendingEntry


@dataclass(frozen=True)
class InterestWeights:
    like: float = 0.3
    comment: float = 0.5
    share: float = 0.7
    max_categories: int = 5
    max_tags: int = 10

    @classmethod
    def from_settings(cls, s: Settings = default_settings) -> "InterestWeights":
        return cls(
            like=s.INTEREST_LIKE_WEIGHT,
            comment=s.INTEREST_COMMENT_WEIGHT,
            share=s.INTEREST_SHARE_WEIGHT,
            max_categories=s.INTEREST_MAX_CATEGORIES,
            max_tags=s.INTEREST_MAX_TAGS,
        )


@dataclass(frozen=True)
class TrendingWeights:
    visit: float = 1.0
    read: float = 0.5
    comment: float = 5.0
    like: float = 3.0
    share: float = 4.0

    @classmethod
    def from_settings(cls, s: Settings = default_settings) -> "TrendingWeights":
        return cls(
            visit=s.TRENDING_VISIT_WEIGHT,
            read=s.TRENDING_READ_WEIGHT,
            comment=s.TRENDING_COMMENT_WEIGHT,
            like=s.TRENDING_LIKE_WEIGHT,
            share=s.TRENDING_SHARE_WEIGHT,
        )


def activity_engagement_score(record: ActivityRecord, weights: InterestWeights) -> float:
    """Read depth in [0, 1] plus a fixed bonus per interaction flag."""
    flags = record.interactions
    score = record.read_percentage / 100
    if flags.liked:
        score += weights.like
    if flags.commented:
        score += weights.comment
    if flags.shared:
        score += weights.share
    return score


def trending_engagement_score(entry: TrendingEntry, weights: TrendingWeights) -> float:
    return (
        entry.total_visits * weights.visit
        + entry.avg_read_percentage * weights.read
        + entry.comment_count * weights.comment
        + entry.like_count * weights.like
        + entry.share_count * weights.share
    )
