from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..models.activity import ActivityRecord
from ..models.content import ContentItem
from ..models.recommendation import InterestProfile, WeightedTerm
from .scoring import InterestWeights, activity_engagement_score


@dataclass
class JoinedActivity:
    """An activity record together with the catalog entry it points at."""
    record: ActivityRecord
    content: Optional[ContentItem]


def _top(totals: Dict[str, float], n: int) -> List[WeightedTerm]:
    # sorted() is stable, so equal scores keep first-seen order
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [WeightedTerm(name=name, weight=weight) for name, weight in ranked[:n]]


def extract_interests(
    activities: Iterable[JoinedActivity],
    weights: InterestWeights = InterestWeights(),
) -> InterestProfile:
    """Accumulate engagement per category and per tag and keep the strongest ones.

    Every activity adds its score once to its item's category and once to each
    of the item's tags. Activities whose item has left the catalog carry no
    metadata and are skipped.
    """
    categories: Dict[str, float] = {}
    tags: Dict[str, float] = {}

    for activity in activities:
        if activity.content is None:
            continue
        score = activity_engagement_score(activity.record, weights)

        category = activity.content.category
        if category:
            categories[category] = categories.get(category, 0.0) + score

        for tag in activity.content.tags:
            tags[tag] = tags.get(tag, 0.0) + score

    return InterestProfile(
        categories=_top(categories, weights.max_categories),
        tags=_top(tags, weights.max_tags),
    )
