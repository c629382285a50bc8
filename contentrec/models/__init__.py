from .activity import ActivityEvent, ActivityRecord, Interactions, TrackActivityRequest, TrackActivityResponse
from .content import ContentItem
from .recommendation import InterestProfile, RecommendationsResponse, TrendingEntry, WeightedTerm

__all__ = [
    'ActivityEvent',
    'ActivityRecord',
    'Interactions',
    'TrackActivityRequest',
    'TrackActivityResponse',
    'ContentItem',
    'InterestProfile',
    'RecommendationsResponse',
    'TrendingEntry',
    'WeightedTerm'
]
