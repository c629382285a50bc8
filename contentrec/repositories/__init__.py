from .base import ActivityRepository, ContentRepository
from .memory import InMemoryActivityRepository, InMemoryContentRepository
from .mongo import MongoActivityRepository, MongoContentRepository

__all__ = [
    'ActivityRepository',
    'ContentRepository',
    'InMemoryActivityRepository',
    'InMemoryContentRepository',
    'MongoActivityRepository',
    'MongoContentRepository'
]
