import os
from typing import Literal

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Content Recommendation Engine"
    API_V1_STR: str = "/api/v1"
    VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = Field(True, description="Emit JSON log lines from the package logger")

    # Storage backend: "mongodb" in production, "memory" for local runs and tests
    STORE_BACKEND: Literal["mongodb", "memory"] = Field(
        "mongodb",
        description="Which repository implementation backs the engine"
    )

    # MongoDB Configuration
    MONGODB_URI: str = Field(
        "mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    MONGODB_DB_NAME: str = Field(
        "blog_platform",
        description="MongoDB database name"
    )
    MONGODB_POOL_SIZE: int = 5
    MONGODB_CONNECT_TIMEOUT_MS: int = 5000
    MONGODB_SOCKET_TIMEOUT_MS: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    # Kept apart from the legacy "useractivities" collection, whose documents use another schema
    ACTIVITY_COLLECTION: str = "content_activity"
    CONTENT_COLLECTION: str = "blogs"
    USER_COLLECTION: str = "users"

    @validator("MONGODB_URI")
    def validate_mongodb_uri(cls, v):
        if not v.startswith("mongodb://") and not v.startswith("mongodb+srv://"):
            raise ValueError("MongoDB URI must start with mongodb:// or mongodb+srv://")
        return v

    # Redis Configuration
    REDIS_URL: str = Field(
        "redis://localhost:6379/0",
        description="Full Redis connection URL including credentials"
    )
    REDIS_TIMEOUT: int = 5

    # Interest extraction
    INTEREST_LIKE_WEIGHT: float = 0.3
    INTEREST_COMMENT_WEIGHT: float = 0.5
    INTEREST_SHARE_WEIGHT: float = 0.7
    INTEREST_MAX_CATEGORIES: int = 5
    INTEREST_MAX_TAGS: int = 10

    # Trending aggregation
    TRENDING_WINDOW_DAYS: int = 7
    TRENDING_WINDOW_FIELD: Literal["created_at", "last_visited_at"] = Field(
        "created_at",
        description="Activity timestamp the rolling window is applied to"
    )
    TRENDING_VISIT_WEIGHT: float = 1.0
    TRENDING_READ_WEIGHT: float = 0.5
    TRENDING_COMMENT_WEIGHT: float = 5.0
    TRENDING_LIKE_WEIGHT: float = 3.0
    TRENDING_SHARE_WEIGHT: float = 4.0
    TRENDING_CANDIDATE_MULTIPLIER: int = Field(
        2,
        description="Candidates fetched per requested item before exclusion filtering"
    )
    TRENDING_CACHE_TTL: int = Field(
        0,
        description="Seconds the aggregated trending ranking is cached in Redis, 0 disables"
    )

    # In-memory backend only: sample blogs generated at startup
    MEMORY_SEED_BLOGS: int = 0

    # API Configuration
    DEFAULT_LIMIT: int = 5
    MAX_LIMIT: int = 50
    USER_ID_HEADER: str = Field(
        "X-User-Id",
        description="Header the identity layer uses to hand over the authenticated user id"
    )
    TRENDING_RATE_LIMIT: str = "60/minute"
    FRONTEND_URL: str = "http://localhost:3000"

    class Config:
        # Set env_file only if it exists to avoid warnings
        env_file = ".env" if os.path.isfile(".env") else None
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"
        validate_assignment = True


settings = Settings()
