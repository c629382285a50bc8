from datetime import datetime, timedelta, timezone
import random
from typing import Dict, List, Sequence

from bson import ObjectId

from ..services.activity_service import ActivityService

# Sample blog categories and tags
CATEGORIES = ["Technology", "Science", "Business", "Health", "Travel"]
TAGS = {
    "Technology": ["AI", "Programming", "Web Development", "Cloud", "Cybersecurity"],
    "Science": ["Physics", "Biology", "Space", "Research", "Innovation"],
    "Business": ["Startups", "Finance", "Marketing", "Leadership", "Innovation"],
    "Health": ["Wellness", "Nutrition", "Mental Health", "Fitness"],
    "Travel": ["Europe", "Asia", "Budget", "Food", "Photography"]
}


def generate_sample_blogs(num_items: int = 40, rng: random.Random = None) -> List[Dict]:
    """Blog documents shaped like the catalog's collection."""
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    blogs = []

    for i in range(num_items):
        category = rng.choice(CATEGORIES)
        tags = rng.sample(TAGS[category], rng.randint(1, 3))
        created = now - timedelta(days=rng.randint(0, 60), minutes=i)

        blogs.append({
            "_id": ObjectId(),
            "title": f"Sample Post {i + 1}: {category}",
            "excerpt": f"A {category.lower()} post about {', '.join(tags)}.",
            "content": f"Sample body for post {i + 1}.",
            "category": category,
            "tags": tags,
            "author": f"Author {rng.randint(1, 5)}",
            "readTime": f"{rng.randint(3, 15)} min read",
            "coverImage": None,
            "createdAt": created,
        })

    return blogs


async def seed_activity(
    service: ActivityService,
    user_ids: Sequence[str],
    blog_ids: Sequence[str],
    num_events: int = 200,
    rng: random.Random = None,
) -> int:
    """Replay random reading sessions through the tracking path. Returns events sent."""
    rng = rng or random.Random()
    for _ in range(num_events):
        await service.track_activity(
            user=rng.choice(user_ids),
            item=rng.choice(blog_ids),
            time_spent_seconds=rng.randint(5, 600),
            read_percentage=round(rng.uniform(5, 100), 1),
            liked=rng.random() < 0.25,
            commented=rng.random() < 0.08,
            shared=rng.random() < 0.05,
        )
    return num_events
