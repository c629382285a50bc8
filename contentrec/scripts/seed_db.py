import argparse
import asyncio
import logging
import random
import sys

from contentrec.core.config import settings
from contentrec.core.logging import setup_logging
from contentrec.data.seed import generate_sample_blogs, seed_activity
from contentrec.db.mongodb import mongodb
from contentrec.services.engine import build_mongo_engine

logger = logging.getLogger("contentrec.scripts.seed_db")


async def main(num_blogs: int, num_users: int, num_events: int, seed: int) -> bool:
    logger.info("Starting database seeding process...")
    rng = random.Random(seed)

    try:
        await mongodb.connect()
        await mongodb.ensure_indexes()
        db = mongodb.get_db()

        blogs = generate_sample_blogs(num_blogs, rng)
        await db[settings.CONTENT_COLLECTION].insert_many(blogs)
        logger.info(f"Inserted {len(blogs)} blogs")

        engine = build_mongo_engine(settings, db)
        users = [f"demo-user-{i + 1}" for i in range(num_users)]
        sent = await seed_activity(
            engine.activity_service,
            users,
            [str(b["_id"]) for b in blogs],
            num_events=num_events,
            rng=rng,
        )
        logger.info(f"Tracked {sent} activity events for {len(users)} users")
        return True
    except Exception as e:
        logger.error(f"Error during database seeding: {str(e)}")
        return False
    finally:
        await mongodb.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed MongoDB with sample blogs and reading activity")
    parser.add_argument("--blogs", type=int, default=40)
    parser.add_argument("--users", type=int, default=5)
    parser.add_argument("--events", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    setup_logging()
    success = asyncio.run(main(args.blogs, args.users, args.events, args.seed))
    sys.exit(0 if success else 1)
