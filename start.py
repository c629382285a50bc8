import os
import sys
import logging
from dotenv import load_dotenv
import uvicorn
import asyncio

# Load environment variables before settings are imported
load_dotenv()

from contentrec.core.config import settings  # noqa: E402
from contentrec.db.mongodb import mongodb  # noqa: E402

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def check_database_connection():
    """Check if database connection is working"""
    try:
        await mongodb.connect()
        await mongodb.ping()
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        return False
    finally:
        await mongodb.close()


async def startup_checks():
    """Perform all startup checks"""
    logger.info("Starting application initialization...")
    if settings.STORE_BACKEND == "memory":
        logger.info("In-memory store selected, skipping database checks")
        return True

    logger.info("Checking database connection...")
    if not await check_database_connection():
        logger.error("Startup checks failed: no database connection")
        return False

    logger.info("All startup checks passed successfully")
    return True


if __name__ == "__main__":
    if not asyncio.run(startup_checks()):
        logger.error("Startup checks failed, exiting...")
        sys.exit(1)

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(
        "contentrec.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ENVIRONMENT") == "development",
        workers=int(os.getenv("WEB_CONCURRENCY", 1)),
        log_level=settings.LOG_LEVEL.lower()
    )
