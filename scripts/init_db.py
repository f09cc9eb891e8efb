import asyncio
import sys
from pathlib import Path

from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from vidtube.db.database import get_engine, init_models


async def main():
    logger.info("Creating database schema...")

    engine = get_engine()
    try:
        await init_models(engine)
        logger.success("Database schema is up to date")
    except Exception as e:
        logger.exception(f"Error creating database schema: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
