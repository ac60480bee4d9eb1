import logging
import sys

import uvicorn

import config
from clock.scheduler import PoemScheduler
from clock.slots import PoemCache
from db.database import Database
from processing.generator import PoemGenerator
from server.app import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("poemclock")


def main():
    if not config.OPENROUTER_API_KEY:
        logger.error("OPENROUTER_API_KEY environment variable is not set")
        logger.error("Create a .env file with your OpenRouter API key")
        sys.exit(1)

    # Initialize components
    db = Database(config.DB_PATH)
    logger.info("Database initialized at: %s", config.DB_PATH)
    generator = PoemGenerator(
        api_key=config.OPENROUTER_API_KEY,
        model=config.OPENROUTER_MODEL,
        api_url=config.OPENROUTER_API_URL,
        app_url=config.APP_URL,
        timeout=config.REQUEST_TIMEOUT,
    )
    cache = PoemCache()
    scheduler = PoemScheduler(
        generator,
        db,
        cache,
        retention_hours=config.POEM_RETENTION_HOURS,
        prefetch_second=config.PREFETCH_SECOND,
        startup_prefetch_delay=config.STARTUP_PREFETCH_DELAY,
    )

    app = create_app(db, cache, config.OPENROUTER_MODEL, config.POEM_RETENTION_HOURS)

    server = uvicorn.Server(uvicorn.Config(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="warning",
    ))

    logger.info("Poem Clock running on http://%s:%d", config.HOST, config.PORT)
    logger.info("Using OpenRouter model: %s", config.OPENROUTER_MODEL)
    logger.info("Database retention: %d hours", config.POEM_RETENTION_HOURS)

    scheduler.start()
    try:
        # Blocks until SIGINT/SIGTERM
        server.run()
    finally:
        logger.info("Shutting down gracefully...")
        scheduler.stop()
        db.close()


if __name__ == "__main__":
    main()
