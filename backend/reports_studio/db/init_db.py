import asyncio
import logging

from reports_studio.db.session import engine, SessionLocal
from reports_studio.db.base_class import Base
# Import models here so Base knows about them
from reports_studio.models.store_entry import StoreEntry  # noqa: F401

logger = logging.getLogger(__name__)


async def init_db():
    logger.info("Initializing database...")
    if not engine:
        logger.error("Database engine (from reports_studio.db.session) is not initialized. Cannot create tables.")
        return

    async with engine.begin() as conn:
        try:
            logger.info("Creating all tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
        except Exception as e:
            logger.error(f"Error during table creation: {e}")
            raise

    logger.info("Database initialization complete.")


async def seed_studio(studio) -> None:
    """Load the persisted collections and reconcile the shipped default templates."""
    await studio.load()
    studio.refresh_defaults()
    await studio.flush()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
    main_logger = logging.getLogger("__main__")

    from reports_studio.core.config import settings
    from reports_studio.crud.crud_store import SqlKeyValueStore
    from reports_studio.services.studio import Studio

    if not settings.DATABASE_URL or not engine:
        main_logger.error("Database engine is not configured. Exiting.")
    else:
        async def _main():
            await init_db()
            await seed_studio(Studio(SqlKeyValueStore(SessionLocal)))

        try:
            asyncio.run(_main())
        except Exception as e:
            main_logger.error(f"An error occurred during database initialization: {e}")
            raise
