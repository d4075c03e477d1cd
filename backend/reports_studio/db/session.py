import logging

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from reports_studio.core.config import settings

logger = logging.getLogger(__name__)

engine = None
SessionLocal = None

if not settings.DATABASE_URL:
    logger.error("DATABASE_URL is not set. Please check your environment variables and configuration.")
else:
    # Mask password in log
    display_db_url = settings.DATABASE_URL
    if settings.POSTGRES_PASSWORD:
        display_db_url = display_db_url.replace(settings.POSTGRES_PASSWORD, "********")
    logger.info(f"Configuring database engine for: {display_db_url}")

    try:
        engine = create_async_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,
        )
        SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    except Exception as e:
        logger.error(f"Failed to create database engine or SessionLocal: {e}")

