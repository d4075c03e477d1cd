from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path
import logging
import urllib.parse

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = "Reports Studio API"
    PROJECT_VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    SERVER_HOST: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    # Local store. Postgres is used when all POSTGRES_* parts are provided,
    # otherwise a SQLite file next to the backend.
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_PORT: int = 5432
    SQLITE_PATH: Path = BACKEND_DIR / "reports_studio.db"
    DATABASE_URL: Optional[str] = None  # Will be constructed when not given

    # Document data source (ERP reports endpoints)
    ODOO_BASE_URL: str = ""
    ODOO_API_TOKEN: str = ""
    DTO_TIMEOUT_MS: int = 12_000

    # PDF export
    PDF_SERVICE_URL: str = "/api/v1/print/pdf"
    PDF_TIMEOUT_MS: int = 30_000
    PDF_OUTPUT_SUBDIR: str = "pdfs"
    # Generated PDFs older than this are removed; 0 keeps them forever
    PDF_RETENTION_HOURS: int = 24

    # Branding profile edits are committed this long after the last keystroke
    BRANDING_DEBOUNCE_MS: int = 300

    model_config = SettingsConfigDict(
        env_file=BACKEND_DIR.parent / ".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )


settings = Settings()

# Construct DATABASE_URL after settings are loaded
if not settings.DATABASE_URL:
    if settings.POSTGRES_USER and settings.POSTGRES_PASSWORD and \
       settings.POSTGRES_SERVER and settings.POSTGRES_DB:
        encoded_password = urllib.parse.quote_plus(settings.POSTGRES_PASSWORD)
        settings.DATABASE_URL = (
            f"postgresql+asyncpg://{settings.POSTGRES_USER}:{encoded_password}@"
            f"{settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
        )
    else:
        settings.DATABASE_URL = f"sqlite+aiosqlite:///{settings.SQLITE_PATH}"


if not settings.ODOO_BASE_URL:
    logger.info("ODOO_BASE_URL is not set. Documents will be rendered from sample data.")
