# backend/reports_studio/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from reports_studio.api import api_router
from reports_studio.api.endpoints import pages
from reports_studio.core.config import settings
from reports_studio.crud.crud_store import MemoryKeyValueStore, SqlKeyValueStore
from reports_studio.db.init_db import init_db, seed_studio
from reports_studio.db.session import SessionLocal
from reports_studio.services.studio import Studio
from reports_studio.services.pdf_export import PDF_DIR, prune_pdfs
from reports_studio.services.templating import STATIC_DIR

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    PDF_DIR.mkdir(parents=True, exist_ok=True)
    prune_pdfs()
    if SessionLocal is None:
        logger.warning("No database configured; templates and branding will not survive a restart.")
        studio = Studio(MemoryKeyValueStore())
    else:
        await init_db()
        studio = Studio(SqlKeyValueStore(SessionLocal))
    await seed_studio(studio)
    app.state.studio = studio
    logger.info(f"{settings.PROJECT_NAME} started with {len(studio.templates.templates)} templates.")
    yield
    await studio.flush()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

origins = [
    "http://localhost:5173",  # Vite dev server of the editor UI
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(pages.router, tags=["Pages"])


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    """
    return {"status": "ok", "message": f"{settings.PROJECT_NAME} is healthy!"}
