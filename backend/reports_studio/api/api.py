# backend/reports_studio/api/api.py
from fastapi import APIRouter

from reports_studio.api.endpoints import templates
from reports_studio.api.endpoints import branding
from reports_studio.api.endpoints import studio_settings
from reports_studio.api.endpoints import documents
from reports_studio.api.endpoints import print_pdf
from reports_studio.api.endpoints import palette

api_router = APIRouter()

api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(branding.router, prefix="/branding", tags=["Branding"])
api_router.include_router(studio_settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(print_pdf.router, prefix="/print", tags=["Print"])
api_router.include_router(palette.router, prefix="/palette", tags=["Palette"])
