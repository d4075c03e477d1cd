# backend/reports_studio/services/studio.py
import asyncio
import logging
from typing import Optional

import httpx

from reports_studio.crud.crud_branding import BrandingRepository
from reports_studio.crud.crud_settings import SettingsRepository
from reports_studio.crud.crud_store import KeyValueStore
from reports_studio.crud.crud_template import TemplateRepository
from reports_studio.db.default_templates import DEFAULT_TEMPLATES
from reports_studio.schemas.studio_settings import StudioSettings
from reports_studio.services.branding_editor import DebouncedBrandingEditor
from reports_studio.services.document_provider import DocumentProvider, SampleDocumentProvider, provider_from_settings

logger = logging.getLogger(__name__)


class Studio:
    """The repositories of one install, sharing a single key-value store."""

    def __init__(self, store: KeyValueStore, settings_defaults: Optional[StudioSettings] = None):
        self.store = store
        self.templates = TemplateRepository(store)
        self.branding = BrandingRepository(store)
        self.settings = SettingsRepository(store, defaults=settings_defaults)
        self.branding_editor = DebouncedBrandingEditor(self.branding)
        self.sample_provider = SampleDocumentProvider()

    async def load(self) -> None:
        await asyncio.gather(self.templates.load(), self.branding.load(), self.settings.load())
        logger.info(f"Studio loaded with {len(self.templates.templates)} templates.")

    def refresh_defaults(self):
        return self.templates.ensure_defaults(DEFAULT_TEMPLATES)

    async def flush(self) -> None:
        self.branding_editor.flush()
        await asyncio.gather(self.templates.flush(), self.branding.flush(), self.settings.flush())

    def provider(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> DocumentProvider:
        return provider_from_settings(self.settings.get(), transport=transport)
