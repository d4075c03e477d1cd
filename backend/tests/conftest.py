import asyncio

import pytest
from fastapi.testclient import TestClient

from reports_studio.api import deps
from reports_studio.crud.crud_store import MemoryKeyValueStore
from reports_studio.crud.crud_template import TemplateRepository
from reports_studio.db.default_templates import DEFAULT_TEMPLATES
from reports_studio.main import app
from reports_studio.schemas.studio_settings import StudioSettings
from reports_studio.services.document_provider import SampleDocumentProvider
from reports_studio.services.studio import Studio


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def repo(store):
    templates = TemplateRepository(store)
    templates.ensure_defaults(DEFAULT_TEMPLATES)
    return templates


@pytest.fixture
def custom_id(repo):
    return repo.create_from_default("quotation_default_v1")


@pytest.fixture
def sample():
    return SampleDocumentProvider()


@pytest.fixture
def studio(store):
    studio = Studio(store, settings_defaults=StudioSettings())
    studio.refresh_defaults()
    return studio


class FakeExporter:
    """Records export calls instead of talking to a PDF service."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    async def export(self, template, dto, branding, record_id):
        self.calls.append((template.id, record_id))
        return self.outcome


@pytest.fixture
def client(studio):
    app.dependency_overrides[deps.get_studio] = lambda: studio
    yield TestClient(app)
    app.dependency_overrides.clear()
