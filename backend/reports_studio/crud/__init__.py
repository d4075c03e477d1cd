# backend/reports_studio/crud/__init__.py
from . import crud_store as store
from . import crud_template as template
from . import crud_branding as branding
from . import crud_settings as settings

from .crud_store import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore
from .crud_template import TemplateRepository, reconcile_defaults, clone_template
from .crud_branding import BrandingRepository
from .crud_settings import SettingsRepository
