# backend/reports_studio/models/__init__.py
from .store_entry import StoreEntry
