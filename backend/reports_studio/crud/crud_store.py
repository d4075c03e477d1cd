# backend/reports_studio/crud/crud_store.py
"""Key-value persistence for the studio's collections (templates, branding, settings)."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import func

from reports_studio.models.store_entry import StoreEntry as StoreEntryModel

logger = logging.getLogger(__name__)

TEMPLATES_KEY = "templates:v1"
BRANDING_KEY = "branding:v1"
SETTINGS_KEY = "settings:v1"


class KeyValueStore(Protocol):
    async def read(self, key: str) -> Optional[Any]:
        ...

    async def write(self, key: str, value: Any, schema_version: int = 1) -> None:
        ...


async def get_entry(db: AsyncSession, key: str) -> Optional[StoreEntryModel]:
    """
    Get a single store entry by its key.
    """
    result = await db.execute(select(StoreEntryModel).filter(StoreEntryModel.key == key))
    return result.scalars().first()


UPSERT_DIALECTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


async def put_entry(db: AsyncSession, *, key: str, value_json: str, schema_version: int = 1) -> StoreEntryModel:
    """
    Insert or replace the entry stored under ``key`` in one statement.
    """
    insert = UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is None:
        db_obj = await get_entry(db, key)
        if db_obj is None:
            db_obj = StoreEntryModel(key=key, schema_version=schema_version, value_json=value_json)
        else:
            db_obj.schema_version = schema_version
            db_obj.value_json = value_json
            db_obj.saved_at = datetime.now(timezone.utc)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    stmt = insert(StoreEntryModel).values(key=key, schema_version=schema_version, value_json=value_json)
    stmt = stmt.on_conflict_do_update(
        index_elements=["key"],
        set_={"schema_version": stmt.excluded.schema_version, "value_json": stmt.excluded.value_json,
              "saved_at": func.now()},
    )
    await db.execute(stmt)
    await db.commit()
    return await get_entry(db, key)


class SqlKeyValueStore:
    """Stores one JSON document per key in the ``storeentrys`` table."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def read(self, key: str) -> Optional[Any]:
        async with self._session_factory() as db:
            db_obj = await get_entry(db, key)
        if db_obj is None:
            return None
        try:
            return json.loads(db_obj.value_json)
        except ValueError:
            logger.warning(f"Stored value under '{key}' is not valid JSON; ignoring it.")
            return None

    async def write(self, key: str, value: Any, schema_version: int = 1) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        async with self._session_factory() as db:
            await put_entry(db, key=key, value_json=payload, schema_version=schema_version)


class MemoryKeyValueStore:
    """In-process store; values are kept as JSON text so reads never alias writes."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Tuple[int, str]] = {}
        for key, value in (initial or {}).items():
            self._data[key] = (1, json.dumps(value, ensure_ascii=False))

    async def read(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            return None
        return json.loads(entry[1])

    async def write(self, key: str, value: Any, schema_version: int = 1) -> None:
        self._data[key] = (schema_version, json.dumps(value, ensure_ascii=False))

    def raw(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        return None if entry is None else json.loads(entry[1])
