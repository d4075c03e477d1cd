import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from conftest import run
from reports_studio.crud.crud_branding import BrandingRepository
from reports_studio.crud.crud_store import BRANDING_KEY, SqlKeyValueStore, get_entry
from reports_studio.db.base_class import Base


async def _sqlite_store(path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    return engine, session_factory, SqlKeyValueStore(session_factory)


class TestSqlKeyValueStore:
    def test_write_replaces_existing_row(self, tmp_path):
        async def scenario():
            engine, session_factory, store = await _sqlite_store(tmp_path / "studio.db")
            try:
                await store.write("settings:v1", {"settings": {"apiToken": "a"}})
                await store.write("settings:v1", {"settings": {"apiToken": "b"}}, schema_version=2)
                async with session_factory() as db:
                    entry = await get_entry(db, "settings:v1")
                return await store.read("settings:v1"), entry.schema_version
            finally:
                await engine.dispose()

        value, schema_version = run(scenario())
        assert value == {"settings": {"apiToken": "b"}}
        assert schema_version == 2

    def test_missing_key_reads_none(self, tmp_path):
        async def scenario():
            engine, _, store = await _sqlite_store(tmp_path / "studio.db")
            try:
                return await store.read("templates:v1")
            finally:
                await engine.dispose()

        assert run(scenario()) is None


class TestWriteThrough:
    def test_quick_edits_on_a_new_key_keep_the_latest(self, tmp_path):
        async def scenario():
            engine, _, store = await _sqlite_store(tmp_path / "studio.db")
            try:
                repo = BrandingRepository(store)
                repo.patch({"tel": "1"})
                for _ in range(3):
                    await asyncio.sleep(0)
                repo.patch({"tel": "2"})
                await asyncio.gather(*repo._pending)
                return await store.read(BRANDING_KEY), repo._dirty
            finally:
                await engine.dispose()

        stored, dirty = run(scenario())
        assert stored["branding"]["tel"] == "2"
        assert dirty is False

    def test_saves_run_in_commit_order(self, store):
        writes = []
        original_write = store.write

        async def recording_write(key, value, schema_version=1):
            writes.append(value["branding"]["tel"])
            await asyncio.sleep(0)
            await original_write(key, value, schema_version=schema_version)

        store.write = recording_write

        async def scenario():
            repo = BrandingRepository(store)
            for tel in ("1", "2", "3"):
                repo.patch({"tel": tel})
            await repo.flush()
            return await store.read(BRANDING_KEY)

        assert run(scenario())["branding"]["tel"] == "3"
        assert writes[-1] == "3"
