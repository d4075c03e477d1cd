import pytest

from conftest import run
from reports_studio.core.errors import BlockNotFoundError, ReadOnlyTemplateError, TemplateNotFoundError, ValidationError
from reports_studio.crud.crud_store import TEMPLATES_KEY, MemoryKeyValueStore
from reports_studio.crud.crud_template import TemplateRepository, array_move, reconcile_defaults
from reports_studio.db.default_templates import DEFAULT_TEMPLATES, default_template_ids
from reports_studio.services.editor import create_block


def _ids(templates):
    return [t.id for t in templates]


class TestReconcileDefaults:
    def test_empty_collection_gets_every_default(self):
        result = reconcile_defaults([], DEFAULT_TEMPLATES)
        assert _ids(result) == default_template_ids()
        assert all(t.is_default for t in result)

    def test_reconciling_twice_changes_nothing(self):
        once = reconcile_defaults([], DEFAULT_TEMPLATES)
        assert reconcile_defaults(once, DEFAULT_TEMPLATES) == once

    def test_custom_templates_are_preserved(self, repo, custom_id):
        custom = repo.get(custom_id)
        result = reconcile_defaults(repo.templates, DEFAULT_TEMPLATES)
        assert custom in result

    def test_defaults_no_longer_shipped_are_pruned(self):
        existing = reconcile_defaults([], DEFAULT_TEMPLATES)
        result = reconcile_defaults(existing, DEFAULT_TEMPLATES[:2])
        assert _ids(result) == default_template_ids()[:2]

    def test_stale_default_is_replaced_by_shipped_version(self):
        existing = reconcile_defaults([], DEFAULT_TEMPLATES)
        stale = existing[0].model_copy(update={"name": "Old name"})
        result = reconcile_defaults([stale, *existing[1:]], DEFAULT_TEMPLATES)
        assert result[0].name == DEFAULT_TEMPLATES[0].name

    def test_shipped_entries_are_marked_default(self):
        shipped = DEFAULT_TEMPLATES[0].model_copy(update={"is_default": None})
        assert reconcile_defaults([], [shipped])[0].is_default is True

    def test_custom_template_wins_an_id_collision(self):
        shipped = DEFAULT_TEMPLATES[0]
        custom = shipped.model_copy(update={"is_default": False, "name": "Mine"})
        result = reconcile_defaults([custom], DEFAULT_TEMPLATES)
        assert result[0].name == "Mine"
        assert _ids(result).count(shipped.id) == 1

    def test_quotation_default_theme(self):
        quotation = DEFAULT_TEMPLATES[0]
        assert quotation.theme.header_bar_color == "#26D6F0"
        assert quotation.theme.table_header_bg_color == "#111111"


class TestTemplateRepository:
    def test_get_unknown_id(self, repo):
        with pytest.raises(TemplateNotFoundError):
            repo.get("missing")
        assert repo.find("missing") is None

    def test_list_by_doc_type(self, repo):
        assert _ids(repo.list("trf_receipt")) == ["trf_receipt_default_v1"]
        assert len(repo.list()) == len(DEFAULT_TEMPLATES)

    def test_duplicate(self, repo):
        source = repo.get("quotation_default_v1")
        copy = repo.get(repo.duplicate(source.id))
        assert copy.id != source.id
        assert copy.name == "Quotation (Default v1) (Copy)"
        assert copy.is_default is False
        assert copy.published is False
        assert [b.type for b in copy.blocks] == [b.type for b in source.blocks]
        assert not {b.id for b in copy.blocks} & {b.id for b in source.blocks}

    def test_create_from_default(self, repo, custom_id):
        created = repo.get(custom_id)
        assert created.name == "Quotation (Default v1) (Custom)"
        assert created.doc_type.value == "quotation"

    def test_create_from_default_requires_a_default(self, repo, custom_id):
        with pytest.raises(ValidationError):
            repo.create_from_default(custom_id)

    def test_defaults_are_read_only(self, repo):
        default_id = "quotation_default_v1"
        block_id = repo.get(default_id).blocks[0].id
        with pytest.raises(ReadOnlyTemplateError):
            repo.rename(default_id, "Renamed")
        with pytest.raises(ReadOnlyTemplateError):
            repo.delete(default_id)
        with pytest.raises(ReadOnlyTemplateError):
            repo.toggle_publish(default_id)
        with pytest.raises(ReadOnlyTemplateError):
            repo.update_block(default_id, block_id, {"locked": True})
        with pytest.raises(ReadOnlyTemplateError):
            repo.patch_theme(default_id, {"primaryColor": "#000000"})
        with pytest.raises(ReadOnlyTemplateError):
            repo.upsert(repo.get(default_id).model_copy(update={"name": "x"}))

    def test_rename_and_toggle_publish(self, repo, custom_id):
        assert repo.rename(custom_id, "Price offer").name == "Price offer"
        assert repo.toggle_publish(custom_id).published is True
        assert repo.toggle_publish(custom_id).published is False

    def test_delete(self, repo, custom_id):
        repo.delete(custom_id)
        assert repo.find(custom_id) is None

    def test_upsert_creates_then_replaces(self, repo, custom_id):
        data = repo.get(custom_id).to_json_dict()
        data.update(id="my-template", name="Mine")
        repo.upsert(data)
        assert repo.get("my-template").name == "Mine"
        repo.upsert({**data, "name": "Mine v2"})
        assert repo.get("my-template").name == "Mine v2"
        assert _ids(repo.templates).count("my-template") == 1

    def test_invalid_upsert_leaves_state_untouched(self, repo):
        before = repo.templates
        with pytest.raises(ValidationError):
            repo.upsert({"id": "broken", "name": "Broken"})
        assert repo.templates == before

    def test_add_and_insert_block(self, repo, custom_id):
        count = len(repo.get(custom_id).blocks)
        notes = create_block("notes")
        updated = repo.add_block(custom_id, notes)
        assert updated.blocks[-1].id == notes.id
        stamp = create_block("stamp")
        updated = repo.insert_block(custom_id, stamp, 0)
        assert updated.blocks[0].id == stamp.id
        assert len(updated.blocks) == count + 2

    def test_insert_block_out_of_range_appends(self, repo, custom_id):
        block = create_block("notes")
        assert repo.insert_block(custom_id, block, 99).blocks[-1].id == block.id

    def test_add_block_with_unknown_type_is_rejected(self, repo, custom_id):
        before = repo.get(custom_id)
        with pytest.raises(ValidationError):
            repo.add_block(custom_id, {"id": "x1", "type": "chart", "props": {}})
        assert repo.get(custom_id) == before

    def test_update_block_merges_props(self, repo, custom_id):
        template = repo.get(custom_id)
        title = next(b for b in template.blocks if b.type == "title")
        updated = repo.update_block(custom_id, title.id, {"props": {"titleTh": "ใบเสนอ"}, "id": "ignored"})
        block = updated.blocks[updated.block_index(title.id)]
        assert block.props.title_th == "ใบเสนอ"
        assert block.props.title_en == title.props.title_en

    def test_update_block_accepts_snake_case(self, repo, custom_id):
        block_id = repo.get(custom_id).blocks[0].id
        updated = repo.update_block(custom_id, block_id, {"style": {"padding_px": 12}})
        assert updated.blocks[0].style.padding_px == 12

    def test_unknown_block_is_not_found(self, repo, custom_id):
        before = repo.get(custom_id)
        with pytest.raises(BlockNotFoundError):
            repo.update_block(custom_id, "no-such-block", {"locked": True})
        with pytest.raises(BlockNotFoundError):
            repo.remove_block(custom_id, "no-such-block")
        assert repo.get(custom_id) == before

    def test_remove_block(self, repo, custom_id):
        block_id = repo.get(custom_id).blocks[0].id
        assert repo.remove_block(custom_id, block_id).block_index(block_id) == -1

    def test_partial_reorder_keeps_every_block(self, repo, custom_id):
        template = repo.get(custom_id)
        ids = [b.id for b in template.blocks]
        updated = repo.reorder_blocks(custom_id, [ids[3], ids[0], "unknown"])
        new_ids = [b.id for b in updated.blocks]
        assert len(new_ids) == len(ids)
        assert new_ids[:2] == [ids[3], ids[0]]
        assert new_ids[2:] == [i for i in ids if i not in (ids[3], ids[0])]

    def test_move_block(self, repo, custom_id):
        ids = [b.id for b in repo.get(custom_id).blocks]
        updated = repo.move_block(custom_id, 0, 2)
        assert [b.id for b in updated.blocks] == array_move(ids, 0, 2)

    def test_patch_theme_and_page(self, repo, custom_id):
        assert repo.patch_theme(custom_id, {"header_bar_color": "#000000"}).theme.header_bar_color == "#000000"
        page = repo.patch_page(custom_id, {"mode": "THERMAL", "thermalMm": {"widthMm": 58, "marginMm": 2}}).page
        assert page.mode.value == "THERMAL"
        assert page.thermal_mm.width_mm == 58

    def test_mutation_bumps_updated_at(self, repo, custom_id):
        before = repo.get(custom_id).updated_at
        assert repo.rename(custom_id, "Renamed").updated_at >= before

    def test_subscribers_are_notified(self, repo, custom_id):
        seen = []
        unsubscribe = repo.subscribe(seen.append)
        repo.rename(custom_id, "Renamed")
        unsubscribe()
        repo.rename(custom_id, "Again")
        assert len(seen) == 1


class TestArrayMove:
    def test_moves_forward_and_back(self):
        assert array_move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
        assert array_move(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]


class TestPersistence:
    def test_write_through_and_reload(self):
        store = MemoryKeyValueStore()

        async def scenario():
            repo = TemplateRepository(store)
            await repo.load()
            repo.ensure_defaults(DEFAULT_TEMPLATES)
            copy_id = repo.duplicate("receipt_full_default_v1")
            await repo.flush()
            reloaded = TemplateRepository(store)
            await reloaded.load()
            return copy_id, reloaded

        copy_id, reloaded = run(scenario())
        assert reloaded.get(copy_id).name.endswith("(Copy)")
        assert store.raw(TEMPLATES_KEY)["templates"][0]["id"] == "quotation_default_v1"

    def test_load_drops_invalid_records(self):
        good = DEFAULT_TEMPLATES[0].to_json_dict()
        bad = {**DEFAULT_TEMPLATES[1].to_json_dict(), "theme": {"primaryColor": "nope"}}
        store = MemoryKeyValueStore({TEMPLATES_KEY: {"templates": [good, bad]}})
        repo = TemplateRepository(store)
        run(repo.load())
        assert _ids(repo.templates) == [good["id"]]

    def test_load_without_stored_value_is_empty(self):
        repo = TemplateRepository(MemoryKeyValueStore())
        assert run(repo.load()) == []

    def test_mutation_outside_a_loop_is_saved_on_flush(self):
        store = MemoryKeyValueStore()
        repo = TemplateRepository(store)
        repo.ensure_defaults(DEFAULT_TEMPLATES)
        assert store.raw(TEMPLATES_KEY) is None
        run(repo.flush())
        assert len(store.raw(TEMPLATES_KEY)["templates"]) == len(DEFAULT_TEMPLATES)
