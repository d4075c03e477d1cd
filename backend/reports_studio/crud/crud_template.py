# backend/reports_studio/crud/crud_template.py
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from reports_studio.core.errors import (
    BlockNotFoundError,
    Issue,
    PersistedDataDrift,
    ReadOnlyTemplateError,
    TemplateNotFoundError,
    ValidationError,
)
from reports_studio.crud.base import PersistedRepository
from reports_studio.crud.crud_store import TEMPLATES_KEY
from reports_studio.schemas.common import camelize, new_id, now_iso
from reports_studio.schemas.template import Template
from reports_studio.schemas.validation import validate_template

logger = logging.getLogger(__name__)

TemplateLike = Union[Template, Dict[str, Any]]


def reconcile_defaults(existing: Sequence[Template], shipped: Sequence[TemplateLike]) -> List[Template]:
    """
    Merge the shipped built-in templates into ``existing``.

    Custom templates are kept untouched. Defaults that are no longer shipped are
    pruned, defaults that are still shipped are replaced wholesale by the shipped
    version, and new shipped defaults are appended in shipped order.
    """
    parsed = [validate_template(t) for t in shipped]
    parsed = [t if t.is_default else t.model_copy(update={"is_default": True}) for t in parsed]
    shipped_ids = {t.id for t in parsed}

    result = [t for t in existing if not t.is_default or t.id in shipped_ids]
    index_by_id = {t.id: idx for idx, t in enumerate(result)}

    for default in parsed:
        idx = index_by_id.get(default.id)
        if idx is None:
            index_by_id[default.id] = len(result)
            result.append(default)
        elif result[idx].is_default:
            result[idx] = default
        else:
            # A custom template owns this id; it wins and the shipped one is skipped.
            logger.warning(f"Shipped default '{default.id}' collides with a custom template; keeping the custom one.")
    return result


def clone_template(source: Template, *, name: Optional[str] = None) -> Template:
    """Deep copy with a fresh template id and fresh block ids, unpublished and non-default."""
    data = source.model_dump(by_alias=True, mode="json")
    data.update(
        id=new_id(),
        isDefault=False,
        published=False,
        updatedAt=now_iso(),
    )
    if name is not None:
        data["name"] = name
    for block in data["blocks"]:
        block["id"] = new_id()
    return validate_template(data)


def _merge_block(block: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(block)
    for field, value in camelize(patch).items():
        if field == "id":
            continue
        if field in ("props", "style") and isinstance(value, dict) and isinstance(merged.get(field), dict):
            merged[field] = {**merged[field], **value}
        else:
            merged[field] = value
    return merged


def array_move(items: List[Any], from_index: int, to_index: int) -> List[Any]:
    moved = list(items)
    if not moved:
        return moved
    from_index = max(0, min(from_index, len(moved) - 1))
    to_index = max(0, min(to_index, len(moved) - 1))
    moved.insert(to_index, moved.pop(from_index))
    return moved


class TemplateRepository(PersistedRepository[List[Template]]):
    key = TEMPLATES_KEY
    envelope_field = "templates"

    def initial_state(self) -> List[Template]:
        return []

    def decode(self, payload: Any) -> List[Template]:
        if not isinstance(payload, list):
            logger.warning(f"'{self.key}' does not hold a list of templates; starting empty.")
            return []
        templates: List[Template] = []
        for position, raw in enumerate(payload):
            try:
                templates.append(validate_template(raw))
            except ValidationError as exc:
                drift = PersistedDataDrift(self.key, exc.issues)
                logger.warning(f"Dropping stored template #{position}: {drift} ({exc})")
        return templates

    def encode(self, state: List[Template]) -> Any:
        return [t.to_json_dict() for t in state]

    # --- queries ---
    @property
    def templates(self) -> List[Template]:
        return list(self.state)

    def get(self, template_id: str) -> Template:
        for template in self.state:
            if template.id == template_id:
                return template
        raise TemplateNotFoundError(template_id)

    def find(self, template_id: str) -> Optional[Template]:
        for template in self.state:
            if template.id == template_id:
                return template
        return None

    def list(self, doc_type: Optional[str] = None) -> List[Template]:
        if doc_type is None:
            return list(self.state)
        return [t for t in self.state if t.doc_type.value == doc_type]

    # --- collection operations ---
    def ensure_defaults(self, shipped: Sequence[TemplateLike]) -> List[Template]:
        before = {t.id for t in self.state}
        result = reconcile_defaults(self.state, shipped)
        after = {t.id for t in result}
        logger.info(
            f"Reconciled defaults: {len(after - before)} added, {len(before - after)} pruned, {len(result)} total."
        )
        return self._commit(result)

    def upsert(self, template: TemplateLike) -> Template:
        parsed = validate_template(template)
        current = self.find(parsed.id)
        if current is not None and current.is_default:
            raise ReadOnlyTemplateError(parsed.id)
        if current is None:
            self._commit([*self.state, parsed])
        else:
            self._commit([parsed if t.id == parsed.id else t for t in self.state])
        return parsed

    def delete(self, template_id: str) -> None:
        self._editable(template_id)
        self._commit([t for t in self.state if t.id != template_id])

    def rename(self, template_id: str, name: str) -> Template:
        return self._replace(template_id, lambda data: data.update(name=name))

    def duplicate(self, template_id: str) -> str:
        source = self.get(template_id)
        copy = clone_template(source, name=f"{source.name} (Copy)")
        self._commit([*self.state, copy])
        return copy.id

    def create_from_default(self, default_id: str) -> str:
        source = self.get(default_id)
        if not source.is_default:
            raise ValidationError([Issue("id", f"Template {default_id!r} is not a built-in default")])
        created = clone_template(source, name=f"{source.name} (Custom)")
        self._commit([*self.state, created])
        return created.id

    def toggle_publish(self, template_id: str) -> Template:
        return self._replace(template_id, lambda data: data.update(published=not data.get("published", False)))

    # --- block operations ---
    def add_block(self, template_id: str, block: Dict[str, Any]) -> Template:
        return self.insert_block(template_id, block, None)

    def insert_block(self, template_id: str, block: Any, at_index: Optional[int]) -> Template:
        block_data = block.model_dump(by_alias=True, mode="json") if hasattr(block, "model_dump") else dict(block)

        def apply(data: Dict[str, Any]) -> None:
            blocks = data["blocks"]
            if at_index is None or at_index < 0 or at_index > len(blocks):
                blocks.append(block_data)
            else:
                blocks.insert(at_index, block_data)

        return self._replace(template_id, apply)

    def update_block(self, template_id: str, block_id: str, patch: Dict[str, Any]) -> Template:
        self._require_block(template_id, block_id)

        def apply(data: Dict[str, Any]) -> None:
            data["blocks"] = [
                _merge_block(b, patch) if b["id"] == block_id else b for b in data["blocks"]
            ]

        return self._replace(template_id, apply)

    def remove_block(self, template_id: str, block_id: str) -> Template:
        self._require_block(template_id, block_id)

        def apply(data: Dict[str, Any]) -> None:
            data["blocks"] = [b for b in data["blocks"] if b["id"] != block_id]

        return self._replace(template_id, apply)

    def reorder_blocks(self, template_id: str, ordered_ids: Iterable[str]) -> Template:
        def apply(data: Dict[str, Any]) -> None:
            by_id = {b["id"]: b for b in data["blocks"]}
            ordered = []
            seen = set()
            for block_id in ordered_ids:
                if block_id in by_id and block_id not in seen:
                    ordered.append(by_id[block_id])
                    seen.add(block_id)
            # Blocks missing from the instruction keep their relative order at the end.
            ordered.extend(b for b in data["blocks"] if b["id"] not in seen)
            data["blocks"] = ordered

        return self._replace(template_id, apply)

    def move_block(self, template_id: str, from_index: int, to_index: int) -> Template:
        template = self.get(template_id)
        ids = array_move([b.id for b in template.blocks], from_index, to_index)
        return self.reorder_blocks(template_id, ids)

    # --- theme & page ---
    def patch_theme(self, template_id: str, patch: Dict[str, Any]) -> Template:
        return self._replace(template_id, lambda data: data.update(theme={**data["theme"], **camelize(patch)}))

    def patch_page(self, template_id: str, patch: Dict[str, Any]) -> Template:
        return self._replace(template_id, lambda data: data.update(page={**data["page"], **camelize(patch)}))

    # --- internals ---
    def _editable(self, template_id: str) -> Template:
        template = self.get(template_id)
        if template.is_default:
            raise ReadOnlyTemplateError(template_id)
        return template

    def _require_block(self, template_id: str, block_id: str) -> None:
        if self._editable(template_id).block_index(block_id) < 0:
            raise BlockNotFoundError(template_id, block_id)

    def _replace(self, template_id: str, apply) -> Template:
        """Apply ``apply`` to a JSON copy, revalidate, then swap the template in one step."""
        current = self._editable(template_id)
        data = current.model_dump(by_alias=True, mode="json")
        apply(data)
        data["id"] = current.id
        data["updatedAt"] = now_iso()
        updated = validate_template(data)
        self._commit([updated if t.id == template_id else t for t in self.state])
        return updated
