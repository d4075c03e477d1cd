"""
Validation entry points for persisted records.

Every stored or imported record goes through one of these functions. They
translate pydantic's error list into :class:`ValidationError` so callers never
need to know about pydantic internals.
"""
import logging
from typing import Any, List, Type, TypeVar

import pydantic

from reports_studio.core.errors import Issue, UnknownBlockType, ValidationError
from reports_studio.schemas.branding import BrandingProfile
from reports_studio.schemas.studio_settings import StudioSettings
from reports_studio.schemas.template import BLOCK_TYPES, Template

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _format_loc(loc) -> str:
    parts: List[str] = []
    previous = None
    for part in loc:
        # Tagged unions insert the tag value after the list index; drop it.
        if isinstance(previous, int) and part in BLOCK_TYPES:
            previous = part
            continue
        parts.append(str(part))
        previous = part
    return ".".join(parts)


def _to_issues(exc: pydantic.ValidationError) -> List[Issue]:
    return [Issue(_format_loc(err["loc"]), err["msg"]) for err in exc.errors()]


def _unknown_block_type(exc: pydantic.ValidationError):
    for err in exc.errors():
        if err["type"] == "union_tag_invalid":
            tag = (err.get("ctx") or {}).get("tag")
            path = _format_loc(err["loc"])
            return UnknownBlockType(tag, f"{path}.type" if path else "type")
    return None


def validate(raw: Any, model: Type[ModelT]) -> ModelT:
    """Parse ``raw`` into ``model``; an instance of ``model`` is returned unchanged."""
    if isinstance(raw, model):
        return raw
    try:
        return model.model_validate(raw)
    except pydantic.ValidationError as exc:
        unknown = _unknown_block_type(exc)
        if unknown is not None:
            raise unknown from exc
        raise ValidationError(_to_issues(exc)) from exc


def validate_template(raw: Any) -> Template:
    return validate(raw, Template)


def validate_branding(raw: Any) -> BrandingProfile:
    return validate(raw, BrandingProfile)


def validate_settings(raw: Any) -> StudioSettings:
    return validate(raw, StudioSettings)


def is_valid_template(raw: Any) -> bool:
    try:
        validate_template(raw)
    except ValidationError as exc:
        logger.debug(f"Template rejected: {exc}")
        return False
    return True
