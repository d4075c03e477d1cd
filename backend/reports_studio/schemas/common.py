from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
import uuid

from pydantic import BaseModel, ConfigDict, constr
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"

Color = constr(pattern=HEX_COLOR_PATTERN)
NonEmptyStr = constr(min_length=1)
TrimmedStr = constr(strip_whitespace=True)

EPOCH_ISO = "1970-01-01T00:00:00.000Z"


class DocType(str, Enum):
    QUOTATION = "quotation"
    RECEIPT_FULL = "receipt_full"
    RECEIPT_SHORT = "receipt_short"
    TRF_RECEIPT = "trf_receipt"


class StudioModel(BaseModel):
    """Base for every persisted/wire model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def camelize(patch: Dict[str, Any], depth: int = 2) -> Dict[str, Any]:
    """Accept snake_case or camelCase patch keys; stored JSON is camelCase."""
    out = {}
    for field, value in patch.items():
        key = to_camel(field) if "_" in field else field
        # visibility is keyed by docType values, which stay snake_case
        if depth > 0 and isinstance(value, dict) and key != "visibility":
            value = camelize(value, depth - 1)
        out[key] = value
    return out
