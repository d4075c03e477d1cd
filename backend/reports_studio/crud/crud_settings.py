# backend/reports_studio/crud/crud_settings.py
import logging
from typing import Any, Dict, Optional

from reports_studio.core.config import settings as app_settings
from reports_studio.core.errors import PersistedDataDrift, UnsupportedDocType, ValidationError
from reports_studio.crud.base import PersistedRepository
from reports_studio.crud.crud_store import SETTINGS_KEY
from reports_studio.schemas.common import DocType, camelize
from reports_studio.schemas.studio_settings import StudioSettings
from reports_studio.schemas.validation import validate_settings

logger = logging.getLogger(__name__)


def settings_from_env() -> StudioSettings:
    """Initial studio settings seeded from the process environment."""
    return StudioSettings(
        odoo_base_url=app_settings.ODOO_BASE_URL,
        api_token=app_settings.ODOO_API_TOKEN,
        pdf_service_url=app_settings.PDF_SERVICE_URL,
        dto_timeout_ms=app_settings.DTO_TIMEOUT_MS,
    )


class SettingsRepository(PersistedRepository[StudioSettings]):
    key = SETTINGS_KEY
    envelope_field = "settings"

    def __init__(self, store, defaults: Optional[StudioSettings] = None):
        self._defaults = defaults or settings_from_env()
        super().__init__(store)

    def initial_state(self) -> StudioSettings:
        return self._defaults

    def decode(self, payload: Any) -> StudioSettings:
        try:
            return validate_settings(payload)
        except ValidationError as exc:
            drift = PersistedDataDrift(self.key, exc.issues)
            logger.warning(f"{drift}; falling back to default settings.")
            return self._defaults

    def encode(self, state: StudioSettings) -> Any:
        return state.to_json_dict()

    @property
    def settings(self) -> StudioSettings:
        return self.state

    def get(self) -> StudioSettings:
        return self.state

    def set(self, value: Any) -> StudioSettings:
        return self._commit(validate_settings(value))

    def patch(self, patch: Dict[str, Any]) -> StudioSettings:
        merged = {**self.state.model_dump(by_alias=True), **camelize(patch, depth=0)}
        return self._commit(validate_settings(merged))

    def reset(self) -> StudioSettings:
        return self._commit(self._defaults)

    def set_default_template(self, doc_type: str, template_id: str) -> StudioSettings:
        if doc_type not in {d.value for d in DocType}:
            raise UnsupportedDocType(doc_type)
        mapping = dict(self.state.default_template_id_by_doc_type)
        mapping[doc_type] = template_id
        return self._commit(self.state.model_copy(update={"default_template_id_by_doc_type": mapping}))

    def default_template_id(self, doc_type: str) -> Optional[str]:
        return self.state.default_template_id_by_doc_type.get(doc_type)
