# backend/reports_studio/crud/crud_branding.py
import logging
from typing import Any, Dict

from reports_studio.core.errors import PersistedDataDrift, ValidationError
from reports_studio.crud.base import PersistedRepository
from reports_studio.crud.crud_store import BRANDING_KEY
from reports_studio.schemas.common import camelize
from reports_studio.schemas.branding import DEFAULT_BRANDING, BrandingProfile
from reports_studio.schemas.validation import validate_branding

logger = logging.getLogger(__name__)


class BrandingRepository(PersistedRepository[BrandingProfile]):
    """The install-wide branding profile. Created from the built-in default, never deleted."""

    key = BRANDING_KEY
    envelope_field = "branding"

    def initial_state(self) -> BrandingProfile:
        return DEFAULT_BRANDING

    def decode(self, payload: Any) -> BrandingProfile:
        try:
            return validate_branding(payload)
        except ValidationError as exc:
            drift = PersistedDataDrift(self.key, exc.issues)
            logger.warning(f"{drift}; falling back to the default branding. ({exc})")
            return DEFAULT_BRANDING

    def encode(self, state: BrandingProfile) -> Any:
        return state.to_json_dict()

    @property
    def branding(self) -> BrandingProfile:
        return self.state

    def set(self, branding: Any) -> BrandingProfile:
        return self._commit(validate_branding(branding))

    def patch(self, patch: Dict[str, Any]) -> BrandingProfile:
        merged = {**self.state.model_dump(by_alias=True), **camelize(patch, depth=0)}
        return self._commit(validate_branding(merged))

    def reset(self) -> BrandingProfile:
        return self._commit(DEFAULT_BRANDING)
