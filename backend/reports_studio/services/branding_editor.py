# backend/reports_studio/services/branding_editor.py
import logging
from typing import Any, Dict, Optional

from reports_studio.core.config import settings
from reports_studio.core.debounce import Debouncer
from reports_studio.core.errors import ValidationError
from reports_studio.crud.crud_branding import BrandingRepository
from reports_studio.schemas.common import camelize
from reports_studio.schemas.validation import validate_branding

logger = logging.getLogger(__name__)


class DebouncedBrandingEditor:
    """
    Collects branding field edits and commits them to the repository once the
    edits have been quiet for ``BRANDING_DEBOUNCE_MS``.

    The draft is validated on every edit so a bad value is reported right away,
    but only a valid draft is ever committed.
    """

    def __init__(self, repo: BrandingRepository, delay_ms: Optional[int] = None):
        self.repo = repo
        delay_ms = settings.BRANDING_DEBOUNCE_MS if delay_ms is None else delay_ms
        self._debouncer = Debouncer(delay_ms / 1000, self._commit)
        self._draft: Dict[str, Any] = {}
        self.last_error: Optional[ValidationError] = None

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    @property
    def draft(self) -> Dict[str, Any]:
        return {**self.repo.branding.model_dump(by_alias=True), **self._draft}

    def edit(self, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Stage ``patch``; must be called from inside a running event loop."""
        self._draft.update(camelize(patch, depth=0))
        try:
            validate_branding(self.draft)
            self.last_error = None
        except ValidationError as exc:
            self.last_error = exc
        self._debouncer.trigger()
        return self.draft

    def flush(self) -> None:
        self._debouncer.flush()

    def discard(self) -> None:
        self._debouncer.cancel()
        self._draft = {}
        self.last_error = None

    def _commit(self) -> None:
        if not self._draft:
            return
        try:
            self.repo.set(self.draft)
        except ValidationError as exc:
            self.last_error = exc
            logger.warning(f"Branding draft not committed: {exc}")
            return
        self._draft = {}
        self.last_error = None
