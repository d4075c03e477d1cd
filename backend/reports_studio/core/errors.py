"""Error taxonomy shared by the template engine, the repositories and the API."""
from dataclasses import dataclass
from typing import List, Optional, Sequence


class StudioError(Exception):
    """Base class for every error raised by reports_studio."""


@dataclass(frozen=True)
class Issue:
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.reason}"


class ValidationError(StudioError):
    """A template, branding profile or settings record does not match its schema."""

    def __init__(self, issues: Sequence[Issue], message: Optional[str] = None):
        self.issues: List[Issue] = list(issues)
        if message is None:
            message = "; ".join(str(issue) for issue in self.issues) or "Invalid value"
        super().__init__(message)


class UnknownBlockType(ValidationError):
    def __init__(self, block_type: object, path: str = "type"):
        self.block_type = block_type
        super().__init__(
            [Issue(path, f"Unknown block type {block_type!r}")],
        )


class UnsupportedDocType(StudioError):
    def __init__(self, doc_type: object):
        self.doc_type = doc_type
        super().__init__(f"Unsupported docType: {doc_type}")


class ConfigurationError(StudioError):
    """Required configuration (base URL, service URL) is missing."""


class FetchError(StudioError):
    """A DTO or PDF request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class PersistedDataDrift(StudioError):
    """A stored record no longer matches the current schema."""

    def __init__(self, key: str, issues: Sequence[Issue] = ()):
        self.key = key
        self.issues = list(issues)
        super().__init__(f"Stored record under {key!r} does not match the current schema")


class TemplateNotFoundError(StudioError):
    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template {template_id!r} not found")


class BlockNotFoundError(StudioError):
    def __init__(self, template_id: str, block_id: str):
        self.template_id = template_id
        self.block_id = block_id
        super().__init__(f"Block {block_id!r} not found in template {template_id!r}")


class ReadOnlyTemplateError(StudioError):
    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template {template_id!r} is a built-in default and cannot be modified")
