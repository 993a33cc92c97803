from __future__ import annotations

from typing import Optional


class RingfitError(Exception):
    """Base class for every error raised by the recorder."""

    code = "error"


class InputError(RingfitError):
    """Malformed request body or URL."""

    code = "input_error"


class ConfigError(RingfitError):
    """Settings (env, .env) hold a value the recorder cannot use."""

    code = "config_error"


class NothingRecordedError(RingfitError):
    """A screenshot produced no value that could be recorded."""

    code = "nothing_recorded"


class CollaboratorError(RingfitError):
    """An external service (page, image host, OCR, metrics store) failed."""

    code = "collaborator_error"


class NotFound(CollaboratorError):
    code = "not_found"


class FetchError(CollaboratorError):
    code = "fetch_error"


class ServiceError(CollaboratorError):
    code = "service_error"


class RecordError(CollaboratorError):
    code = "record_error"

    def __init__(self, message: str, graph_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.graph_id = graph_id


class MalformedFieldError(RingfitError):
    """A matched token's text does not have the shape its field expects."""

    code = "malformed_field"

    def __init__(self, role: str, raw: str, reason: str) -> None:
        super().__init__(f"{role}: cannot normalize {raw!r}: {reason}")
        self.role = role
        self.raw = raw
        self.reason = reason
