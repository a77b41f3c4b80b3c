"""Error taxonomy shared by the services, the API and the CLI.

Each error carries the HTTP status it maps to and a short machine-readable
code used in the JSON error envelope.
"""

from __future__ import annotations


class HireFormError(Exception):
    status_code: int = 500
    error_code: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"status": "error", "error": self.error_code, "message": self.message}


class BadRequestError(HireFormError):
    status_code = 400
    error_code = "bad_request"


class NotFoundError(HireFormError):
    status_code = 404
    error_code = "not_found"


class ConflictError(HireFormError):
    status_code = 409
    error_code = "conflict"


class ConfigurationError(HireFormError):
    """A deployment artifact (mapping document, required section) is broken."""

    status_code = 500
    error_code = "configuration_error"


class InternalError(HireFormError):
    status_code = 500
    error_code = "internal_error"
