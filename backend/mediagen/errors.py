"""Error taxonomy shared by the services and the HTTP layer.

Every error carries a stable ``code`` (what callers branch on) and the HTTP
status the API answers with. Vendor messages are kept verbatim.
"""

from __future__ import annotations


class MediaGenError(Exception):
    """Base error with a stable code and HTTP status."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, *, vendor_status: int | None = None):
        super().__init__(message)
        self.message = message
        self.vendor_status = vendor_status

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.message}


class InvalidRequestError(MediaGenError):
    """Missing or empty prompt, unknown media kind, empty operation id."""

    code = "VALIDATION_ERROR"
    status_code = 400


class AuthInvalidError(MediaGenError):
    """Credential blob is malformed or lacks required fields."""

    code = "AUTH_INVALID"
    status_code = 400


class AuthRejectedError(MediaGenError):
    """The identity provider refused the credentials."""

    code = "AUTH_REJECTED"
    status_code = 401


class AuthRequiredError(MediaGenError):
    """No credential context has been established yet."""

    code = "AUTH_REQUIRED"
    status_code = 401


class LaunchError(MediaGenError):
    """The vendor refused or failed to start a generation operation."""

    code = "LAUNCH_ERROR"
    status_code = 500


class PollError(MediaGenError):
    """The vendor status query failed or timed out."""

    code = "POLL_ERROR"
    status_code = 500
