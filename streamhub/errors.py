# streamhub/errors.py
"""
Domain errors raised by the service layer.

Each class carries the HTTP status it maps to; ``main.py`` registers a single
handler that turns any ``StreamhubError`` into ``{"error": message}``.
"""


class StreamhubError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StreamhubError):
    status_code = 400


class NotFoundError(StreamhubError):
    status_code = 404


class LimitExceededError(StreamhubError):
    status_code = 400


class InvariantViolation(StreamhubError):
    status_code = 400


class DuplicateError(StreamhubError):
    status_code = 400


class UpstreamError(StreamhubError):
    """Failure reported by an external collaborator (payment, SMS)."""

    def __init__(self, message: str, status_code: int = 500, payload: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class AuthenticationError(StreamhubError):
    status_code = 401


class PermissionDeniedError(StreamhubError):
    status_code = 403


class InternalError(StreamhubError):
    status_code = 500
