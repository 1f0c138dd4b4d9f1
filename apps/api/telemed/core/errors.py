"""Error taxonomy shared by the issuer, the token client and the meeting adapter."""
from __future__ import annotations

from typing import Any


class TelemedError(Exception):
    """Base error carrying a machine-readable kind and an HTTP-equivalent status."""

    kind = "internal_error"
    status_code = 500
    retryable = False
    public_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, *, details: list[str] | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = list(details or [])

    def to_payload(self, *, include_details: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.message, "kind": self.kind}
        if include_details and self.details:
            payload["details"] = self.details
        return payload


class ValidationError(TelemedError):
    """Caller supplied incomplete or malformed input."""

    kind = "validation_error"
    status_code = 400
    public_message = "Invalid request"


class ConfigurationError(TelemedError):
    """Deployment is missing required settings; `details` lists every gap."""

    kind = "configuration_error"
    public_message = "JaaS server configuration error"


class KeyLoadError(TelemedError):
    kind = "key_load_error"
    public_message = "Failed to read JaaS private key"


class AuthenticationRequiredError(TelemedError):
    kind = "authentication_required"
    status_code = 401
    public_message = "Authentication required: Please log in to access video consultation"


class ProtocolError(TelemedError):
    """The issuer answered with an unexpected response shape."""

    kind = "protocol_error"
    status_code = 502
    retryable = True
    public_message = "Unexpected response from token service"


class TransportError(TelemedError):
    kind = "transport_error"
    status_code = 503
    retryable = True
    public_message = "Token service unreachable"


class SessionError(TelemedError):
    """The external conferencing session reported a fault."""

    kind = "session_error"
    public_message = "Meeting connection failed. Please try again."


class NotFoundError(TelemedError):
    kind = "not_found"
    status_code = 404
    public_message = "Not found"


class PersistenceError(TelemedError):
    kind = "persistence_error"
    public_message = "Database request failed"


class TokenFetchError(TelemedError):
    """Raised by the token client once it gives up; wraps the last failure."""

    def __init__(self, cause: TelemedError, *, attempts: int) -> None:
        super().__init__(f"Token fetch failed after {attempts} attempt(s): {cause.message}", details=cause.details)
        self.cause = cause
        self.attempts = attempts
        self.kind = cause.kind
        self.status_code = cause.status_code


ERROR_KINDS: dict[str, type[TelemedError]] = {
    cls.kind: cls
    for cls in (
        ValidationError,
        ConfigurationError,
        KeyLoadError,
        AuthenticationRequiredError,
        ProtocolError,
        TransportError,
        SessionError,
        NotFoundError,
        PersistenceError,
    )
}
