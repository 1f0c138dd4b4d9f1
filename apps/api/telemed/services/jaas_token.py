"""JaaS token issuance.

Builds the claim set the 8x8 JaaS backend expects, signs it with the tenant's RS256
key and returns the token with the metadata the conferencing widget needs. Every
failure is returned as data on :class:`IssueResult`; nothing is raised to the caller.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, Sequence

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from pydantic import ValidationError as PydanticValidationError

from ..core.config import Settings, get_settings
from ..core.errors import ConfigurationError, KeyLoadError, TelemedError, ValidationError
from ..schemas.jaas import IssuedToken, TokenRequest, UserRole

logger = logging.getLogger(__name__)

JAAS_AUDIENCE = "jitsi"
JAAS_ISSUER = "chat"
JAAS_ALGORITHM = "RS256"
CLOCK_SKEW_SECONDS = 10

# Every optional JaaS feature stays off for medical consultations.
DISABLED_FEATURES: dict[str, bool] = {
    "recording": False,
    "transcription": False,
    "livestreaming": False,
    "file-upload": False,
    "outbound-call": False,
    "sip-outbound-call": False,
    "list-visitors": False,
    "flip": False,
}

REQUIRED_FIELDS = ("roomId", "userId", "userName", "userRole")


class KeySource(Protocol):
    """One place a PEM private key may come from."""

    name: str

    def read(self) -> str | None:
        """Return the PEM text, ``None`` when this source is not configured."""


@dataclass(slots=True)
class InlineKeySource:
    value: str
    name: str = "JAAS_PRIVATE_KEY"

    def read(self) -> str | None:
        if not self.value.strip():
            return None
        # Hosting dashboards store multi-line keys with literal "\n" sequences.
        return self.value.replace("\\n", "\n")


@dataclass(slots=True)
class FileKeySource:
    path: str
    name: str = "JAAS_PRIVATE_KEY_PATH"

    def read(self) -> str | None:
        if not self.path.strip():
            return None
        key_path = Path(self.path).expanduser().resolve()
        try:
            return key_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise KeyLoadError(f"Failed to read JaaS private key from {key_path}") from exc


def default_key_sources(settings: Settings) -> list[KeySource]:
    """Inline key first, key file second."""

    return [InlineKeySource(settings.jaas_private_key), FileKeySource(settings.jaas_private_key_path)]


def resolve_private_key(sources: Sequence[KeySource]) -> RSAPrivateKey:
    """Load the first configured key source and parse it as an RSA private key."""

    for source in sources:
        pem = source.read()
        if pem is None:
            continue
        try:
            key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
        except (ValueError, TypeError) as exc:
            raise KeyLoadError(f"{source.name} does not contain a valid PEM private key") from exc
        if not isinstance(key, RSAPrivateKey):
            raise KeyLoadError(f"{source.name} is not an RSA private key")
        logger.info("JaaS private key loaded from %s", source.name)
        return key
    raise KeyLoadError("No JaaS private key source is configured")


@dataclass(slots=True)
class IssueResult:
    """Outcome of a single issuance attempt."""

    token: IssuedToken | None = None
    error: TelemedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.token is not None


class JaasTokenIssuer:
    """Stateless issuer of short-lived, role-scoped JaaS tokens."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        clock: Callable[[], float] = time.time,
        key_sources: Sequence[KeySource] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock
        self._key_sources = list(key_sources) if key_sources is not None else default_key_sources(self._settings)

    def missing_configuration(self) -> list[str]:
        """List every missing server setting, not just the first."""

        errors: list[str] = []
        if not self._settings.jaas_app_id.strip():
            errors.append("JAAS_APP_ID is not configured")
        if not self._settings.jaas_key_id.strip():
            errors.append("JAAS_KEY_ID is not configured")
        if not self._settings.jaas_private_key.strip() and not self._settings.jaas_private_key_path.strip():
            errors.append(
                "Either JAAS_PRIVATE_KEY (for deployment) or JAAS_PRIVATE_KEY_PATH (for local) must be configured"
            )
        return errors

    def build_claims(self, request: TokenRequest, now: int) -> dict[str, Any]:
        """Return the JaaS claim set for ``request`` issued at ``now`` (epoch seconds)."""

        minutes = request.expiration_minutes or self._settings.jaas_token_expiration_minutes
        return {
            "aud": JAAS_AUDIENCE,
            "iss": JAAS_ISSUER,
            "iat": now,
            "exp": now + minutes * 60,
            "nbf": now - CLOCK_SKEW_SECONDS,
            "sub": self._settings.jaas_app_id,
            "context": {
                "user": {
                    "hidden-from-recorder": False,
                    "moderator": request.user_role is UserRole.DOCTOR,
                    "name": request.user_name,
                    "id": request.user_id,
                    "avatar": "",
                    "email": request.user_email or "",
                },
                "features": dict(DISABLED_FEATURES),
            },
            # Room scoping is carried by roomName on the widget; the claim stays a wildcard.
            "room": "*",
        }

    def issue(self, payload: Mapping[str, Any] | TokenRequest) -> IssueResult:
        """Validate, sign and describe a token for ``payload``."""

        try:
            request = self._parse_request(payload)
        except ValidationError as exc:
            logger.info("Rejected JaaS token request: %s", exc.details or exc.message)
            return IssueResult(error=exc)

        missing = self.missing_configuration()
        if missing:
            logger.error("JaaS server configuration errors: %s", missing)
            return IssueResult(error=ConfigurationError(details=missing))

        try:
            private_key = resolve_private_key(self._key_sources)
        except KeyLoadError as exc:
            logger.error("JaaS key load failed: %s", exc.message, exc_info=exc.__cause__)
            return IssueResult(error=KeyLoadError())

        now = int(self._clock())
        claims = self.build_claims(request, now)
        try:
            token = jwt.encode(
                claims,
                private_key,
                algorithm=JAAS_ALGORITHM,
                headers={"kid": self._settings.jaas_key_id},
            )
        except (jwt.PyJWTError, ValueError, TypeError):
            logger.exception("JaaS token signing failed")
            return IssueResult(error=KeyLoadError("Failed to sign JaaS token"))

        room_name = f"{self._settings.jaas_app_id}/{request.room_id}"
        issued = IssuedToken(
            token=token,
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            room_name=room_name,
            user_role=request.user_role,
            moderator=claims["context"]["user"]["moderator"],
            domain=self._settings.jaas_domain,
        )
        logger.info(
            "Issued JaaS token room=%s role=%s moderator=%s expires_at=%s",
            room_name,
            request.user_role.value,
            issued.moderator,
            issued.expires_at.isoformat(),
        )
        return IssueResult(token=issued)

    @staticmethod
    def _parse_request(payload: Mapping[str, Any] | TokenRequest) -> TokenRequest:
        if isinstance(payload, TokenRequest):
            return payload

        missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(REQUIRED_FIELDS)}",
                details=[f"{name} is required" for name in missing],
            )
        try:
            return TokenRequest.model_validate(dict(payload))
        except PydanticValidationError as exc:
            details = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
            ]
            raise ValidationError("Invalid token request", details=details) from exc


def get_issuer() -> JaasTokenIssuer:
    """FastAPI dependency returning an issuer bound to current settings."""

    return JaasTokenIssuer(get_settings())
