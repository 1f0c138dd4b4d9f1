"""Client for the JaaS token endpoint with caching and retry."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.errors import (
    ERROR_KINDS,
    AuthenticationRequiredError,
    ProtocolError,
    TelemedError,
    TokenFetchError,
    TransportError,
    ValidationError,
)
from ..schemas.jaas import IssuedToken, TokenRequest, UserRole, normalize_room_id

logger = logging.getLogger(__name__)

CONSULTATION_TOKEN_MINUTES = 90
REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class _CacheEntry:
    token: IssuedToken
    expires_at: float


class TokenCache:
    """In-memory token cache that refuses to serve tokens close to expiry."""

    def __init__(self, safety_margin_seconds: float = 300.0, *, clock: Clock = time.time) -> None:
        self._margin = safety_margin_seconds
        self._clock = clock
        self._entries: Dict[tuple[str, str, str], _CacheEntry] = {}

    def get(self, request: TokenRequest) -> IssuedToken | None:
        key = request.cache_key
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock() + self._margin:
            self._entries.pop(key, None)
            return None
        return entry.token

    def set(self, request: TokenRequest, token: IssuedToken) -> None:
        self._entries[request.cache_key] = _CacheEntry(token=token, expires_at=token.expires_at.timestamp())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class JaasTokenClient:
    """Fetch tokens from the issuer, reusing cached ones where still safe."""

    def __init__(
        self,
        endpoint: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: TokenCache | None = None,
        max_retries: int | None = None,
        base_delay: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._endpoint = endpoint or settings.jaas_token_endpoint
        self._http = http_client or httpx.AsyncClient(timeout=10.0, follow_redirects=False)
        self._owns_http = http_client is None
        self._cache = cache if cache is not None else TokenCache(settings.jaas_token_cache_margin_seconds)
        self._max_retries = settings.jaas_token_max_retries if max_retries is None else max_retries
        self._base_delay = settings.jaas_token_retry_base_delay if base_delay is None else base_delay
        self._sleep = sleep

    @property
    def cache(self) -> TokenCache:
        return self._cache

    async def get_token(self, request: TokenRequest, use_cache: bool = True) -> IssuedToken:
        """Return a cached token when possible, otherwise fetch a fresh one."""

        if use_cache:
            cached = self._cache.get(request)
            if cached is not None:
                logger.debug("Using cached JaaS token for room=%s", request.room_id)
                return cached

        token = await self.fetch_token(request)
        self._cache.set(request, token)
        return token

    async def fetch_token(self, request: TokenRequest) -> IssuedToken:
        """Call the issuer, retrying retryable failures with exponential backoff."""

        retries = 0
        while True:
            try:
                return await self._request_once(request)
            except TelemedError as exc:
                logger.warning(
                    "JaaS token fetch failed (attempt %s/%s): %s",
                    retries + 1,
                    self._max_retries + 1,
                    exc.message,
                )
                if not exc.retryable or retries >= self._max_retries:
                    raise TokenFetchError(exc, attempts=retries + 1) from exc
                delay = self._base_delay * (2**retries)
                logger.info("Retrying JaaS token fetch in %.2fs", delay)
                await self._sleep(delay)
                retries += 1

    def clear_cache(self) -> None:
        """Drop every cached token, e.g. on logout or role switch."""

        self._cache.clear()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request_once(self, request: TokenRequest) -> IssuedToken:
        body = request.model_dump(by_alias=True, mode="json", exclude_none=True)
        try:
            response = await self._http.post(self._endpoint, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"Token service unreachable: {exc}") from exc

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error(
                "Expected JSON but received %s (status %s)",
                content_type or "unknown",
                response.status_code,
            )
            if response.status_code in REDIRECT_STATUSES:
                raise AuthenticationRequiredError()
            raise ProtocolError(
                f"Invalid response type: Expected JSON but received {content_type or 'unknown'}"
            )

        try:
            data: Any = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProtocolError("Invalid JSON response from JaaS token API") from exc
        if not isinstance(data, dict):
            raise ProtocolError("Token response was not a JSON object")

        if response.status_code in (401, 403):
            raise AuthenticationRequiredError(data.get("error") or None)
        if response.is_error or not data.get("success"):
            raise _classify_failure(response.status_code, data)

        try:
            return IssuedToken.model_validate(data)
        except PydanticValidationError as exc:
            raise ProtocolError("Token response is missing required fields") from exc


def _classify_failure(status_code: int, data: dict[str, Any]) -> TelemedError:
    """Map an issuer failure body back onto the error taxonomy."""

    message = data.get("error") or f"HTTP {status_code}"
    raw_details = data.get("details")
    details = raw_details if isinstance(raw_details, list) else None
    error_cls = ERROR_KINDS.get(str(data.get("kind", "")))
    if error_cls is not None:
        return error_cls(message, details=details)
    if status_code in (400, 422):
        return ValidationError(message, details=details)
    if status_code in (401, 403):
        return AuthenticationRequiredError(message, details=details)
    if status_code >= 500:
        return TransportError(message, details=details)
    return ProtocolError(message, details=details)


def consultation_token_request(
    *,
    patient_id: str,
    patient_name: str,
    patient_email: str | None,
    doctor_id: str,
    doctor_name: str,
    doctor_email: str | None,
    user_role: UserRole | str,
    appointment_id: str | None = None,
    clock: Clock = time.time,
) -> TokenRequest:
    """Build the token request for one side of a doctor/patient consultation."""

    role = UserRole(user_role)
    if appointment_id:
        room_id = f"consultation-{appointment_id}"
    else:
        room_id = f"bharattelemed-{patient_id}-{doctor_id}-{int(clock() * 1000)}"

    is_doctor = role is UserRole.DOCTOR
    return TokenRequest(
        room_id=normalize_room_id(room_id),
        user_id=doctor_id if is_doctor else patient_id,
        user_name=doctor_name if is_doctor else patient_name,
        user_email=(doctor_email if is_doctor else patient_email) or None,
        user_role=role,
        expiration_minutes=CONSULTATION_TOKEN_MINUTES,
    )
