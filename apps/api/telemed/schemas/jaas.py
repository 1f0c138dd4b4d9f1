"""Data contracts for JaaS token issuance."""
from __future__ import annotations

import enum
import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ROOM_ID_INVALID = re.compile(r"[^a-z0-9\-]")


class UserRole(str, enum.Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


def normalize_room_id(value: str) -> str:
    """Lower-case a room id and replace anything outside ``[a-z0-9-]`` with ``-``."""

    return _ROOM_ID_INVALID.sub("-", value.strip().lower())


class TokenRequest(BaseModel):
    """Who is asking to join which room."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    room_id: str = Field(..., alias="roomId", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)
    user_name: str = Field(..., alias="userName", min_length=1)
    user_email: str | None = Field(default=None, alias="userEmail")
    user_role: UserRole = Field(..., alias="userRole")
    expiration_minutes: int | None = Field(default=None, alias="expirationMinutes", ge=1)

    @field_validator("room_id", mode="after")
    @classmethod
    def _normalize_room(cls, value: str) -> str:
        normalized = normalize_room_id(value)
        if not normalized:
            raise ValueError("roomId must not be blank")
        return normalized

    @field_validator("user_id", "user_name", mode="after")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def cache_key(self) -> tuple[str, str, str]:
        return (self.user_id, self.room_id, self.user_role.value)


class IssuedToken(BaseModel):
    """Signed credential plus the metadata the conferencing widget needs."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_at: datetime = Field(..., alias="expiresAt")
    room_name: str = Field(..., alias="roomName")
    user_role: UserRole = Field(..., alias="userRole")
    moderator: bool
    domain: str


class TokenErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: str
    details: list[str] | None = None
