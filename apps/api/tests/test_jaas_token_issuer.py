"""Tests for JaaS token signing and request validation."""
from __future__ import annotations

from datetime import datetime, timezone

import jwt
import pytest

from telemed.core.errors import ConfigurationError, KeyLoadError, ValidationError
from telemed.schemas.jaas import UserRole
from telemed.services.jaas_token import (
    CLOCK_SKEW_SECONDS,
    DISABLED_FEATURES,
    FileKeySource,
    InlineKeySource,
    JaasTokenIssuer,
    resolve_private_key,
)

NOW = 1_700_000_000
TEST_APP_ID = "vpaas-magic-cookie-test"
TEST_KEY_ID = f"{TEST_APP_ID}/a1b2c3"


def _payload(**overrides):
    payload = {
        "roomId": "Consultation Room#7",
        "userId": "doc-1",
        "userName": "Dr. Asha Rao",
        "userEmail": "asha@example.com",
        "userRole": "doctor",
    }
    payload.update(overrides)
    return payload


def _decode(token: str, rsa_private_key) -> dict:
    return jwt.decode(
        token,
        rsa_private_key.public_key(),
        algorithms=["RS256"],
        audience="jitsi",
        options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
    )


def test_issue_signs_doctor_token_with_expected_claims(jaas_settings, rsa_private_key):
    issuer = JaasTokenIssuer(jaas_settings, clock=lambda: NOW)

    result = issuer.issue(_payload())

    assert result.ok
    issued = result.token
    claims = _decode(issued.token, rsa_private_key)
    assert jwt.get_unverified_header(issued.token)["kid"] == TEST_KEY_ID
    assert claims["iss"] == "chat"
    assert claims["sub"] == TEST_APP_ID
    assert claims["room"] == "*"
    assert claims["iat"] == NOW
    assert claims["exp"] - claims["iat"] == 60 * 60
    assert claims["nbf"] == NOW - CLOCK_SKEW_SECONDS
    user = claims["context"]["user"]
    assert user["moderator"] is True
    assert user["id"] == "doc-1"
    assert user["email"] == "asha@example.com"
    assert claims["context"]["features"] == DISABLED_FEATURES
    assert not any(claims["context"]["features"].values())

    assert issued.room_name == f"{TEST_APP_ID}/consultation-room-7"
    assert issued.user_role is UserRole.DOCTOR
    assert issued.moderator is True
    assert issued.domain == "8x8.vc"
    assert issued.expires_at == datetime.fromtimestamp(NOW + 3600, tz=timezone.utc)


def test_patient_token_is_not_moderator_and_honours_expiration(jaas_settings, rsa_private_key):
    issuer = JaasTokenIssuer(jaas_settings, clock=lambda: NOW)

    result = issuer.issue(_payload(userId="pat-9", userRole="patient", userEmail=None, expirationMinutes=30))

    assert result.ok
    claims = _decode(result.token.token, rsa_private_key)
    assert claims["exp"] - claims["iat"] == 30 * 60
    assert claims["context"]["user"]["moderator"] is False
    assert claims["context"]["user"]["email"] == ""
    assert result.token.moderator is False


def test_missing_fields_are_itemised(jaas_settings):
    issuer = JaasTokenIssuer(jaas_settings)

    result = issuer.issue({"roomId": "room-1"})

    assert not result.ok
    assert isinstance(result.error, ValidationError)
    assert result.error.status_code == 400
    assert result.error.details == ["userId is required", "userName is required", "userRole is required"]


def test_unknown_role_is_rejected(jaas_settings):
    result = JaasTokenIssuer(jaas_settings).issue(_payload(userRole="admin"))

    assert isinstance(result.error, ValidationError)
    assert any("userRole" in detail for detail in result.error.details)


def test_blank_room_is_rejected(jaas_settings):
    result = JaasTokenIssuer(jaas_settings).issue(_payload(roomId="   "))

    assert isinstance(result.error, ValidationError)


def test_configuration_errors_list_every_gap(make_settings):
    issuer = JaasTokenIssuer(make_settings(jaas_app_id="", jaas_key_id=""))

    result = issuer.issue(_payload())

    assert isinstance(result.error, ConfigurationError)
    assert result.error.status_code == 500
    assert len(result.error.details) == 3
    assert "JAAS_APP_ID is not configured" in result.error.details
    assert "JAAS_KEY_ID is not configured" in result.error.details


def test_unreadable_key_file_is_a_key_load_error(tmp_path, make_settings):
    settings = make_settings(jaas_private_key_path=str(tmp_path / "missing.pem"))

    result = JaasTokenIssuer(settings).issue(_payload())

    assert isinstance(result.error, KeyLoadError)
    assert result.error.message == "Failed to read JaaS private key"


def test_key_file_is_used_when_inline_key_absent(tmp_path, make_settings, private_key_pem, rsa_private_key):
    key_file = tmp_path / "jaas.pem"
    key_file.write_text(private_key_pem, encoding="utf-8")
    settings = make_settings(jaas_private_key_path=str(key_file))

    result = JaasTokenIssuer(settings, clock=lambda: NOW).issue(_payload())

    assert result.ok
    assert _decode(result.token.token, rsa_private_key)["sub"] == TEST_APP_ID


def test_inline_key_with_escaped_newlines(make_settings, private_key_pem, rsa_private_key):
    escaped = private_key_pem.replace("\n", "\\n")
    settings = make_settings(jaas_private_key=escaped)

    result = JaasTokenIssuer(settings, clock=lambda: NOW).issue(_payload())

    assert result.ok
    assert _decode(result.token.token, rsa_private_key)["aud"] == "jitsi"


def test_inline_key_takes_precedence_over_missing_file(tmp_path, make_settings, private_key_pem):
    settings = make_settings(
        jaas_private_key=private_key_pem,
        jaas_private_key_path=str(tmp_path / "missing.pem"),
    )

    assert JaasTokenIssuer(settings).issue(_payload()).ok


def test_garbage_key_is_rejected():
    with pytest.raises(KeyLoadError):
        resolve_private_key([InlineKeySource("not a pem")])


def test_resolve_without_sources_fails():
    with pytest.raises(KeyLoadError):
        resolve_private_key([InlineKeySource(""), FileKeySource("")])


def test_claims_differ_only_in_timestamps(jaas_settings):
    issuer = JaasTokenIssuer(jaas_settings)
    request = issuer._parse_request(_payload())

    earlier = issuer.build_claims(request, NOW)
    later = issuer.build_claims(request, NOW + 90)

    timestamps = ("iat", "nbf", "exp")
    assert {k: v for k, v in earlier.items() if k not in timestamps} == {
        k: v for k, v in later.items() if k not in timestamps
    }
    assert all(later[key] - earlier[key] == 90 for key in timestamps)
