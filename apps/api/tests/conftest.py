"""Shared fixtures for JaaS signing tests."""
from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from telemed.core.config import Settings

TEST_APP_ID = "vpaas-magic-cookie-test"
TEST_KEY_ID = f"{TEST_APP_ID}/a1b2c3"


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


def _make_settings(**overrides) -> Settings:
    values = {
        "app_env": "test",
        "jaas_app_id": TEST_APP_ID,
        "jaas_domain": "8x8.vc",
        "jaas_key_id": TEST_KEY_ID,
        "jaas_private_key": "",
        "jaas_private_key_path": "",
        "jaas_token_expiration_minutes": 60,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings():
    """Build isolated settings that ignore any local .env file."""

    return _make_settings


@pytest.fixture
def jaas_settings(private_key_pem: str) -> Settings:
    return _make_settings(jaas_private_key=private_key_pem)
