"""
Shared fixtures.

Keys are generated once per test session; RSA generation is slow enough
that doing it per test would dominate the run.
"""

import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from image_relay.core.relay.models import ServiceAccountCredential


SERVICE_ACCOUNT_EMAIL = "relay@test-project.iam.gserviceaccount.com"


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    """PKCS#8 PEM, the format Google puts in service-account key files."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def service_account_json(private_key_pem) -> str:
    return json.dumps({
        "type": "service_account",
        "project_id": "test-project",
        "client_email": SERVICE_ACCOUNT_EMAIL,
        "private_key": private_key_pem,
        "token_uri": "https://oauth2.googleapis.com/token",
    })


@pytest.fixture
def credential(private_key_pem) -> ServiceAccountCredential:
    return ServiceAccountCredential(
        client_email=SERVICE_ACCOUNT_EMAIL,
        private_key=private_key_pem,
    )
