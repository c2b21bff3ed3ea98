"""Shared fixtures for the SDK tests.

HTTP traffic is mocked with the ``responses`` library; no test talks to a real
Keycloak server.
"""

import sys
from pathlib import Path

import pytest

# Make the package importable when the tests run from a plain checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from keycloak_admin_sdk.client import KeycloakAdminClient
from keycloak_admin_sdk.keycloak_models import (
    BearerCredentials,
    ClientCredentials,
    KeycloakConfig,
    PasswordCredentials,
)

BASE_URL = "http://localhost:8080"
REALM = "test-realm"
TOKEN_URL = f"{BASE_URL}/realms/{REALM}/protocol/openid-connect/token"
REALM_URL = f"{BASE_URL}/admin/realms/{REALM}"
ADMIN_REALMS_URL = f"{BASE_URL}/admin/realms"


@pytest.fixture
def mock_token_response():
    """Return a mock token response matching Keycloak's format."""
    return {
        "access_token": "mock-access-token-123",
        "expires_in": 300,
        "refresh_expires_in": 1800,
        "token_type": "Bearer",
        "scope": "profile email",
    }


@pytest.fixture
def bearer_config():
    return KeycloakConfig(
        base_url=BASE_URL,
        realm=REALM,
        auth_method="bearer",
        credentials=BearerCredentials(token="static-token"),
    )


@pytest.fixture
def client_credentials_config():
    return KeycloakConfig(
        base_url=BASE_URL,
        realm=REALM,
        auth_method="client-credentials",
        credentials=ClientCredentials(client_id="test-client", client_secret="test-secret"),
    )


@pytest.fixture
def password_config():
    return KeycloakConfig(
        base_url=BASE_URL,
        realm=REALM,
        auth_method="password",
        credentials=PasswordCredentials(username="admin", password="admin-pass"),
    )


@pytest.fixture
def keycloak_client(bearer_config):
    """A client that never calls the token endpoint, for resource API tests."""
    return KeycloakAdminClient(bearer_config)


@pytest.fixture
def password_client(password_config):
    return KeycloakAdminClient(password_config)
