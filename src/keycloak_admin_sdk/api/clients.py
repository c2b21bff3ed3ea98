"""Client (application) management endpoints (``/admin/realms/{realm}/clients``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    CertificateRepresentation,
    ClientInitialAccessPresentation,
    ClientRepresentation,
    ClientScopeRepresentation,
    ComponentTypeRepresentation,
    CredentialRepresentation,
    RoleRepresentation,
    UserSessionRepresentation,
)
from keycloak_admin_sdk.request import RawText, extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)

_BINARY_OPTIONS = {"headers": {"Accept": "application/octet-stream"}}


class ClientCertificatesApi:
    """Certificates and keystores attached to a client attribute (e.g. ``jwt.credential``).

    ``client_id`` here is always the client's internal UUID.
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def get_info(self, client_id: str, attr: str) -> CertificateRepresentation:
        require(client_id, "client_id")
        require(attr, "attr")
        result = self._client.request(f"/clients/{client_id}/certificates/{attr}", "GET")
        return CertificateRepresentation.model_validate(json_or(result, {}))

    def generate(self, client_id: str, attr: str) -> CertificateRepresentation:
        """Generate a new key pair and certificate for the attribute."""
        require(client_id, "client_id")
        require(attr, "attr")
        result = self._client.request(f"/clients/{client_id}/certificates/{attr}/generate", "POST")
        return CertificateRepresentation.model_validate(json_or(result, {}))

    def upload(
        self, client_id: str, attr: str, certificate: CertificateRepresentation | dict
    ) -> CertificateRepresentation:
        """Upload only a certificate, not a private key."""
        require(client_id, "client_id")
        require(attr, "attr")
        self._require_certificate(certificate)
        result = self._client.request(
            f"/clients/{client_id}/certificates/{attr}/upload-certificate", "POST", certificate
        )
        return CertificateRepresentation.model_validate(json_or(result, {}))

    def upload_with_key(
        self, client_id: str, attr: str, certificate: CertificateRepresentation | dict
    ) -> CertificateRepresentation:
        """Upload a certificate together with its private key."""
        require(client_id, "client_id")
        require(attr, "attr")
        self._require_certificate(certificate)
        result = self._client.request(f"/clients/{client_id}/certificates/{attr}/upload", "POST", certificate)
        return CertificateRepresentation.model_validate(json_or(result, {}))

    def download_keystore(self, client_id: str, attr: str, config: dict[str, Any]) -> bytes:
        """Download the keystore for the attribute.

        Args:
            config: Keystore settings, e.g. ``{"format": "JKS", "keyAlias": "k",
                "keyPassword": "p", "storePassword": "s"}``

        Returns:
            The raw keystore file
        """
        require(client_id, "client_id")
        require(attr, "attr")
        require(config, "config")
        result = self._client.request(
            f"/clients/{client_id}/certificates/{attr}/download", "POST", config, _BINARY_OPTIONS
        )
        return _binary(result)

    def generate_and_download_keystore(self, client_id: str, attr: str, config: dict[str, Any]) -> bytes:
        """Generate a key pair and return the keystore; Keycloak keeps only the certificate."""
        require(client_id, "client_id")
        require(attr, "attr")
        require(config, "config")
        result = self._client.request(
            f"/clients/{client_id}/certificates/{attr}/generate-and-download",
            "POST",
            config,
            _BINARY_OPTIONS,
        )
        return _binary(result)

    @staticmethod
    def _require_certificate(certificate: CertificateRepresentation | dict) -> None:
        require(certificate, "certificate")
        value = (
            certificate.certificate
            if isinstance(certificate, CertificateRepresentation)
            else certificate.get("certificate")
        )
        require(value, "certificate.certificate")


class ClientInitialAccessApi:
    """Initial access tokens that allow anonymous dynamic client registration."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self) -> list[ClientInitialAccessPresentation]:
        result = self._client.request("/clients-initial-access", "GET")
        return [ClientInitialAccessPresentation.model_validate(item) for item in json_or(result, [])]

    def create(self, token: ClientInitialAccessPresentation | dict) -> ClientInitialAccessPresentation:
        """Create a token, e.g. ``{"expiration": 3600, "count": 5}``.

        Returns:
            The created token; its ``token`` value is not readable afterwards
        """
        require(token, "token")
        result = self._client.request("/clients-initial-access", "POST", token)
        return ClientInitialAccessPresentation.model_validate(json_or(result, {}))

    def delete(self, token_id: str) -> None:
        require(token_id, "token_id")
        self._client.request(f"/clients-initial-access/{token_id}", "DELETE")


class ClientRegistrationPolicyApi:
    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def get_providers(self) -> list[ComponentTypeRepresentation]:
        """Policy providers that can be configured for client registration."""
        result = self._client.request("/client-registration-policy/providers", "GET")
        return [ComponentTypeRepresentation.model_validate(item) for item in json_or(result, [])]


def _binary(result) -> bytes:
    if isinstance(result, RawText):
        return result.content or result.text.encode()
    return b""


class ClientsApi:
    """Clients registered in the configured realm.

    Most methods take the client's internal UUID (``ClientRepresentation.id``),
    not its public ``clientId``.

    Example:
        >>> uuid = client.clients.create(ClientRepresentation(client_id="my-app"))
        >>> secret = client.clients.get_secret(uuid).value
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client
        self.certificates = ClientCertificatesApi(client)
        self.initial_access = ClientInitialAccessApi(client)
        self.registration_policy = ClientRegistrationPolicyApi(client)

    # =========================================================================
    # Client CRUD
    # =========================================================================

    def list(
        self,
        client_id: str | None = None,
        first: int | None = None,
        max_results: int | None = None,
        search: bool | None = None,
        viewable_only: bool | None = None,
    ) -> list[ClientRepresentation]:
        """List clients, optionally filtered by public ``clientId``."""
        params = {
            "clientId": client_id,
            "first": first,
            "max": max_results,
            "search": search,
            "viewableOnly": viewable_only,
        }
        result = self._client.request("/clients", "GET", None, params)
        return [ClientRepresentation.model_validate(item) for item in json_or(result, [])]

    def create(self, client: ClientRepresentation | dict) -> str | None:
        """Create a client and return its UUID."""
        require(client, "client")
        result = self._client.request("/clients", "POST", client)
        return extracted_id(result)

    def get(self, client_id: str) -> ClientRepresentation:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}", "GET")
        return ClientRepresentation.model_validate(json_or(result, {}))

    def update(self, client_id: str, client: ClientRepresentation | dict) -> None:
        require(client_id, "client_id")
        require(client, "client")
        self._client.request(f"/clients/{client_id}", "PUT", client)

    def delete(self, client_id: str) -> None:
        require(client_id, "client_id")
        self._client.request(f"/clients/{client_id}", "DELETE")

    # =========================================================================
    # Secrets and sessions
    # =========================================================================

    def get_secret(self, client_id: str) -> CredentialRepresentation:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/client-secret", "GET")
        return CredentialRepresentation.model_validate(json_or(result, {}))

    def regenerate_secret(self, client_id: str) -> CredentialRepresentation:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/client-secret", "POST")
        return CredentialRepresentation.model_validate(json_or(result, {}))

    def get_user_sessions(
        self, client_id: str, first: int | None = None, max_results: int | None = None
    ) -> list[UserSessionRepresentation]:
        require(client_id, "client_id")
        result = self._client.request(
            f"/clients/{client_id}/user-sessions", "GET", None, {"first": first, "max": max_results}
        )
        return [UserSessionRepresentation.model_validate(item) for item in json_or(result, [])]

    def get_service_account_user(self, client_id: str) -> dict[str, Any]:
        require(client_id, "client_id")
        return json_or(self._client.request(f"/clients/{client_id}/service-account-user", "GET"), {})

    def get_registration_access_token(self, client_id: str) -> str | None:
        """Issue a new registration access token for the client.

        Keycloak invalidates the previous token; the new one is returned once.
        """
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/registration-access-token", "POST")
        return ClientRepresentation.model_validate(json_or(result, {})).registration_access_token

    # =========================================================================
    # Client scopes
    # =========================================================================

    def get_default_client_scopes(self, client_id: str) -> list[ClientScopeRepresentation]:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/default-client-scopes", "GET")
        return [ClientScopeRepresentation.model_validate(item) for item in json_or(result, [])]

    def add_default_client_scope(self, client_id: str, scope_id: str) -> None:
        require(client_id, "client_id")
        require(scope_id, "scope_id")
        self._client.request(f"/clients/{client_id}/default-client-scopes/{scope_id}", "PUT")

    def remove_default_client_scope(self, client_id: str, scope_id: str) -> None:
        require(client_id, "client_id")
        require(scope_id, "scope_id")
        self._client.request(f"/clients/{client_id}/default-client-scopes/{scope_id}", "DELETE")

    def get_optional_client_scopes(self, client_id: str) -> list[ClientScopeRepresentation]:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/optional-client-scopes", "GET")
        return [ClientScopeRepresentation.model_validate(item) for item in json_or(result, [])]

    def add_optional_client_scope(self, client_id: str, scope_id: str) -> None:
        require(client_id, "client_id")
        require(scope_id, "scope_id")
        self._client.request(f"/clients/{client_id}/optional-client-scopes/{scope_id}", "PUT")

    def remove_optional_client_scope(self, client_id: str, scope_id: str) -> None:
        require(client_id, "client_id")
        require(scope_id, "scope_id")
        self._client.request(f"/clients/{client_id}/optional-client-scopes/{scope_id}", "DELETE")

    # =========================================================================
    # Client roles
    # =========================================================================

    def list_roles(self, client_id: str) -> list[RoleRepresentation]:
        require(client_id, "client_id")
        result = self._client.request(f"/clients/{client_id}/roles", "GET")
        return [RoleRepresentation.model_validate(item) for item in json_or(result, [])]

    def get_role(self, client_id: str, role_name: str) -> RoleRepresentation:
        require(client_id, "client_id")
        require(role_name, "role_name")
        result = self._client.request(f"/clients/{client_id}/roles/{role_name}", "GET")
        return RoleRepresentation.model_validate(json_or(result, {}))

    def create_role(self, client_id: str, role: RoleRepresentation | dict) -> str:
        """Create a client role and return its id.

        Keycloak's Location header for roles carries the name, so the role is
        read back to learn its id.
        """
        require(client_id, "client_id")
        require(role, "role")
        name = role.name if isinstance(role, RoleRepresentation) else role.get("name")
        require(name, "role name")

        self._client.request(f"/clients/{client_id}/roles", "POST", role)
        created = self.get_role(client_id, name)
        if not created.id:
            raise KeycloakError(f"Role {name} was created but has no id")
        logger.debug(f"Created client role {name} with ID: {created.id}")
        return created.id

    def update_role(self, client_id: str, role_name: str, role: RoleRepresentation | dict) -> None:
        require(client_id, "client_id")
        require(role_name, "role_name")
        require(role, "role")
        self._client.request(f"/clients/{client_id}/roles/{role_name}", "PUT", role)

    def delete_role(self, client_id: str, role_name: str) -> None:
        require(client_id, "client_id")
        require(role_name, "role_name")
        self._client.request(f"/clients/{client_id}/roles/{role_name}", "DELETE")
