"""Identity provider endpoints (``/admin/realms/{realm}/identity-provider``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.keycloak_models import (
    IdentityProviderMapperRepresentation,
    IdentityProviderRepresentation,
)
from keycloak_admin_sdk.request import extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

_INSTANCES = "/identity-provider/instances"


class IdentityProvidersApi:
    """Brokered identity providers (OIDC, SAML, social) and their mappers.

    Providers are addressed by alias.
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self, **params: Any) -> list[IdentityProviderRepresentation]:
        """List providers (``briefRepresentation``, ``first``, ``max``, ``search``, ``realmOnly``)."""
        result = self._client.request(_INSTANCES, "GET", None, params)
        return [IdentityProviderRepresentation.model_validate(item) for item in json_or(result, [])]

    def create(self, provider: IdentityProviderRepresentation | dict) -> str:
        """Create a provider and return its alias."""
        require(provider, "provider")
        alias = provider.alias if isinstance(provider, IdentityProviderRepresentation) else provider.get("alias")
        require(alias, "provider alias")
        self._client.request(_INSTANCES, "POST", provider)
        return alias

    def get(self, alias: str) -> IdentityProviderRepresentation:
        require(alias, "alias")
        result = self._client.request(f"{_INSTANCES}/{alias}", "GET")
        return IdentityProviderRepresentation.model_validate(json_or(result, {}))

    def update(self, alias: str, provider: IdentityProviderRepresentation | dict) -> None:
        require(alias, "alias")
        require(provider, "provider")
        self._client.request(f"{_INSTANCES}/{alias}", "PUT", provider)

    def delete(self, alias: str) -> None:
        require(alias, "alias")
        self._client.request(f"{_INSTANCES}/{alias}", "DELETE")

    def get_provider_factory(self, provider_id: str) -> dict[str, Any]:
        """Describe a provider type such as ``oidc`` or ``github``."""
        require(provider_id, "provider_id")
        return json_or(self._client.request(f"/identity-provider/providers/{provider_id}", "GET"), {})

    def import_config(self, provider_json: str | bytes) -> dict[str, Any]:
        """Parse a provider configuration file (uploaded as multipart) into provider config.

        Returns:
            The config map Keycloak derived from the file
        """
        require(provider_json, "provider_json")
        files = {"file": ("provider.json", provider_json, "application/json")}
        result = self._client.request("/identity-provider/import-config", "POST", None, None, files)
        return json_or(result, {})

    # =========================================================================
    # Mappers
    # =========================================================================

    def list_mappers(self, alias: str) -> list[IdentityProviderMapperRepresentation]:
        require(alias, "alias")
        result = self._client.request(f"{_INSTANCES}/{alias}/mappers", "GET")
        return [IdentityProviderMapperRepresentation.model_validate(item) for item in json_or(result, [])]

    def create_mapper(self, alias: str, mapper: IdentityProviderMapperRepresentation | dict) -> str | None:
        """Add a mapper to the provider and return its id."""
        require(alias, "alias")
        require(mapper, "mapper")
        result = self._client.request(f"{_INSTANCES}/{alias}/mappers", "POST", mapper)
        return extracted_id(result)

    def get_mapper(self, alias: str, mapper_id: str) -> IdentityProviderMapperRepresentation:
        require(alias, "alias")
        require(mapper_id, "mapper_id")
        result = self._client.request(f"{_INSTANCES}/{alias}/mappers/{mapper_id}", "GET")
        return IdentityProviderMapperRepresentation.model_validate(json_or(result, {}))

    def update_mapper(
        self, alias: str, mapper_id: str, mapper: IdentityProviderMapperRepresentation | dict
    ) -> None:
        require(alias, "alias")
        require(mapper_id, "mapper_id")
        require(mapper, "mapper")
        self._client.request(f"{_INSTANCES}/{alias}/mappers/{mapper_id}", "PUT", mapper)

    def delete_mapper(self, alias: str, mapper_id: str) -> None:
        require(alias, "alias")
        require(mapper_id, "mapper_id")
        self._client.request(f"{_INSTANCES}/{alias}/mappers/{mapper_id}", "DELETE")

    def get_mapper_types(self, alias: str) -> dict[str, Any]:
        """Mapper types available for the provider, keyed by type id."""
        require(alias, "alias")
        return json_or(self._client.request(f"{_INSTANCES}/{alias}/mapper-types", "GET"), {})
