"""Client scope endpoints (``/admin/realms/{realm}/client-scopes``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    ClientScopeRepresentation,
    ProtocolMapperRepresentation,
    to_payload,
)
from keycloak_admin_sdk.request import extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)


def _name_of(item: ClientScopeRepresentation | ProtocolMapperRepresentation | dict) -> str | None:
    return item.get("name") if isinstance(item, dict) else item.name


class ClientScopesApi:
    """Client scopes and their protocol mappers."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self) -> list[ClientScopeRepresentation]:
        result = self._client.request("/client-scopes", "GET")
        return [ClientScopeRepresentation.model_validate(item) for item in json_or(result, [])]

    def create(self, scope: ClientScopeRepresentation | dict) -> str:
        """Create a client scope and return its id.

        Raises:
            KeycloakError: If the scope was created but its id cannot be found
        """
        require(scope, "scope")
        name = _name_of(scope)
        require(name, "scope name")

        scope_id = extracted_id(self._client.request("/client-scopes", "POST", scope))
        if scope_id:
            return scope_id

        logger.debug("ID not found in response, falling back to finding client scope by name")
        for candidate in self.list():
            if candidate.name == name and candidate.id:
                return candidate.id
        raise KeycloakError("Client scope was created but ID could not be retrieved")

    def get(self, scope_id: str) -> ClientScopeRepresentation:
        require(scope_id, "scope_id")
        result = self._client.request(f"/client-scopes/{scope_id}", "GET")
        return ClientScopeRepresentation.model_validate(json_or(result, {}))

    def update(self, scope_id: str, scope: ClientScopeRepresentation | dict) -> None:
        require(scope_id, "scope_id")
        require(scope, "scope")
        self._client.request(f"/client-scopes/{scope_id}", "PUT", scope)

    def delete(self, scope_id: str) -> None:
        require(scope_id, "scope_id")
        self._client.request(f"/client-scopes/{scope_id}", "DELETE")

    # =========================================================================
    # Protocol mappers
    # =========================================================================

    def list_protocol_mappers(self, scope_id: str) -> list[ProtocolMapperRepresentation]:
        require(scope_id, "scope_id")
        result = self._client.request(f"/client-scopes/{scope_id}/protocol-mappers/models", "GET")
        return [ProtocolMapperRepresentation.model_validate(item) for item in json_or(result, [])]

    def get_protocol_mapper(self, scope_id: str, mapper_id: str) -> ProtocolMapperRepresentation:
        require(scope_id, "scope_id")
        require(mapper_id, "mapper_id")
        result = self._client.request(f"/client-scopes/{scope_id}/protocol-mappers/models/{mapper_id}", "GET")
        return ProtocolMapperRepresentation.model_validate(json_or(result, {}))

    def create_protocol_mapper(self, scope_id: str, mapper: ProtocolMapperRepresentation | dict) -> str:
        """Add a protocol mapper to the scope and return its id."""
        require(scope_id, "scope_id")
        require(mapper, "mapper")
        name = _name_of(mapper)
        require(name, "mapper name")
        protocol = mapper.get("protocol") if isinstance(mapper, dict) else mapper.protocol
        require(protocol, "mapper protocol")

        result = self._client.request(f"/client-scopes/{scope_id}/protocol-mappers/models", "POST", mapper)
        mapper_id = extracted_id(result)
        if mapper_id:
            return mapper_id

        for candidate in self.list_protocol_mappers(scope_id):
            if candidate.name == name and candidate.id:
                return candidate.id
        raise KeycloakError("Protocol mapper was created but ID could not be retrieved")

    def update_protocol_mapper(
        self, scope_id: str, mapper_id: str, mapper: ProtocolMapperRepresentation | dict
    ) -> None:
        """Update a protocol mapper, merging the changes over its current state.

        Keycloak rejects partial mapper updates, so fields missing from
        ``mapper`` are taken from the stored mapper.
        """
        require(scope_id, "scope_id")
        require(mapper_id, "mapper_id")
        require(mapper, "mapper")

        current = to_payload(self.get_protocol_mapper(scope_id, mapper_id))
        merged = {**current, **to_payload(mapper), "id": mapper_id}
        self._client.request(f"/client-scopes/{scope_id}/protocol-mappers/models/{mapper_id}", "PUT", merged)

    def delete_protocol_mapper(self, scope_id: str, mapper_id: str) -> None:
        require(scope_id, "scope_id")
        require(mapper_id, "mapper_id")
        self._client.request(f"/client-scopes/{scope_id}/protocol-mappers/models/{mapper_id}", "DELETE")
