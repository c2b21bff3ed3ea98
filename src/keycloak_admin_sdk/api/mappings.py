"""Role mappings and scope mappings.

Keycloak exposes the same set of endpoints for every resource that can hold
role mappings (users, groups) or scope mappings (client scopes, clients,
client templates):

    {resource}/{kind}                                 all mappings
    {resource}/{kind}/realm[/available|/composite]    realm roles
    {resource}/{kind}/clients/{client}[/available|/composite]

``MappingsClient`` implements them once, parameterised by the resource path
and the mapping kind. The factory functions below build one per resource:

    >>> mappings = user_role_mappings(client, user_id)
    >>> mappings.add_realm([RoleRepresentation(id=role.id, name=role.name)])
    >>> client.scope_mappings.for_client_scope(scope_id).list_realm()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from keycloak_admin_sdk.keycloak_models import MappingsRepresentation, RoleRepresentation
from keycloak_admin_sdk.request import json_or
from keycloak_admin_sdk.validation import require, require_roles

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

MappingKind = Literal["role-mappings", "scope-mappings"]


def _roles(result) -> list[RoleRepresentation]:
    return [RoleRepresentation.model_validate(role) for role in json_or(result, [])]


class MappingsClient:
    """Realm and client role mappings of one resource.

    Args:
        client: The admin client used to send requests
        resource_path: Realm-relative path of the resource, e.g. ``/users/{id}``
        kind: ``"role-mappings"`` or ``"scope-mappings"``
    """

    def __init__(self, client: "KeycloakAdminClient", resource_path: str, kind: MappingKind):
        require(resource_path, "resource_path")
        self._client = client
        self.resource_path = resource_path
        self.kind = kind

    @property
    def base_path(self) -> str:
        return f"{self.resource_path}/{self.kind}"

    def get_all(self) -> MappingsRepresentation:
        result = self._client.request(self.base_path, "GET")
        return MappingsRepresentation.model_validate(json_or(result, {}))

    # =========================================================================
    # Realm roles
    # =========================================================================

    def list_realm(self) -> list[RoleRepresentation]:
        return _roles(self._client.request(f"{self.base_path}/realm", "GET"))

    def add_realm(self, roles: list[RoleRepresentation | dict]) -> None:
        require_roles(roles)
        self._client.request(f"{self.base_path}/realm", "POST", roles)

    def delete_realm(self, roles: list[RoleRepresentation | dict]) -> None:
        require_roles(roles)
        self._client.request(f"{self.base_path}/realm", "DELETE", roles)

    def list_available_realm(self) -> list[RoleRepresentation]:
        return _roles(self._client.request(f"{self.base_path}/realm/available", "GET"))

    def list_effective_realm(self, brief_representation: bool = True) -> list[RoleRepresentation]:
        """Realm roles including those granted through composites (and groups, for users)."""
        # Keycloak defaults to brief representations, so only the opt-out is sent
        params = None if brief_representation else {"briefRepresentation": False}
        return _roles(self._client.request(f"{self.base_path}/realm/composite", "GET", None, params))

    # =========================================================================
    # Client roles
    # =========================================================================

    def list_client(self, client_id: str) -> list[RoleRepresentation]:
        require(client_id, "client_id")
        return _roles(self._client.request(f"{self.base_path}/clients/{client_id}", "GET"))

    def add_client(self, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        require(client_id, "client_id")
        require_roles(roles)
        self._client.request(f"{self.base_path}/clients/{client_id}", "POST", roles)

    def delete_client(self, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        require(client_id, "client_id")
        require_roles(roles)
        self._client.request(f"{self.base_path}/clients/{client_id}", "DELETE", roles)

    def list_available_client(self, client_id: str) -> list[RoleRepresentation]:
        require(client_id, "client_id")
        return _roles(self._client.request(f"{self.base_path}/clients/{client_id}/available", "GET"))

    def list_effective_client(self, client_id: str, brief_representation: bool = True) -> list[RoleRepresentation]:
        require(client_id, "client_id")
        params = None if brief_representation else {"briefRepresentation": False}
        return _roles(
            self._client.request(f"{self.base_path}/clients/{client_id}/composite", "GET", None, params)
        )


# =============================================================================
# Factories
# =============================================================================


def user_role_mappings(client: "KeycloakAdminClient", user_id: str) -> MappingsClient:
    require(user_id, "user_id")
    return MappingsClient(client, f"/users/{user_id}", "role-mappings")


def group_role_mappings(client: "KeycloakAdminClient", group_id: str) -> MappingsClient:
    require(group_id, "group_id")
    return MappingsClient(client, f"/groups/{group_id}", "role-mappings")


def client_scope_mappings(client: "KeycloakAdminClient", client_scope_id: str) -> MappingsClient:
    require(client_scope_id, "client_scope_id")
    return MappingsClient(client, f"/client-scopes/{client_scope_id}", "scope-mappings")


def client_template_scope_mappings(client: "KeycloakAdminClient", client_template_id: str) -> MappingsClient:
    require(client_template_id, "client_template_id")
    return MappingsClient(client, f"/client-templates/{client_template_id}", "scope-mappings")


def client_scope_mappings_for_client(client: "KeycloakAdminClient", client_uuid: str) -> MappingsClient:
    """Scope mappings of a client itself (its "full scope" restrictions)."""
    require(client_uuid, "client_uuid")
    return MappingsClient(client, f"/clients/{client_uuid}", "scope-mappings")


class RoleMappingsFactory:
    """``client.role_mappings``: role mappings per user or group."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def for_user(self, user_id: str) -> MappingsClient:
        return user_role_mappings(self._client, user_id)

    def for_group(self, group_id: str) -> MappingsClient:
        return group_role_mappings(self._client, group_id)


class ScopeMappingsFactory:
    """``client.scope_mappings``: scope mappings per client scope, template or client."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def for_client_scope(self, client_scope_id: str) -> MappingsClient:
        return client_scope_mappings(self._client, client_scope_id)

    def for_client_template(self, client_template_id: str) -> MappingsClient:
        return client_template_scope_mappings(self._client, client_template_id)

    def for_client(self, client_uuid: str) -> MappingsClient:
        return client_scope_mappings_for_client(self._client, client_uuid)
