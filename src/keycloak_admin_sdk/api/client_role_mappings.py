"""Client-level role mappings of users and groups.

Endpoints live under ``/users/{id}/role-mappings/clients/{client}`` and
``/groups/{id}/role-mappings/clients/{client}``, where ``client`` is the
client's internal UUID.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from keycloak_admin_sdk.api.mappings import MappingsClient, group_role_mappings, user_role_mappings
from keycloak_admin_sdk.keycloak_models import RoleRepresentation

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


class ClientRoleMappingsApi:
    """Shortcuts over the user and group mappings clients for client roles."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def _user(self, user_id: str) -> MappingsClient:
        return user_role_mappings(self._client, user_id)

    def _group(self, group_id: str) -> MappingsClient:
        return group_role_mappings(self._client, group_id)

    # =========================================================================
    # Users
    # =========================================================================

    def list_for_user(self, user_id: str, client_id: str) -> list[RoleRepresentation]:
        return self._user(user_id).list_client(client_id)

    def add_to_user(self, user_id: str, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        self._user(user_id).add_client(client_id, roles)

    def remove_from_user(self, user_id: str, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        self._user(user_id).delete_client(client_id, roles)

    def list_available_for_user(self, user_id: str, client_id: str) -> list[RoleRepresentation]:
        return self._user(user_id).list_available_client(client_id)

    def list_effective_for_user(
        self, user_id: str, client_id: str, brief_representation: bool = True
    ) -> list[RoleRepresentation]:
        return self._user(user_id).list_effective_client(client_id, brief_representation)

    # =========================================================================
    # Groups
    # =========================================================================

    def list_for_group(self, group_id: str, client_id: str) -> list[RoleRepresentation]:
        return self._group(group_id).list_client(client_id)

    def add_to_group(self, group_id: str, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        self._group(group_id).add_client(client_id, roles)

    def remove_from_group(self, group_id: str, client_id: str, roles: list[RoleRepresentation | dict]) -> None:
        self._group(group_id).delete_client(client_id, roles)

    def list_available_for_group(self, group_id: str, client_id: str) -> list[RoleRepresentation]:
        return self._group(group_id).list_available_client(client_id)

    def list_effective_for_group(
        self, group_id: str, client_id: str, brief_representation: bool = True
    ) -> list[RoleRepresentation]:
        return self._group(group_id).list_effective_client(client_id, brief_representation)
