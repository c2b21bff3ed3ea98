"""Authorization services of a client (``/clients/{uuid}/authz/resource-server``).

The client must have ``authorizationServicesEnabled``. Every method takes the
client's internal UUID first.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    PolicyRepresentation,
    ResourceRepresentation,
    ResourceServerRepresentation,
    ScopeRepresentation,
    to_payload,
)
from keycloak_admin_sdk.request import json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)


def _policies(result) -> list[PolicyRepresentation]:
    return [PolicyRepresentation.model_validate(item) for item in json_or(result, [])]


def _resources(result) -> list[ResourceRepresentation]:
    return [ResourceRepresentation.model_validate(item) for item in json_or(result, [])]


def _scopes(result) -> list[ScopeRepresentation]:
    return [ScopeRepresentation.model_validate(item) for item in json_or(result, [])]


def _typed_payload(policy: PolicyRepresentation | dict, what: str) -> tuple[str, dict[str, Any]]:
    require(policy, what)
    payload = dict(to_payload(policy))
    require(payload.get("type"), f"{what} type")
    return payload["type"], payload


class ResourceServerApi:
    """Resource server settings, resources, scopes, policies and permissions.

    Example:
        >>> authz = client.resource_server
        >>> authz.create_resource(uuid, ResourceRepresentation(name="invoice", uris=["/invoices/*"]))
        >>> authz.create_policy(uuid, {"type": "role", "name": "admins", "roles": [{"id": role_id}]})
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    @staticmethod
    def _base(client_uuid: str) -> str:
        require(client_uuid, "client_uuid")
        return f"/clients/{client_uuid}/authz/resource-server"

    # =========================================================================
    # Resource server
    # =========================================================================

    def get(self, client_uuid: str) -> ResourceServerRepresentation:
        result = self._client.request(self._base(client_uuid), "GET")
        return ResourceServerRepresentation.model_validate(json_or(result, {}))

    def update(self, client_uuid: str, server: ResourceServerRepresentation | dict) -> None:
        base = self._base(client_uuid)
        require(server, "server")
        self._client.request(base, "PUT", server)

    def import_config(self, client_uuid: str, config: dict[str, Any]) -> None:
        """Import a full authorization configuration (as exported by ``get_settings``)."""
        base = self._base(client_uuid)
        require(config, "config")
        self._client.request(f"{base}/import", "POST", config)

    def get_settings(self, client_uuid: str) -> dict[str, Any]:
        """Export the complete authorization configuration."""
        return json_or(self._client.request(f"{self._base(client_uuid)}/settings", "GET"), {})

    # =========================================================================
    # Resources
    # =========================================================================

    def list_resources(self, client_uuid: str, **params: Any) -> list[ResourceRepresentation]:
        """List resources (``name``, ``type``, ``owner``, ``uri``, ``scope``, ``deep``, ``first``, ``max``)."""
        return _resources(self._client.request(f"{self._base(client_uuid)}/resource", "GET", None, params))

    def create_resource(
        self, client_uuid: str, resource: ResourceRepresentation | dict
    ) -> ResourceRepresentation:
        base = self._base(client_uuid)
        require(resource, "resource")
        result = self._client.request(f"{base}/resource", "POST", resource)
        return ResourceRepresentation.model_validate(json_or(result, {}))

    def get_resource(self, client_uuid: str, resource_id: str) -> ResourceRepresentation:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        result = self._client.request(f"{base}/resource/{resource_id}", "GET")
        return ResourceRepresentation.model_validate(json_or(result, {}))

    def update_resource(
        self, client_uuid: str, resource_id: str, resource: ResourceRepresentation | dict
    ) -> None:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        require(resource, "resource")
        self._client.request(f"{base}/resource/{resource_id}", "PUT", resource)

    def delete_resource(self, client_uuid: str, resource_id: str) -> None:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        self._client.request(f"{base}/resource/{resource_id}", "DELETE")

    def get_resource_permissions(self, client_uuid: str, resource_id: str) -> list[PolicyRepresentation]:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        return _policies(self._client.request(f"{base}/resource/{resource_id}/permissions", "GET"))

    def get_resource_scopes(self, client_uuid: str, resource_id: str) -> list[ScopeRepresentation]:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        return _scopes(self._client.request(f"{base}/resource/{resource_id}/scopes", "GET"))

    def get_resource_attributes(self, client_uuid: str, resource_id: str) -> dict[str, list[str]]:
        base = self._base(client_uuid)
        require(resource_id, "resource_id")
        return json_or(self._client.request(f"{base}/resource/{resource_id}/attributes", "GET"), {})

    def search_resource(self, client_uuid: str, name: str) -> ResourceRepresentation | None:
        base = self._base(client_uuid)
        require(name, "name")
        value = json_or(self._client.request(f"{base}/resource/search", "GET", None, {"name": name}))
        return ResourceRepresentation.model_validate(value) if value else None

    # =========================================================================
    # Scopes
    # =========================================================================

    def list_scopes(self, client_uuid: str, **params: Any) -> list[ScopeRepresentation]:
        return _scopes(self._client.request(f"{self._base(client_uuid)}/scope", "GET", None, params))

    def create_scope(self, client_uuid: str, scope: ScopeRepresentation | dict) -> ScopeRepresentation:
        base = self._base(client_uuid)
        require(scope, "scope")
        result = self._client.request(f"{base}/scope", "POST", scope)
        return ScopeRepresentation.model_validate(json_or(result, {}))

    def get_scope(self, client_uuid: str, scope_id: str) -> ScopeRepresentation:
        base = self._base(client_uuid)
        require(scope_id, "scope_id")
        return ScopeRepresentation.model_validate(json_or(self._client.request(f"{base}/scope/{scope_id}", "GET"), {}))

    def update_scope(self, client_uuid: str, scope_id: str, scope: ScopeRepresentation | dict) -> None:
        base = self._base(client_uuid)
        require(scope_id, "scope_id")
        require(scope, "scope")
        self._client.request(f"{base}/scope/{scope_id}", "PUT", scope)

    def delete_scope(self, client_uuid: str, scope_id: str) -> None:
        base = self._base(client_uuid)
        require(scope_id, "scope_id")
        self._client.request(f"{base}/scope/{scope_id}", "DELETE")

    def get_scope_permissions(self, client_uuid: str, scope_id: str) -> list[PolicyRepresentation]:
        base = self._base(client_uuid)
        require(scope_id, "scope_id")
        return _policies(self._client.request(f"{base}/scope/{scope_id}/permissions", "GET"))

    def get_scope_resources(self, client_uuid: str, scope_id: str) -> list[ResourceRepresentation]:
        base = self._base(client_uuid)
        require(scope_id, "scope_id")
        return _resources(self._client.request(f"{base}/scope/{scope_id}/resources", "GET"))

    def search_scope(
        self, client_uuid: str, name: str, exact_name: bool | None = None
    ) -> ScopeRepresentation | None:
        base = self._base(client_uuid)
        require(name, "name")
        params = {"name": name, "exactName": exact_name}
        value = json_or(self._client.request(f"{base}/scope/search", "GET", None, params))
        return ScopeRepresentation.model_validate(value) if value else None

    # =========================================================================
    # Policies
    # =========================================================================

    def list_policies(self, client_uuid: str, **params: Any) -> list[PolicyRepresentation]:
        """List policies (``name``, ``type``, ``resource``, ``scope``, ``permission``, ``first``, ``max``)."""
        return _policies(self._client.request(f"{self._base(client_uuid)}/policy", "GET", None, params))

    def create_policy(self, client_uuid: str, policy: PolicyRepresentation | dict) -> PolicyRepresentation:
        """Create a policy of ``policy.type`` (``role``, ``user``, ``js``, ``time``, ...).

        Keycloak wants string config values, so non-string values are sent as JSON.

        Raises:
            KeycloakError: If the policy cannot be found after creation
        """
        base = self._base(client_uuid)
        policy_type, payload = _typed_payload(policy, "policy")
        if payload.get("config"):
            payload["config"] = {
                key: value if isinstance(value, str) else json.dumps(value)
                for key, value in payload["config"].items()
            }

        value = json_or(self._client.request(f"{base}/policy/{policy_type}", "POST", payload))
        if isinstance(value, dict) and value.get("id"):
            return PolicyRepresentation.model_validate(value)

        logger.debug("No policy returned, falling back to finding policy by name")
        for candidate in self.list_policies(client_uuid):
            if candidate.name == payload.get("name") and candidate.id:
                return candidate
        raise KeycloakError("Error creating policy")

    def update_policy(self, client_uuid: str, policy_id: str, policy: PolicyRepresentation | dict) -> None:
        base = self._base(client_uuid)
        require(policy_id, "policy_id")
        policy_type, payload = _typed_payload(policy, "policy")
        self._client.request(f"{base}/policy/{policy_type}/{policy_id}", "PUT", payload)

    def delete_policy(self, client_uuid: str, policy_id: str) -> None:
        base = self._base(client_uuid)
        require(policy_id, "policy_id")
        self._client.request(f"{base}/policy/{policy_id}", "DELETE")

    def get_policy_providers(self, client_uuid: str) -> list[dict[str, Any]]:
        return json_or(self._client.request(f"{self._base(client_uuid)}/policy/providers", "GET"), [])

    def search_policy(self, client_uuid: str, name: str) -> PolicyRepresentation | None:
        base = self._base(client_uuid)
        require(name, "name")
        value = json_or(self._client.request(f"{base}/policy/search", "GET", None, {"name": name}))
        return PolicyRepresentation.model_validate(value) if value else None

    def evaluate(self, client_uuid: str, evaluation: dict[str, Any]) -> dict[str, Any]:
        """Evaluate policies for a user/context (``userId``, ``resources``, ``context``, ...)."""
        base = self._base(client_uuid)
        require(evaluation, "evaluation")
        return json_or(self._client.request(f"{base}/policy/evaluate", "POST", evaluation), {})

    # =========================================================================
    # Permissions
    # =========================================================================

    def list_permissions(self, client_uuid: str, **params: Any) -> list[PolicyRepresentation]:
        return _policies(self._client.request(f"{self._base(client_uuid)}/permission", "GET", None, params))

    def create_permission(
        self, client_uuid: str, permission: PolicyRepresentation | dict
    ) -> PolicyRepresentation:
        """Create a ``resource`` or ``scope`` permission."""
        base = self._base(client_uuid)
        permission_type, payload = _typed_payload(permission, "permission")
        result = self._client.request(f"{base}/permission/{permission_type}", "POST", payload)
        return PolicyRepresentation.model_validate(json_or(result, {}))

    def update_permission(
        self, client_uuid: str, permission_id: str, permission: PolicyRepresentation | dict
    ) -> None:
        base = self._base(client_uuid)
        require(permission_id, "permission_id")
        permission_type, payload = _typed_payload(permission, "permission")
        self._client.request(f"{base}/permission/{permission_type}/{permission_id}", "PUT", payload)

    def delete_permission(self, client_uuid: str, permission_id: str) -> None:
        base = self._base(client_uuid)
        require(permission_id, "permission_id")
        self._client.request(f"{base}/permission/{permission_id}", "DELETE")

    def get_permission_providers(self, client_uuid: str) -> list[dict[str, Any]]:
        return json_or(self._client.request(f"{self._base(client_uuid)}/permission/providers", "GET"), [])

    def search_permission(self, client_uuid: str, name: str) -> PolicyRepresentation | None:
        base = self._base(client_uuid)
        require(name, "name")
        value = json_or(self._client.request(f"{base}/permission/search", "GET", None, {"name": name}))
        return PolicyRepresentation.model_validate(value) if value else None

    def evaluate_permission(self, client_uuid: str, evaluation: dict[str, Any]) -> dict[str, Any]:
        base = self._base(client_uuid)
        require(evaluation, "evaluation")
        return json_or(self._client.request(f"{base}/permission/evaluate", "POST", evaluation), {})
