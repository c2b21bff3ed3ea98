"""Component endpoints (``/admin/realms/{realm}/components``).

Components are pluggable providers such as user storage (LDAP), key providers
and client registration policies. Every call names its realm explicitly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.exceptions import KeycloakValidationError
from keycloak_admin_sdk.keycloak_models import ComponentRepresentation
from keycloak_admin_sdk.request import json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


def _require_edit_mode(component: ComponentRepresentation | dict) -> None:
    require(component, "component")
    config = component.get("config") if isinstance(component, dict) else component.config
    if not config or not config.get("editMode"):
        raise KeycloakValidationError("component config.editMode cannot be empty")


class ComponentsApi:
    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(
        self,
        realm: str,
        name: str | None = None,
        parent: str | None = None,
        type: str | None = None,
    ) -> list[ComponentRepresentation]:
        """List components, optionally filtered by name, parent id or provider type."""
        require(realm, "realm")
        params = {"name": name, "parent": parent, "type": type}
        result = self._client.request_for_realm(realm, "/components", "GET", None, params)
        return [ComponentRepresentation.model_validate(item) for item in json_or(result, [])]

    def get(self, realm: str, component_id: str) -> ComponentRepresentation:
        require(realm, "realm")
        require(component_id, "component_id")
        result = self._client.request_for_realm(realm, f"/components/{component_id}", "GET")
        return ComponentRepresentation.model_validate(json_or(result, {}))

    def create(self, realm: str, component: ComponentRepresentation | dict) -> None:
        """Create a component. ``config["editMode"]`` must be set (e.g. ``["READ_ONLY"]``)."""
        require(realm, "realm")
        _require_edit_mode(component)
        self._client.request_for_realm(realm, "/components", "POST", component)

    def update(self, realm: str, component_id: str, component: ComponentRepresentation | dict) -> None:
        require(realm, "realm")
        require(component_id, "component_id")
        _require_edit_mode(component)
        self._client.request_for_realm(realm, f"/components/{component_id}", "PUT", component)

    def delete(self, realm: str, component_id: str) -> None:
        require(realm, "realm")
        require(component_id, "component_id")
        self._client.request_for_realm(realm, f"/components/{component_id}", "DELETE")

    def get_sub_component_types(self, realm: str, component_id: str, type: str) -> list[dict[str, Any]]:
        """List provider types that can be children of the component, e.g. LDAP mappers."""
        require(realm, "realm")
        require(component_id, "component_id")
        require(type, "type")
        result = self._client.request_for_realm(
            realm, f"/components/{component_id}/sub-component-types", "GET", None, {"type": type}
        )
        return json_or(result, [])
