"""Realm key endpoint (``/admin/realms/{realm}/keys``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from keycloak_admin_sdk.keycloak_models import KeysMetadataRepresentation
from keycloak_admin_sdk.request import json_or

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


class KeysApi:
    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def get(self) -> KeysMetadataRepresentation:
        """Return the realm's active key ids per algorithm and metadata for every key."""
        return KeysMetadataRepresentation.model_validate(json_or(self._client.request("/keys", "GET"), {}))
