"""Tests for clients, client scopes, roles, organizations, identity providers,
components, keys, attack detection and authorization services."""

import json
from urllib.parse import parse_qs

import pytest
import responses

from conftest import ADMIN_REALMS_URL, REALM_URL
from keycloak_admin_sdk.exceptions import KeycloakError, KeycloakValidationError
from keycloak_admin_sdk.keycloak_models import (
    ClientRepresentation,
    ComponentRepresentation,
    OrganizationRepresentation,
    RoleRepresentation,
)

# =============================================================================
# Clients
# =============================================================================


@responses.activate
def test_create_client_returns_uuid(keycloak_client):
    responses.post(f"{REALM_URL}/clients", status=201, headers={"Location": f"{REALM_URL}/clients/c-uuid"})

    client_uuid = keycloak_client.clients.create(ClientRepresentation(client_id="my-app", public_client=True))

    assert client_uuid == "c-uuid"
    assert json.loads(responses.calls[0].request.body) == {"clientId": "my-app", "publicClient": True}


@responses.activate
def test_list_clients_by_client_id(keycloak_client):
    responses.get(f"{REALM_URL}/clients", json=[{"id": "c-uuid", "clientId": "my-app"}], status=200)

    clients = keycloak_client.clients.list(client_id="my-app", max_results=1)

    assert clients[0].client_id == "my-app"
    assert responses.calls[0].request.url == f"{REALM_URL}/clients?clientId=my-app&max=1"


@responses.activate
def test_regenerate_client_secret(keycloak_client):
    responses.post(f"{REALM_URL}/clients/c1/client-secret", json={"type": "secret", "value": "new"}, status=200)

    assert keycloak_client.clients.regenerate_secret("c1").value == "new"


@responses.activate
def test_create_client_role_reads_back_id(keycloak_client):
    """Test that the role id is looked up by name after creation."""
    responses.post(
        f"{REALM_URL}/clients/c1/roles",
        status=201,
        headers={"Location": f"{REALM_URL}/clients/c1/roles/editor"},
    )
    responses.get(f"{REALM_URL}/clients/c1/roles/editor", json={"id": "role-9", "name": "editor"}, status=200)

    assert keycloak_client.clients.create_role("c1", RoleRepresentation(name="editor")) == "role-9"
    assert len(responses.calls) == 2


def test_create_client_role_requires_name(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="role name cannot be empty"):
        keycloak_client.clients.create_role("c1", {"description": "no name"})


@responses.activate
def test_download_keystore_returns_bytes(keycloak_client):
    url = f"{REALM_URL}/clients/c1/certificates/jwt.credential/download"
    responses.post(url, body=b"\x30\x82keystore", status=200, content_type="application/octet-stream")

    keystore = keycloak_client.clients.certificates.download_keystore(
        "c1", "jwt.credential", {"format": "PKCS12", "keyAlias": "k", "storePassword": "s"}
    )

    assert keystore == b"\x30\x82keystore"
    assert responses.calls[0].request.headers["Accept"] == "application/octet-stream"


@responses.activate
def test_upload_certificate_requires_certificate_field(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="certificate.certificate cannot be empty"):
        keycloak_client.clients.certificates.upload("c1", "jwt.credential", {"kid": "k1"})

    assert len(responses.calls) == 0


@responses.activate
def test_initial_access_tokens(keycloak_client):
    url = f"{REALM_URL}/clients-initial-access"
    responses.post(url, json={"id": "ia-1", "token": "eyJ...", "count": 5, "remainingCount": 5}, status=200)
    responses.get(url, json=[{"id": "ia-1", "remainingCount": 4}], status=200)
    responses.delete(f"{url}/ia-1", status=204)

    created = keycloak_client.clients.initial_access.create({"expiration": 3600, "count": 5})
    tokens = keycloak_client.clients.initial_access.list()
    keycloak_client.clients.initial_access.delete("ia-1")

    assert created.token == "eyJ..."
    assert tokens[0].remaining_count == 4
    assert json.loads(responses.calls[0].request.body) == {"expiration": 3600, "count": 5}
    assert responses.calls[2].request.method == "DELETE"


def test_initial_access_delete_requires_id(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="token_id cannot be empty"):
        keycloak_client.clients.initial_access.delete("")


@responses.activate
def test_registration_policy_providers(keycloak_client):
    responses.get(
        f"{REALM_URL}/client-registration-policy/providers",
        json=[{"id": "trusted-hosts", "helpText": "Allowed hosts", "properties": []}],
        status=200,
    )

    providers = keycloak_client.clients.registration_policy.get_providers()

    assert providers[0].id == "trusted-hosts"
    assert providers[0].help_text == "Allowed hosts"


@responses.activate
def test_registration_access_token(keycloak_client):
    responses.post(
        f"{REALM_URL}/clients/c1/registration-access-token",
        json={"id": "c1", "clientId": "my-app", "registrationAccessToken": "rat-1"},
        status=200,
    )

    assert keycloak_client.clients.get_registration_access_token("c1") == "rat-1"


# =============================================================================
# Client scopes
# =============================================================================


@responses.activate
def test_create_client_scope(keycloak_client):
    responses.post(
        f"{REALM_URL}/client-scopes",
        status=201,
        headers={"Location": f"{REALM_URL}/client-scopes/cs-1"},
    )

    assert keycloak_client.client_scopes.create({"name": "profile-extra", "protocol": "openid-connect"}) == "cs-1"


@responses.activate
def test_create_protocol_mapper_finds_id_by_name(keycloak_client):
    url = f"{REALM_URL}/client-scopes/cs-1/protocol-mappers/models"
    responses.post(url, status=201, headers={"Location": f"{url}/pm-1"})
    responses.get(url, json=[{"id": "pm-1", "name": "department"}], status=200)

    mapper_id = keycloak_client.client_scopes.create_protocol_mapper(
        "cs-1", {"name": "department", "protocol": "openid-connect"}
    )

    assert mapper_id == "pm-1"
    assert len(responses.calls) == 2


@responses.activate
def test_update_protocol_mapper_merges_current_state(keycloak_client):
    url = f"{REALM_URL}/client-scopes/cs-1/protocol-mappers/models/pm-1"
    responses.get(
        url,
        json={"id": "pm-1", "name": "department", "protocol": "openid-connect", "config": {"a": "1"}},
        status=200,
    )
    responses.put(url, status=204)

    keycloak_client.client_scopes.update_protocol_mapper("cs-1", "pm-1", {"config": {"a": "2"}})

    sent = json.loads(responses.calls[1].request.body)
    assert sent == {"id": "pm-1", "name": "department", "protocol": "openid-connect", "config": {"a": "2"}}


# =============================================================================
# Roles
# =============================================================================


@responses.activate
def test_create_realm_role(keycloak_client):
    responses.post(f"{REALM_URL}/roles", status=201, headers={"Location": f"{REALM_URL}/roles/auditor"})
    responses.get(f"{REALM_URL}/roles/auditor", json={"id": "r-1", "name": "auditor"}, status=200)

    assert keycloak_client.roles.create(RoleRepresentation(name="auditor")) == "r-1"


@responses.activate
def test_create_realm_role_without_id(keycloak_client):
    responses.post(f"{REALM_URL}/roles", status=201)
    responses.get(f"{REALM_URL}/roles/auditor", json={"name": "auditor"}, status=200)

    with pytest.raises(KeycloakError, match="could not be found by name: auditor"):
        keycloak_client.roles.create({"name": "auditor"})


@responses.activate
def test_role_composites_and_users(keycloak_client):
    responses.post(f"{REALM_URL}/roles/auditor/composites", status=204)
    responses.get(f"{REALM_URL}/roles/auditor/users", json=[{"username": "alice"}], status=200)

    keycloak_client.roles.add_composites("auditor", [{"id": "r-2"}])
    users = keycloak_client.roles.get_users("auditor", first=0, max_results=5)

    assert users[0].username == "alice"
    assert responses.calls[1].request.url.endswith("/roles/auditor/users?first=0&max=5")


@responses.activate
def test_roles_by_id(keycloak_client):
    responses.get(f"{REALM_URL}/roles-by-id/r-1", json={"id": "r-1", "name": "auditor"}, status=200)
    responses.get(f"{REALM_URL}/roles-by-id/r-1/composites", json=[], status=200)

    assert keycloak_client.roles_by_id.get("r-1").name == "auditor"
    keycloak_client.roles_by_id.get_composites("r-1", search="view", max=5)

    assert responses.calls[1].request.url.endswith("/roles-by-id/r-1/composites?search=view&max=5")


# =============================================================================
# Organizations
# =============================================================================


@responses.activate
def test_create_organization(keycloak_client):
    responses.post(
        f"{REALM_URL}/organizations",
        status=201,
        headers={"Location": f"{REALM_URL}/organizations/org-1"},
    )

    org_id = keycloak_client.organizations.create(
        OrganizationRepresentation(name="Acme", domains=[{"name": "acme.com"}])
    )

    assert org_id == "org-1"
    assert json.loads(responses.calls[0].request.body) == {"name": "Acme", "domains": [{"name": "acme.com"}]}


@responses.activate
def test_add_member_sends_bare_user_id(keycloak_client):
    responses.post(f"{REALM_URL}/organizations/org-1/members", status=201)

    keycloak_client.organizations.add_member("org-1", "user-1")

    assert responses.calls[0].request.body == "user-1"


@responses.activate
def test_invite_user_posts_form(keycloak_client):
    responses.post(f"{REALM_URL}/organizations/org-1/members/invite-user", status=204)

    keycloak_client.organizations.invite_user("org-1", "bob@acme.com", first_name="Bob")

    request = responses.calls[0].request
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.body) == {"email": ["bob@acme.com"], "firstName": ["Bob"]}


@responses.activate
def test_count_members(keycloak_client):
    responses.get(f"{REALM_URL}/organizations/org-1/members/count", json=7, status=200)

    assert keycloak_client.organizations.count_members("org-1") == 7


# =============================================================================
# Identity providers
# =============================================================================


@responses.activate
def test_create_identity_provider_returns_alias(keycloak_client):
    responses.post(f"{REALM_URL}/identity-provider/instances", status=201)

    alias = keycloak_client.identity_providers.create({"alias": "github", "providerId": "github"})

    assert alias == "github"


@responses.activate
def test_import_identity_provider_config_is_multipart(keycloak_client):
    responses.post(f"{REALM_URL}/identity-provider/import-config", json={"issuer": "https://idp"}, status=200)

    config = keycloak_client.identity_providers.import_config('{"issuer": "https://idp"}')

    assert config == {"issuer": "https://idp"}
    assert responses.calls[0].request.headers["Content-Type"].startswith("multipart/form-data")


@responses.activate
def test_create_identity_provider_mapper(keycloak_client):
    url = f"{REALM_URL}/identity-provider/instances/github/mappers"
    responses.post(url, status=201, headers={"Location": f"{url}/m-1"})

    assert keycloak_client.identity_providers.create_mapper("github", {"name": "email"}) == "m-1"


# =============================================================================
# Components
# =============================================================================


@responses.activate
def test_components_use_explicit_realm(keycloak_client):
    responses.get(f"{ADMIN_REALMS_URL}/other/components", json=[{"id": "k1", "providerId": "rsa"}], status=200)

    components = keycloak_client.components.list("other", type="org.keycloak.keys.KeyProvider")

    assert components[0].provider_id == "rsa"
    assert responses.calls[0].request.url == (
        f"{ADMIN_REALMS_URL}/other/components?type=org.keycloak.keys.KeyProvider"
    )


@responses.activate
def test_create_component_requires_edit_mode(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="editMode"):
        keycloak_client.components.create("other", ComponentRepresentation(name="ldap", config={}))

    assert len(responses.calls) == 0


@responses.activate
def test_create_component(keycloak_client):
    responses.post(f"{ADMIN_REALMS_URL}/other/components", status=201)

    keycloak_client.components.create(
        "other", ComponentRepresentation(name="ldap", provider_id="ldap", config={"editMode": ["READ_ONLY"]})
    )

    body = json.loads(responses.calls[0].request.body)
    assert body["config"] == {"editMode": ["READ_ONLY"]}
    assert body["providerId"] == "ldap"


@responses.activate
def test_sub_component_types(keycloak_client):
    responses.get(f"{ADMIN_REALMS_URL}/other/components/k1/sub-component-types", json=[], status=200)

    keycloak_client.components.get_sub_component_types("other", "k1", "org.keycloak.storage.ldap.mappers.LDAPStorageMapper")

    assert "type=org.keycloak.storage.ldap.mappers.LDAPStorageMapper" in responses.calls[0].request.url


# =============================================================================
# Keys and attack detection
# =============================================================================


@responses.activate
def test_get_keys(keycloak_client):
    responses.get(
        f"{REALM_URL}/keys",
        json={"active": {"RS256": "kid-1"}, "keys": [{"kid": "kid-1", "algorithm": "RS256"}]},
        status=200,
    )

    keys = keycloak_client.keys.get()

    assert keys.active == {"RS256": "kid-1"}


@responses.activate
def test_brute_force_status(keycloak_client):
    responses.get(
        f"{REALM_URL}/attack-detection/brute-force/users/u1",
        json={"numFailures": 3, "disabled": False},
        status=200,
    )
    responses.delete(f"{REALM_URL}/attack-detection/brute-force/users", status=204)

    status = keycloak_client.attack_detection.get_user_status("u1")
    keycloak_client.attack_detection.clear_all()

    assert status.num_failures == 3
    assert responses.calls[1].request.method == "DELETE"


# =============================================================================
# Authorization services
# =============================================================================


@responses.activate
def test_create_policy_uses_type_in_path(keycloak_client):
    url = f"{REALM_URL}/clients/c1/authz/resource-server/policy/time"
    responses.post(url, json={"id": "p-1", "name": "office-hours", "type": "time"}, status=201)

    policy = keycloak_client.resource_server.create_policy(
        "c1", {"name": "office-hours", "type": "time", "config": {"hour": 9, "hourEnd": "17"}}
    )

    assert policy.id == "p-1"
    assert json.loads(responses.calls[0].request.body)["config"] == {"hour": "9", "hourEnd": "17"}


@responses.activate
def test_create_policy_falls_back_to_listing(keycloak_client):
    base = f"{REALM_URL}/clients/c1/authz/resource-server/policy"
    responses.post(f"{base}/role", status=201)
    responses.get(base, json=[{"id": "p-2", "name": "admins", "type": "role"}], status=200)

    policy = keycloak_client.resource_server.create_policy("c1", {"name": "admins", "type": "role"})

    assert policy.id == "p-2"


def test_permission_requires_type(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="permission type cannot be empty"):
        keycloak_client.resource_server.create_permission("c1", {"name": "no-type"})


@responses.activate
def test_resource_search_and_ids(keycloak_client):
    responses.get(
        f"{REALM_URL}/clients/c1/authz/resource-server/resource/search",
        json={"_id": "res-1", "name": "invoice"},
        status=200,
    )

    resource = keycloak_client.resource_server.search_resource("c1", "invoice")

    assert resource.id == "res-1"
    assert responses.calls[0].request.url.endswith("/resource/search?name=invoice")
