"""Tests for role mappings, scope mappings and client role mappings."""

import json

import pytest
import responses

from conftest import REALM_URL
from keycloak_admin_sdk.api.mappings import (
    MappingsClient,
    client_scope_mappings,
    client_scope_mappings_for_client,
    client_template_scope_mappings,
    group_role_mappings,
    user_role_mappings,
)
from keycloak_admin_sdk.exceptions import KeycloakValidationError
from keycloak_admin_sdk.keycloak_models import RoleRepresentation

# =============================================================================
# Factories
# =============================================================================


@pytest.mark.parametrize(
    "factory, resource_id, expected",
    [
        (user_role_mappings, "u1", "/users/u1/role-mappings"),
        (group_role_mappings, "g1", "/groups/g1/role-mappings"),
        (client_scope_mappings, "cs1", "/client-scopes/cs1/scope-mappings"),
        (client_template_scope_mappings, "t1", "/client-templates/t1/scope-mappings"),
        (client_scope_mappings_for_client, "c1", "/clients/c1/scope-mappings"),
    ],
)
def test_factories_build_resource_paths(keycloak_client, factory, resource_id, expected):
    mappings = factory(keycloak_client, resource_id)

    assert isinstance(mappings, MappingsClient)
    assert mappings.base_path == expected


def test_factories_require_an_id(keycloak_client):
    with pytest.raises(KeycloakValidationError, match="user_id cannot be empty"):
        user_role_mappings(keycloak_client, "")


def test_facade_accessors(keycloak_client):
    assert keycloak_client.role_mappings.for_user("u1").base_path == "/users/u1/role-mappings"
    assert keycloak_client.role_mappings.for_group("g1").base_path == "/groups/g1/role-mappings"
    assert keycloak_client.scope_mappings.for_client_scope("cs1").base_path == "/client-scopes/cs1/scope-mappings"
    assert (
        keycloak_client.scope_mappings.for_client_template("t1").base_path
        == "/client-templates/t1/scope-mappings"
    )
    assert keycloak_client.scope_mappings.for_client("c1").base_path == "/clients/c1/scope-mappings"


# =============================================================================
# Realm and client roles
# =============================================================================


@responses.activate
def test_get_all_mappings(keycloak_client):
    responses.get(
        f"{REALM_URL}/users/u1/role-mappings",
        json={"realmMappings": [{"id": "r1", "name": "admin"}], "clientMappings": {}},
        status=200,
    )

    mappings = keycloak_client.role_mappings.for_user("u1").get_all()

    assert mappings.realm_mappings[0].name == "admin"


@responses.activate
def test_add_realm_roles(keycloak_client):
    responses.post(f"{REALM_URL}/users/u1/role-mappings/realm", status=204)

    keycloak_client.role_mappings.for_user("u1").add_realm([RoleRepresentation(id="r1", name="admin")])

    assert json.loads(responses.calls[0].request.body) == [{"id": "r1", "name": "admin"}]


@responses.activate
def test_delete_realm_roles_sends_body(keycloak_client):
    responses.delete(f"{REALM_URL}/groups/g1/role-mappings/realm", status=204)

    keycloak_client.role_mappings.for_group("g1").delete_realm([{"id": "r1", "name": "admin"}])

    assert responses.calls[0].request.method == "DELETE"
    assert json.loads(responses.calls[0].request.body) == [{"id": "r1", "name": "admin"}]


@responses.activate
def test_empty_role_list_is_rejected(keycloak_client):
    mappings = keycloak_client.role_mappings.for_user("u1")

    with pytest.raises(KeycloakValidationError, match="at least one role is required"):
        mappings.add_realm([])
    with pytest.raises(KeycloakValidationError, match="at least one role is required"):
        mappings.delete_client("c1", [])

    assert len(responses.calls) == 0


@responses.activate
def test_effective_roles_brief_flag(keycloak_client):
    responses.get(f"{REALM_URL}/users/u1/role-mappings/realm/composite", json=[], status=200)

    mappings = keycloak_client.role_mappings.for_user("u1")
    mappings.list_effective_realm()
    mappings.list_effective_realm(brief_representation=False)

    assert responses.calls[0].request.url == f"{REALM_URL}/users/u1/role-mappings/realm/composite"
    assert responses.calls[1].request.url.endswith("/realm/composite?briefRepresentation=false")


@responses.activate
def test_scope_mappings_available_client_roles(keycloak_client):
    responses.get(
        f"{REALM_URL}/client-scopes/cs1/scope-mappings/clients/c1/available",
        json=[{"id": "r2", "name": "viewer"}],
        status=200,
    )

    roles = keycloak_client.scope_mappings.for_client_scope("cs1").list_available_client("c1")

    assert roles[0].name == "viewer"


# =============================================================================
# Client role mappings
# =============================================================================


@responses.activate
def test_client_role_mappings_for_user(keycloak_client):
    responses.get(f"{REALM_URL}/users/u1/role-mappings/clients/c1", json=[{"name": "reader"}], status=200)
    responses.post(f"{REALM_URL}/users/u1/role-mappings/clients/c1", status=204)

    roles = keycloak_client.client_role_mappings.list_for_user("u1", "c1")
    keycloak_client.client_role_mappings.add_to_user("u1", "c1", [{"id": "r3", "name": "writer"}])

    assert roles[0].name == "reader"
    assert responses.calls[1].request.method == "POST"


@responses.activate
def test_client_role_mappings_effective_for_group(keycloak_client):
    responses.get(f"{REALM_URL}/groups/g1/role-mappings/clients/c1/composite", json=[], status=200)

    keycloak_client.client_role_mappings.list_effective_for_group("g1", "c1", brief_representation=False)

    assert responses.calls[0].request.url.endswith(
        "/groups/g1/role-mappings/clients/c1/composite?briefRepresentation=false"
    )
