"""Resource APIs exposed as attributes of ``KeycloakAdminClient``."""

from keycloak_admin_sdk.api.attack_detection import AttackDetectionApi
from keycloak_admin_sdk.api.authorization import ResourceServerApi
from keycloak_admin_sdk.api.client_role_mappings import ClientRoleMappingsApi
from keycloak_admin_sdk.api.client_scopes import ClientScopesApi
from keycloak_admin_sdk.api.clients import (
    ClientCertificatesApi,
    ClientInitialAccessApi,
    ClientRegistrationPolicyApi,
    ClientsApi,
)
from keycloak_admin_sdk.api.components import ComponentsApi
from keycloak_admin_sdk.api.groups import GroupsApi
from keycloak_admin_sdk.api.identity_providers import IdentityProvidersApi
from keycloak_admin_sdk.api.keys import KeysApi
from keycloak_admin_sdk.api.mappings import (
    MappingsClient,
    RoleMappingsFactory,
    ScopeMappingsFactory,
    client_scope_mappings,
    client_scope_mappings_for_client,
    client_template_scope_mappings,
    group_role_mappings,
    user_role_mappings,
)
from keycloak_admin_sdk.api.organizations import OrganizationsApi
from keycloak_admin_sdk.api.realms import RealmsApi
from keycloak_admin_sdk.api.roles import RolesApi, RolesByIdApi
from keycloak_admin_sdk.api.users import UsersApi

__all__ = [
    "AttackDetectionApi",
    "ClientCertificatesApi",
    "ClientInitialAccessApi",
    "ClientRegistrationPolicyApi",
    "ClientRoleMappingsApi",
    "ClientScopesApi",
    "ClientsApi",
    "ComponentsApi",
    "GroupsApi",
    "IdentityProvidersApi",
    "KeysApi",
    "MappingsClient",
    "OrganizationsApi",
    "RealmsApi",
    "ResourceServerApi",
    "RoleMappingsFactory",
    "RolesApi",
    "RolesByIdApi",
    "ScopeMappingsFactory",
    "UsersApi",
    "client_scope_mappings",
    "client_scope_mappings_for_client",
    "client_template_scope_mappings",
    "group_role_mappings",
    "user_role_mappings",
]
