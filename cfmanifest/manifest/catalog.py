"""Pydantic models and the fixed manifest schema: components, derived fields, secrets, usernames, certs."""

from pydantic import BaseModel
from typing import List


# -------------------- DESCRIPTORS -------------------- #

class SystemComponent(BaseModel):
    name: str
    subdomain_uri: bool = False    # adds <name>_subdomain_uri = *.<uri>
    https_url: bool = False        # adds <name>_url = https://<uri>


class DerivedField(BaseModel):
    key: str
    template: str      # str.format over manifest fields plus `env`


class CertKeyPairSpec(BaseModel):
    cert_var: str
    key_var: str
    common_name: str
    domains: List[str] = []


class CertAuthoritySpec(BaseModel):
    var_name: str
    common_name: str
    leaves: List[CertKeyPairSpec] = []


# -------------------- SCHEMA -------------------- #

SYSTEM_COMPONENTS = [
    SystemComponent(name="uaa", subdomain_uri=True, https_url=True),
    SystemComponent(name="login", subdomain_uri=True),
    SystemComponent(name="api", https_url=True),
    SystemComponent(name="loggregator"),
    SystemComponent(name="doppler", subdomain_uri=True),
    SystemComponent(name="blobstore"),
]

DERIVED_FIELDS = [
    DerivedField(key="uaa_token_url", template="https://{uaa_uri}/oauth/token"),
    DerivedField(key="blobstore_public_url", template="http://{blobstore_uri}"),
    DerivedField(key="blobstore_private_url", template="https://blobstore.service.cf.internal:4443"),
    DerivedField(key="metron_agent_deployment_name", template="{env}-cf"),
]

PASSWORD_FIELDS = (
    "blobstore_admin_users_password",
    "blobstore_secure_link_secret",
    "cc_bulk_api_password",
    "cc_db_encryption_key",
    "cc_internal_api_password",
    "cc_staging_upload_password",
    "cf_mysql_mysql_admin_password",
    "cf_mysql_mysql_cluster_health_password",
    "cf_mysql_mysql_galera_healthcheck_endpoint_password",
    "cf_mysql_mysql_galera_healthcheck_password",
    "cf_mysql_mysql_roadmin_password",
    "cf_mysql_mysql_seeded_databases_cc_password",
    "cf_mysql_mysql_seeded_databases_diego_password",
    "cf_mysql_mysql_seeded_databases_uaa_password",
    "nats_password",
    "router_status_password",
    "uaa_scim_users_admin_password",
    "dropsonde_shared_secret",
    "router_route_services_secret",
    "uaa_admin_client_secret",
    "uaa_clients_cc-routing_secret",
    "uaa_clients_cc-service-dashboards_secret",
    "uaa_clients_cloud_controller_username_lookup_secret",
    "uaa_clients_doppler_secret",
    "uaa_clients_gorouter_secret",
    "uaa_clients_ssh-proxy_secret",
    "uaa_clients_tcp_emitter_secret",
    "uaa_clients_tcp_router_secret",
    "uaa_login_client_secret",
    "consul_encrypt_keys",
    "diego_bbs_encryption_keys_passphrase",
)

STATIC_FIELDS = {
    "uaa_scim_users_admin_name": "admin",
    "blobstore_admin_users_username": "blobstore-user",
    "cc_staging_upload_user": "staging_user",
    "cf_mysql_mysql_galera_healthcheck_endpoint_username": "galera_healthcheck",
    "cf_mysql_mysql_seeded_databases_cc_username": "cloud_controller",
    "cf_mysql_mysql_seeded_databases_diego_username": "diego",
    "cf_mysql_mysql_seeded_databases_uaa_username": "uaa",
    "nats_user": "nats",
    "router_status_user": "router-status",
}

ETCD_DOMAINS = ["*.etcd.service.cf.internal", "etcd.service.cf.internal"]

CERT_SETS = [
    CertAuthoritySpec(
        var_name="etcd_ca_cert",
        common_name="etcdCA",
        leaves=[
            CertKeyPairSpec(cert_var="etcd_server_cert", key_var="etcd_server_key",
                            common_name="etcd.service.cf.internal", domains=ETCD_DOMAINS),
            CertKeyPairSpec(cert_var="etcd_client_cert", key_var="etcd_client_key",
                            common_name="clientName"),
        ],
    ),
    CertAuthoritySpec(
        var_name="etcd_peer_ca_cert",
        common_name="peerCA",
        leaves=[
            CertKeyPairSpec(cert_var="etcd_peer_cert", key_var="etcd_peer_key",
                            common_name="etcd.service.cf.internal", domains=ETCD_DOMAINS),
        ],
    ),
]


def component_keys(component: SystemComponent) -> List[str]:
    """Keys add_system_component writes for this descriptor."""
    keys = [f"{component.name}_uri"]
    if component.subdomain_uri:
        keys.append(f"{component.name}_subdomain_uri")
    if component.https_url:
        keys.append(f"{component.name}_url")
    return keys


def schema_keys() -> List[str]:
    """Every key a full manifest carries, in generation order."""
    keys = ["system_domain", "app_domain"]
    for component in SYSTEM_COMPONENTS:
        keys.extend(component_keys(component))
    keys.extend(f.key for f in DERIVED_FIELDS)
    keys.extend(PASSWORD_FIELDS)
    keys.extend(STATIC_FIELDS)
    for ca in CERT_SETS:
        keys.append(ca.var_name)
        for leaf in ca.leaves:
            keys.extend([leaf.cert_var, leaf.key_var])
    return keys
