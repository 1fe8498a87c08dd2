"""
Manifest assembly.
Manifest is the single owned builder passed through every generation step;
build_manifest() runs the catalog in order and returns a read-only view.
"""

import types
from collections.abc import Mapping
from typing import Dict, Iterator

from cfmanifest.common.config import DEFAULT_DNS_BASE, DEFAULT_ENV
from cfmanifest.common.errors import ManifestError
from cfmanifest.common.logging_config import LOGGER
from cfmanifest.crypto.passwords import generate_password
from cfmanifest.crypto.pki import CertificateAuthority, CertKeyPair
from cfmanifest.manifest.catalog import (
    CERT_SETS, DERIVED_FIELDS, PASSWORD_FIELDS, STATIC_FIELDS, SYSTEM_COMPONENTS,
    CertAuthoritySpec,
)


class Manifest(Mapping):
    """Flat str -> str mapping; each key may be set once."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __setitem__(self, key: str, value: str):
        if key in self._data:
            raise ManifestError(f"duplicate manifest field {key!r}")
        if not isinstance(value, str):
            raise ManifestError(f"manifest field {key!r} must be a string, got {type(value).__name__}")
        self._data[key] = value

    # -------------------- URIS -------------------- #

    def add_system_component(self, name: str, subdomain_uri: bool = False, https_url: bool = False):
        if "system_domain" not in self._data:
            raise ManifestError(f"system_domain must be set before adding component {name!r}")
        uri = f"{name}.{self._data['system_domain']}"
        self[f"{name}_uri"] = uri
        if subdomain_uri:
            self[f"{name}_subdomain_uri"] = f"*.{uri}"
        if https_url:
            self[f"{name}_url"] = f"https://{uri}"

    def add_derived(self, key: str, template: str, **extra: str):
        try:
            self[key] = template.format_map({**self._data, **extra})
        except KeyError as e:
            raise ManifestError(f"derive {key!r}: field {e.args[0]!r} is not set") from e

    # -------------------- SECRETS -------------------- #

    def generate_passwords(self, *names: str):
        for name in names:
            self[name] = generate_password()

    # -------------------- CERTIFICATES -------------------- #

    def generate_certs(self, spec: CertAuthoritySpec) -> CertificateAuthority:
        """Create one CA, then issue and record every leaf it signs."""
        ca = CertificateAuthority(spec.common_name)
        ca.init()
        self[spec.var_name] = ca.cert_pem()
        for leaf in spec.leaves:
            pair = ca.issue(CertKeyPair(leaf.common_name, leaf.domains))
            self[leaf.cert_var] = pair.cert_pem()
            self[leaf.key_var] = pair.private_key_pem()
        return ca

    def freeze(self) -> Mapping[str, str]:
        return types.MappingProxyType(dict(self._data))


def build_manifest(dns_base: str = DEFAULT_DNS_BASE, env: str = DEFAULT_ENV) -> Mapping[str, str]:
    """Generate the full manifest for <env>.<dns_base>."""
    dns_name = f"{env}.{dns_base}"
    o = Manifest()
    o["system_domain"] = dns_name
    o["app_domain"] = dns_name

    for component in SYSTEM_COMPONENTS:
        o.add_system_component(component.name, component.subdomain_uri, component.https_url)
    for field in DERIVED_FIELDS:
        o.add_derived(field.key, field.template, env=env)

    o.generate_passwords(*PASSWORD_FIELDS)
    LOGGER.info("generated %d secrets", len(PASSWORD_FIELDS))
    for key, value in STATIC_FIELDS.items():
        o[key] = value

    for spec in CERT_SETS:
        o.generate_certs(spec)

    LOGGER.info("manifest for %s complete: %d fields", dns_name, len(o))
    return o.freeze()
