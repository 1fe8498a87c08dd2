"""
X.509 issuance and validation helpers.
One self-signed CA per trust domain, leaves signed directly by it:
  CertificateAuthority(common_name).init()
  ca.issue(CertKeyPair(common_name, domains))
"""
import datetime
from typing import List, Optional, Sequence

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cfmanifest.common.errors import CertificateError
from cfmanifest.common.logging_config import LOGGER
from cfmanifest.common.utils import add_years, now_utc
from cfmanifest.crypto.keys import KEY_BITS, create_rsa_key, private_key_pem

CA_EXPIRY_YEARS = 10
HOST_CERT_EXPIRY_YEARS = 2

# library errors that mean "could not build or sign this object"
_BUILD_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def load_cert(pem_bytes):
    """Load certificate from PEM bytes (string or bytes)."""
    if isinstance(pem_bytes, str):
        pem_bytes = pem_bytes.encode()
    return x509.load_pem_x509_certificate(pem_bytes)


def get_cn(cert):
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return attrs[0].value if attrs else None


def get_san_dns_names(cert: x509.Certificate) -> List[str]:
    """DNS names from the SAN extension, in order; [] when absent."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    return san.value.get_values_for_type(x509.DNSName)


def is_ca(cert: x509.Certificate) -> bool:
    try:
        bc = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return bc.value.ca


def _cn_name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def create_csr(key: rsa.RSAPrivateKey, common_name: str,
               domains: Optional[Sequence[str]] = None) -> x509.CertificateSigningRequest:
    """
    Build a CSR carrying the CN and, when domains are given, a SAN extension
    listing them verbatim (wildcards included). No domains means no SAN.
    """
    try:
        builder = x509.CertificateSigningRequestBuilder().subject_name(_cn_name(common_name))
        if domains:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([x509.DNSName(d) for d in domains]),
                critical=False,
            )
        return builder.sign(key, hashes.SHA256())
    except _BUILD_ERRORS as e:
        raise CertificateError(f"create csr for {common_name!r}: {e}") from e


def verify_cert(cert, ca_cert, expected_cn: str = None, now: datetime.datetime = None):
    """
    Verify a certificate against the CA that should have issued it.
    cert: Either a x509.Certificate object or PEM bytes/string
    ca_cert: Either a x509.Certificate object or PEM bytes/string
    expected_cn: Optional expected common name
    """
    if not isinstance(cert, x509.Certificate):
        cert = load_cert(cert)
    if not isinstance(ca_cert, x509.Certificate):
        ca_cert = load_cert(ca_cert)

    if cert.issuer != ca_cert.subject:
        raise CertificateError(
            f"BAD CERT: ISSUER MISMATCH (got {cert.issuer.rfc4514_string()}, "
            f"expected {ca_cert.subject.rfc4514_string()})"
        )
    hash_algorithm = cert.signature_hash_algorithm or hashes.SHA256()
    try:
        ca_cert.public_key().verify(
            cert.signature,
            cert.tbs_certificate_bytes,
            padding.PKCS1v15(),
            hash_algorithm,
        )
    except InvalidSignature as e:
        raise CertificateError("BAD CERT: UNTRUSTED or signature invalid") from e
    # validity period
    now = now or now_utc()
    if cert.not_valid_before_utc > now or cert.not_valid_after_utc < now:
        raise CertificateError("BAD CERT: EXPIRED/NOT YET VALID")
    if expected_cn:
        cn = get_cn(cert)
        if cn != expected_cn:
            raise CertificateError(f"BAD CERT: CN MISMATCH (got {cn}, expected {expected_cn})")
    return True


class CertKeyPair:
    """A leaf: fresh key plus a certificate signed by exactly one CA."""

    def __init__(self, common_name: str, domains: Optional[Sequence[str]] = None):
        self.common_name = common_name
        self.domains = list(domains or [])
        self.key: Optional[rsa.RSAPrivateKey] = None
        self.cert: Optional[x509.Certificate] = None

    def _require_issued(self):
        if self.cert is None or self.key is None:
            raise CertificateError(f"certificate {self.common_name!r} has not been issued")

    def cert_pem(self) -> str:
        self._require_issued()
        return self.cert.public_bytes(serialization.Encoding.PEM).decode()

    def private_key_pem(self) -> str:
        self._require_issued()
        return private_key_pem(self.key)


class CertificateAuthority:
    """
    Self-signed root. init() generates key and certificate exactly once;
    issue() then signs any number of leaves. The CA key is never exported.
    """

    def __init__(self, common_name: str, expiry_years: int = CA_EXPIRY_YEARS,
                 key_bits: int = KEY_BITS):
        self.common_name = common_name
        self.expiry_years = expiry_years
        self.key_bits = key_bits
        self._key: Optional[rsa.RSAPrivateKey] = None
        self.cert: Optional[x509.Certificate] = None

    @property
    def initialized(self) -> bool:
        return self._key is not None and self.cert is not None

    def init(self):
        if self.initialized:
            raise CertificateError(f"ca {self.common_name!r} is already initialized")
        key = create_rsa_key(self.key_bits, label=f"ca key for {self.common_name!r}")

        now = now_utc()
        subject = issuer = _cn_name(self.common_name)
        try:
            cert = (
                x509.CertificateBuilder()
                .subject_name(subject)
                .issuer_name(issuer)
                .public_key(key.public_key())
                .serial_number(x509.random_serial_number())
                .not_valid_before(now)
                .not_valid_after(add_years(now, self.expiry_years))
                .add_extension(x509.BasicConstraints(ca=True, path_length=0), critical=True)
                .add_extension(
                    x509.KeyUsage(
                        digital_signature=False, content_commitment=False,
                        key_encipherment=False, data_encipherment=False,
                        key_agreement=False, key_cert_sign=True, crl_sign=True,
                        encipher_only=False, decipher_only=False,
                    ),
                    critical=True,
                )
                .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
                .sign(key, hashes.SHA256())
            )
        except _BUILD_ERRORS as e:
            raise CertificateError(f"create ca cert for {self.common_name!r}: {e}") from e

        self._key, self.cert = key, cert
        LOGGER.info("created ca %r (serial %x, expires %s)",
                    self.common_name, cert.serial_number, cert.not_valid_after_utc.isoformat())

    def cert_pem(self) -> str:
        if not self.initialized:
            raise CertificateError(f"ca {self.common_name!r} is not initialized")
        return self.cert.public_bytes(serialization.Encoding.PEM).decode()

    def issue(self, pair: CertKeyPair, expiry_years: int = HOST_CERT_EXPIRY_YEARS) -> CertKeyPair:
        """Generate the leaf key, build its CSR, sign it and verify the result."""
        if not self.initialized:
            raise CertificateError(
                f"ca {self.common_name!r} is not initialized; cannot issue {pair.common_name!r}"
            )
        key = create_rsa_key(self.key_bits, label=f"host key for {pair.common_name!r}")
        csr = create_csr(key, pair.common_name, pair.domains)
        if not csr.is_signature_valid:
            raise CertificateError(f"create csr for {pair.common_name!r}: csr signature invalid")

        now = now_utc()
        not_after = add_years(now, expiry_years)
        if not_after > self.cert.not_valid_after_utc:
            raise CertificateError(
                f"sign host csr for {pair.common_name!r}: validity ends {not_after.isoformat()}, "
                f"after ca {self.common_name!r} expires {self.cert.not_valid_after_utc.isoformat()}"
            )

        try:
            builder = (
                x509.CertificateBuilder()
                .subject_name(csr.subject)
                .issuer_name(self.cert.subject)
                .public_key(csr.public_key())
                .serial_number(x509.random_serial_number())
                .not_valid_before(now)
                .not_valid_after(not_after)
                .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
                .add_extension(
                    x509.KeyUsage(
                        digital_signature=True, content_commitment=False,
                        key_encipherment=True, data_encipherment=False,
                        key_agreement=False, key_cert_sign=False, crl_sign=False,
                        encipher_only=False, decipher_only=False,
                    ),
                    critical=True,
                )
                .add_extension(
                    x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]),
                    critical=False,
                )
                .add_extension(x509.SubjectKeyIdentifier.from_public_key(csr.public_key()), critical=False)
                .add_extension(
                    x509.AuthorityKeyIdentifier.from_issuer_public_key(self._key.public_key()),
                    critical=False,
                )
            )
            try:
                san = csr.extensions.get_extension_for_class(x509.SubjectAlternativeName)
                builder = builder.add_extension(san.value, critical=san.critical)
            except x509.ExtensionNotFound:
                pass
            cert = builder.sign(private_key=self._key, algorithm=hashes.SHA256())
        except _BUILD_ERRORS as e:
            raise CertificateError(f"sign host csr for {pair.common_name!r}: {e}") from e

        try:
            verify_cert(cert, self.cert, expected_cn=pair.common_name, now=now)
        except CertificateError as e:
            raise CertificateError(f"verify host cert for {pair.common_name!r}: {e}") from e

        pair.key, pair.cert = key, cert
        LOGGER.info("issued %r from ca %r (serial %x, %d san entries)",
                    pair.common_name, self.common_name, cert.serial_number, len(pair.domains))
        return pair
