"""
RSA key generation and PEM export with cryptography.
"""
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from cfmanifest.common.errors import KeyGenerationError

KEY_BITS = 2048
MIN_KEY_BITS = 2048


def create_rsa_key(bits: int = KEY_BITS, label: str = "rsa key") -> rsa.RSAPrivateKey:
    """Generate an RSA private key; `label` names the key in error messages."""
    if bits < MIN_KEY_BITS:
        raise KeyGenerationError(f"create {label}: {bits} bits is below the {MIN_KEY_BITS}-bit minimum")
    try:
        return rsa.generate_private_key(public_exponent=65537, key_size=bits)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise KeyGenerationError(f"create {label}: {e}") from e


def private_key_pem(key: rsa.RSAPrivateKey) -> str:
    key_pem = key.private_bytes(serialization.Encoding.PEM,
                                serialization.PrivateFormat.TraditionalOpenSSL,
                                serialization.NoEncryption())
    return key_pem.decode()
