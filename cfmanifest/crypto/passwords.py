"""
Random passwords/secrets for the manifest.
16 bytes from the OS CSPRNG, URL-safe base64 without padding, with leading and
trailing '-'/'_' trimmed so values embed cleanly in YAML.
"""
import secrets

from cfmanifest.common.errors import SecretGenerationError
from cfmanifest.common.utils import b64url_nopad

PASSWORD_BYTES = 16


def generate_password() -> str:
    pw = ""
    while not pw:
        try:
            raw = secrets.token_bytes(PASSWORD_BYTES)
        except (OSError, NotImplementedError) as e:
            raise SecretGenerationError(f"unable to read rand bytes: {e}") from e
        pw = b64url_nopad(raw).strip("-_")
    return pw
