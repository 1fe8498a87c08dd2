"""Exception hierarchy. Every failure surfaced to the CLI is a ManifestError."""


class ManifestError(Exception):
    """Base class for all generation failures."""


class SecretGenerationError(ManifestError):
    """The OS random source could not supply bytes."""


class KeyGenerationError(ManifestError):
    """RSA key generation failed."""


class CertificateError(ManifestError):
    """CSR construction, signing or verification failed."""


class SerializationError(ManifestError):
    """The manifest could not be rendered or parsed as YAML."""
