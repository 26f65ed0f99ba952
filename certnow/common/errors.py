"""Exceptions raised while configuring, issuing and loading certificates."""


class CertNowError(Exception):
    """Base class for all certnow errors."""


class InvalidAuthorityKey(CertNowError, TypeError):
    """Raised when an authority's private key cannot sign certificates."""

    def __init__(self, key_type=None):
        msg = "authority's private key is not a certificate signing key"
        if key_type is not None:
            msg = f"{msg} (got {key_type.__name__})"
        super().__init__(msg)


class InvalidSigningKey(CertNowError, TypeError):
    """Raised when an explicit key cannot be used to sign a certificate."""


class ConfigurationError(CertNowError, ValueError):
    """Raised when the resolved configuration is inconsistent."""


class BadCertificate(CertNowError):
    """Raised when certificate loading or validation fails."""
