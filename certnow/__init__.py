"""Ready-to-use X.509 certificates in one call.

    from certnow import KeyUsage, generate, options

    ca = generate(options.common_name("My CA"), options.is_ca(True),
                  options.key_usage(KeyUsage.KEY_CERT_SIGN | KeyUsage.CRL_SIGN))
    leaf = generate(options.authority(ca), options.names("localhost", "127.0.0.1"))
"""

from . import options
from .builder import GeneratedCertificate, generate
from .common.errors import (
    BadCertificate,
    CertNowError,
    ConfigurationError,
    InvalidAuthorityKey,
    InvalidSigningKey,
)
from .common.params import CertParams, KeyUsage

__version__ = "0.1.0"

__all__ = [
    "BadCertificate",
    "CertNowError",
    "CertParams",
    "ConfigurationError",
    "GeneratedCertificate",
    "InvalidAuthorityKey",
    "InvalidSigningKey",
    "KeyUsage",
    "generate",
    "options",
]
