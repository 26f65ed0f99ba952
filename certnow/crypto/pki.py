"""X.509 certificate inspection and validation helpers.

This module provides functions to check issued certificates:
- load_certificate(): Load a PEM certificate file
- get_common_name(): Extract CN from cert subject
- validate_certificate(): Check if cert is valid and issued by a given issuer
- verify_chain(): Check every link of a leaf-first chain

The validation checks:
1. Certificate is signed by the given issuer (any key algorithm)
2. Check time falls within cert's validity window
3. Common Name matches expected value (if provided)
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.x509.oid import NameOID

from ..common.errors import BadCertificate
from ..common.utils import as_utc, now_utc


def load_certificate(path: Union[str, Path]) -> x509.Certificate:
    """Load an X.509 certificate from a PEM file."""
    with open(path, "rb") as f:
        return x509.load_pem_x509_certificate(f.read())


def get_common_name(cert: x509.Certificate) -> Optional[str]:
    """Extract Common Name from certificate subject."""
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return attrs[0].value if attrs else None


def validate_certificate(
    cert: x509.Certificate,
    issuer: x509.Certificate,
    expected_cn: Optional[str] = None,
    check_time: Optional[datetime] = None,
) -> None:
    """Validate that a certificate was issued by `issuer` and is currently valid.

    A self-signed certificate validates against itself.

    Args:
        cert: The certificate to validate
        issuer: The certificate that should have signed it
        expected_cn: If provided, validate cert's CN matches this
        check_time: Time to check validity for (default: current time)

    Raises:
        BadCertificate: If any check fails
    """
    check_time = now_utc() if check_time is None else as_utc(check_time)

    if check_time < cert.not_valid_before_utc or check_time > cert.not_valid_after_utc:
        raise BadCertificate("Certificate is expired or not yet valid")

    try:
        cert.verify_directly_issued_by(issuer)
    except (ValueError, TypeError, InvalidSignature) as e:
        raise BadCertificate(f"Certificate not issued by {issuer.subject.rfc4514_string()}") from e

    if expected_cn is not None:
        cn = get_common_name(cert)
        if cn != expected_cn:
            raise BadCertificate(f"Common name mismatch: {expected_cn!r} != {cn!r}")


def verify_chain(chain: Sequence[x509.Certificate], check_time: Optional[datetime] = None) -> None:
    """Validate a leaf-first chain whose last certificate is a self-signed root."""
    if not chain:
        raise BadCertificate("Empty certificate chain")

    for cert, issuer in zip(chain, chain[1:]):
        validate_certificate(cert, issuer, check_time=check_time)
    validate_certificate(chain[-1], chain[-1], check_time=check_time)


if __name__ == "__main__":
    import sys

    certs = [load_certificate(p) for p in sys.argv[1:]]
    verify_chain(certs)
    for cert in certs:
        print(f"OK: {get_common_name(cert)}")
