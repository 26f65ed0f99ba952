"""Subject and authority key identifiers.

A key identifier is the SHA-1 digest of the BIT STRING subjectPublicKey
of the key's SubjectPublicKeyInfo, method (1) of RFC 5280 section
4.2.1.2. The same value is used as a certificate's own SKID and, in the
certificates it issues, as their AKID.
"""

from cryptography import x509


def calculate_key_id(public_key) -> bytes:
    """Return the 20-byte key identifier of `public_key`."""
    return x509.SubjectKeyIdentifier.from_public_key(public_key).digest
