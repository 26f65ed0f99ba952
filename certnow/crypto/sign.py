"""Signing keys: type checks, generation and hash selection.

This module provides the key-algorithm specific pieces used when a
certificate is issued:
- SigningKey: the private key types able to sign a certificate
- is_signing_key(): check a key object against SigningKey
- generate_rsa_key() / generate_ec_key(): fresh key pairs
- hash_for_key(): signature hash the key should sign certificates with

cryptography picks the padding (PKCS#1 v1.5 for RSA) and ECDSA encoding
when a certificate is signed; only the digest is chosen here.
"""

from typing import Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

SigningKey = Union[
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    dsa.DSAPrivateKey,
]

_SIGNING_KEY_TYPES = (
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    dsa.DSAPrivateKey,
)

DEFAULT_RSA_BITS = 2048


def is_signing_key(key) -> bool:
    """True if `key` is a private key that can sign certificates."""
    return isinstance(key, _SIGNING_KEY_TYPES)


def generate_rsa_key(bits: int = DEFAULT_RSA_BITS) -> rsa.RSAPrivateKey:
    """Generate an RSA private key with public exponent 65537."""
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def generate_ec_key(curve) -> ec.EllipticCurvePrivateKey:
    """Generate an EC private key on `curve` (an instance or a curve class)."""
    if isinstance(curve, type):
        curve = curve()
    return ec.generate_private_key(curve)


def hash_for_key(key: SigningKey) -> Optional[hashes.HashAlgorithm]:
    """Pick the certificate signature hash for `key`.

    Ed25519 and Ed448 sign without a separate digest, so None is returned.
    EC keys use a digest matching the curve strength.
    """
    if isinstance(key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return None
    if isinstance(key, ec.EllipticCurvePrivateKey):
        if key.curve.key_size <= 256:
            return hashes.SHA256()
        if key.curve.key_size <= 384:
            return hashes.SHA384()
        return hashes.SHA512()
    return hashes.SHA256()
