"""PEM encoding, file output and reloading of generated certificates.

Certificates are written as `CERTIFICATE` blocks and private keys as
unencrypted PKCS#8 `PRIVATE KEY` blocks, the formats TLS libraries
(ssl.SSLContext.load_cert_chain, nginx, Go's crypto/tls) load directly.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from ..builder import GeneratedCertificate
from ..common.errors import BadCertificate, InvalidSigningKey
from ..crypto.sign import is_signing_key

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def encode_certificate_pem(cert: GeneratedCertificate) -> bytes:
    """PEM encode the leaf certificate."""
    return cert.leaf.public_bytes(serialization.Encoding.PEM)


def encode_chain_pem(cert: GeneratedCertificate) -> bytes:
    """PEM encode the whole chain, leaf first."""
    return b"".join(c.public_bytes(serialization.Encoding.PEM) for c in cert.chain_certificates())


def encode_private_key_pem(cert: GeneratedCertificate) -> bytes:
    """PEM encode the private key as unencrypted PKCS#8."""
    return cert.private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def write_certificate(fp: BinaryIO, cert: GeneratedCertificate) -> None:
    fp.write(encode_certificate_pem(cert))


def write_private_key(fp: BinaryIO, cert: GeneratedCertificate) -> None:
    fp.write(encode_private_key_pem(cert))


def _write_file(path: PathLike, data: bytes, mode: int) -> None:
    # mode only applies when the file is created, as with open(2)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    logger.debug("wrote %d bytes to %s", len(data), path)


def write_certificate_file(path: PathLike, cert: GeneratedCertificate, mode: int = 0o644) -> None:
    _write_file(path, encode_certificate_pem(cert), mode)


def write_chain_file(path: PathLike, cert: GeneratedCertificate, mode: int = 0o644) -> None:
    _write_file(path, encode_chain_pem(cert), mode)


def write_private_key_file(path: PathLike, cert: GeneratedCertificate, mode: int = 0o600) -> None:
    _write_file(path, encode_private_key_pem(cert), mode)


def load_key_pair(cert_pem: bytes, key_pem: bytes) -> GeneratedCertificate:
    """Rebuild a GeneratedCertificate from PEM data.

    Every CERTIFICATE block in `cert_pem` becomes part of the chain, in
    file order; the first one must match the private key.

    Raises:
        BadCertificate: no certificate found, or the key does not match the leaf
        InvalidSigningKey: the key cannot sign certificates
    """
    try:
        certs = x509.load_pem_x509_certificates(cert_pem)
    except ValueError as e:
        raise BadCertificate("No valid CERTIFICATE block found") from e

    key = serialization.load_pem_private_key(key_pem, password=None)
    if not is_signing_key(key):
        raise InvalidSigningKey(f"{type(key).__name__} cannot sign certificates")

    spki = serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    if certs[0].public_key().public_bytes(*spki) != key.public_key().public_bytes(*spki):
        raise BadCertificate("Private key does not match the certificate's public key")

    chain = tuple(c.public_bytes(serialization.Encoding.DER) for c in certs)
    return GeneratedCertificate(certificate=chain[0], private_key=key, chain=chain)


def load_key_pair_files(cert_path: PathLike, key_path: PathLike) -> GeneratedCertificate:
    with open(cert_path, "rb") as f:
        cert_pem = f.read()
    with open(key_path, "rb") as f:
        key_pem = f.read()
    return load_key_pair(cert_pem, key_pem)
