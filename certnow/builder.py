"""Certificate generation: resolve options, build, sign, assemble chain."""

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .common.params import CertParams
from .crypto.keyid import calculate_key_id
from .crypto.sign import SigningKey, hash_for_key
from .options import Option, apply_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedCertificate:
    """A freshly issued certificate with its key and chain.

    `certificate` is the leaf in DER form; `chain` starts with the same
    leaf followed by the issuing authority's chain, ending at the root.
    """
    certificate: bytes
    private_key: SigningKey
    chain: Tuple[bytes, ...]

    @property
    def leaf(self) -> x509.Certificate:
        return x509.load_der_x509_certificate(self.certificate)

    def chain_certificates(self) -> List[x509.Certificate]:
        return [x509.load_der_x509_certificate(der) for der in self.chain]


def build_template(params: CertParams, skid: bytes, akid: Optional[bytes]) -> x509.CertificateBuilder:
    """Turn resolved params into an unsigned certificate builder.

    The issuer name is the authority's subject when one is set, otherwise
    the certificate's own subject.
    """
    issuer = params.authority.subject if params.authority is not None else params.subject

    builder = (
        x509.CertificateBuilder()
        .subject_name(params.subject)
        .issuer_name(issuer)
        .public_key(params.private_key.public_key())
        .serial_number(params.serial_number)
        .not_valid_before(params.not_before)
        .not_valid_after(params.not_after)
    )

    usage = params.key_usage.to_extension()
    if usage is not None:
        builder = builder.add_extension(usage, critical=True)

    if params.ext_key_usage:
        builder = builder.add_extension(x509.ExtendedKeyUsage(params.ext_key_usage), critical=False)

    if params.basic_constraints_valid:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=params.is_ca, path_length=None), critical=True
        )

    builder = builder.add_extension(x509.SubjectKeyIdentifier(skid), critical=False)
    if akid is not None:
        builder = builder.add_extension(
            x509.AuthorityKeyIdentifier(
                key_identifier=akid,
                authority_cert_issuer=None,
                authority_cert_serial_number=None,
            ),
            critical=False,
        )

    general_names = (
        [x509.DNSName(n) for n in params.dns_names]
        + [x509.RFC822Name(e) for e in params.email_addresses]
        + [x509.IPAddress(ip) for ip in params.ip_addresses]
    )
    if general_names:
        builder = builder.add_extension(x509.SubjectAlternativeName(general_names), critical=False)

    return builder


def sign_certificate(params: CertParams) -> bytes:
    """Build and sign the certificate described by resolved `params`, returning DER."""
    skid = calculate_key_id(params.private_key.public_key())

    akid = None
    signing_key = params.private_key
    if params.authority_key is not None:
        signing_key = params.authority_key
        akid = calculate_key_id(signing_key.public_key())

    builder = build_template(params, skid, akid)
    cert = builder.sign(private_key=signing_key, algorithm=hash_for_key(signing_key))
    return cert.public_bytes(serialization.Encoding.DER)


def generate(*options: Option, randbelow: Optional[Callable[[int], int]] = None) -> GeneratedCertificate:
    """Generate a certificate.

    Without options this is a self-signed RSA-2048 certificate valid for
    90 days from now, usable for TLS server and client authentication.

    Args:
        options: Options from certnow.options, applied in order
        randbelow: Source for the random serial number, called with the
            exclusive upper bound (default: secrets.randbelow)

    Raises:
        Whatever an option, key generation or signing raises, unchanged.
    """
    params = apply_options(CertParams(), options)
    params.resolve(randbelow or secrets.randbelow)

    der = sign_certificate(params)
    chain = (der,) + tuple(params.chain)

    logger.debug(
        "issued %s (serial %x, %s, chain length %d)",
        params.subject.rfc4514_string(),
        params.serial_number,
        "self-signed" if params.authority is None else "signed by " + params.authority.subject.rfc4514_string(),
        len(chain),
    )
    return GeneratedCertificate(certificate=der, private_key=params.private_key, chain=chain)
