"""Options for generate().

Every factory here returns an Option: a callable that mutates a
CertParams in place and raises to reject it. Options run strictly in
the order given, so later options see (and may override) the effects of
earlier ones:

    generate(
        common_name("www.example.com"),
        add_date(1, 0, 0),
        names("127.0.0.1", "localhost"),
    )

Arguments are normalised when the factory is called (empty names dropped,
IP strings parsed), and each option assigns a fresh list, so no option
ever holds on to a list the caller passed in.
"""

import ipaddress
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Union

from cryptography import x509

from .common.errors import ConfigurationError, InvalidAuthorityKey, InvalidSigningKey
from .common.params import CertParams, KeyUsage, with_common_name
from .common.utils import add_date as _add_date
from .common.utils import filter_non_empty, now_utc
from .crypto.sign import SigningKey, generate_ec_key, generate_rsa_key, is_signing_key

logger = logging.getLogger(__name__)

Option = Callable[[CertParams], None]
IPLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address, None]


def apply_options(params: CertParams, options: Iterable[Option]) -> CertParams:
    """Apply `options` to `params` in order, stopping at the first error."""
    for option in options:
        option(params)
    return params


def subject(name: x509.Name) -> Option:
    """Set the full subject name."""
    def option(p: CertParams) -> None:
        p.subject = name
    return option


def common_name(cn: str) -> Option:
    """Set the subject's common name, keeping any other subject attributes."""
    def option(p: CertParams) -> None:
        p.subject = with_common_name(p.subject, cn)
    return option


def serial_number(n: int) -> Option:
    def option(p: CertParams) -> None:
        p.serial_number = n
    return option


def not_before(t: datetime) -> Option:
    def option(p: CertParams) -> None:
        p.not_before = t
    return option


def not_after(t: datetime) -> Option:
    def option(p: CertParams) -> None:
        p.not_after = t
    return option


def add_date(years: int, months: int, days: int) -> Option:
    """Set not_after relative to not_before.

    If not_before is still unset it is fixed to the current time first.
    """
    def option(p: CertParams) -> None:
        if p.not_before is None:
            p.not_before = now_utc()
        p.not_after = _add_date(p.not_before, years, months, days)
    return option


def signer(key: SigningKey) -> Option:
    """Use an existing private key for the new certificate."""
    def option(p: CertParams) -> None:
        if not is_signing_key(key):
            raise InvalidSigningKey(f"{type(key).__name__} cannot sign certificates")
        p.key_factory = lambda: key
    return option


def rsa(bits: int) -> Option:
    """Generate an RSA key of `bits` bits when the params are resolved."""
    def option(p: CertParams) -> None:
        p.key_factory = lambda: generate_rsa_key(bits)
    return option


def ecdsa(curve) -> Option:
    """Generate an EC key on `curve` when the params are resolved."""
    def option(p: CertParams) -> None:
        p.key_factory = lambda: generate_ec_key(curve)
    return option


def key_usage(usage: KeyUsage) -> Option:
    """Set the key usage bits.

    ENCIPHER_ONLY and DECIPHER_ONLY are only meaningful together with
    KEY_AGREEMENT and are rejected without it.
    """
    def option(p: CertParams) -> None:
        if usage & (KeyUsage.ENCIPHER_ONLY | KeyUsage.DECIPHER_ONLY) and KeyUsage.KEY_AGREEMENT not in usage:
            raise ConfigurationError("ENCIPHER_ONLY and DECIPHER_ONLY require KEY_AGREEMENT")
        p.key_usage = usage
    return option


def ext_key_usage(*usages: x509.ObjectIdentifier) -> Option:
    """Set the extended key usages; with no arguments, none are included."""
    usages = list(usages)

    def option(p: CertParams) -> None:
        p.ext_key_usage = list(usages)
    return option


def dns_names_reset(*dns: str) -> Option:
    dns = filter_non_empty(dns)

    def option(p: CertParams) -> None:
        p.dns_names = list(dns)
    return option


def dns_names(*dns: str) -> Option:
    dns = filter_non_empty(dns)

    def option(p: CertParams) -> None:
        p.dns_names = p.dns_names + dns
    return option


def email_addresses_reset(*emails: str) -> Option:
    emails = filter_non_empty(emails)

    def option(p: CertParams) -> None:
        p.email_addresses = list(emails)
    return option


def email_addresses(*emails: str) -> Option:
    emails = filter_non_empty(emails)

    def option(p: CertParams) -> None:
        p.email_addresses = p.email_addresses + emails
    return option


def _parse_ips(ips: Iterable[IPLike]) -> List[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    return [ipaddress.ip_address(ip) for ip in filter_non_empty(ips)]


def ip_addresses_reset(*ips: IPLike) -> Option:
    ips = _parse_ips(ips)

    def option(p: CertParams) -> None:
        p.ip_addresses = list(ips)
    return option


def ip_addresses(*ips: IPLike) -> Option:
    ips = _parse_ips(ips)

    def option(p: CertParams) -> None:
        p.ip_addresses = p.ip_addresses + ips
    return option


def names(*values: str) -> Option:
    """Append each name to the IP addresses if it parses as one, else to the DNS names.

    Empty strings are ignored.
    """
    ips = []
    dns = []
    for v in filter_non_empty(values):
        try:
            ips.append(ipaddress.ip_address(v))
        except ValueError:
            dns.append(v)

    def option(p: CertParams) -> None:
        p.ip_addresses = p.ip_addresses + ips
        p.dns_names = p.dns_names + dns
    return option


def basic_constraints_valid(flag: bool) -> Option:
    def option(p: CertParams) -> None:
        p.basic_constraints_valid = flag
    return option


def is_ca(flag: bool) -> Option:
    """Set the CA flag; basic constraints are always included afterwards."""
    def option(p: CertParams) -> None:
        p.basic_constraints_valid = True
        p.is_ca = flag
    return option


def authority(cert) -> Option:
    """Sign with a previously generated certificate instead of self-signing.

    `cert` is a GeneratedCertificate (or anything with `chain` and
    `private_key`). Its leaf is parsed, its key must be able to sign, and
    its chain is appended after the new leaf in the result.
    """
    def option(p: CertParams) -> None:
        issuer = x509.load_der_x509_certificate(cert.chain[0])
        if not is_signing_key(cert.private_key):
            raise InvalidAuthorityKey(type(cert.private_key))
        p.authority = issuer
        p.authority_key = cert.private_key
        p.chain = list(cert.chain)
        logger.debug("authority set to %s", issuer.subject.rfc4514_string())
    return option
