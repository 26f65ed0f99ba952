"""Pydantic model for the certificate configuration record.

A CertParams instance is created fresh for every generate() call,
mutated by the options in the order they were given and then resolved:
every field the options left unset gets its default, in a fixed order
since the default common name depends on the resolved serial number.

Fields hold cryptography objects directly (x509.Name, private keys,
OIDs) so the builder can use them without any conversion.
"""

import enum
import logging
import secrets
from datetime import datetime, timedelta
from ipaddress import IPv4Address, IPv6Address
from typing import Callable, List, Optional, Union

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from ..crypto.sign import SigningKey, generate_rsa_key
from .errors import ConfigurationError
from .utils import as_utc, int_to_bytes, now_utc

logger = logging.getLogger(__name__)

# Random serial numbers are drawn from [1, 2**63); X.509 serials must be positive.
MAX_SERIAL = 1 << 63
DEFAULT_VALIDITY = timedelta(days=90)
DEFAULT_CN_PREFIX = "Self Signed Cert "


class KeyUsage(enum.Flag):
    """Key usage bits, combinable with `|`."""

    NONE = 0
    DIGITAL_SIGNATURE = enum.auto()
    CONTENT_COMMITMENT = enum.auto()
    KEY_ENCIPHERMENT = enum.auto()
    DATA_ENCIPHERMENT = enum.auto()
    KEY_AGREEMENT = enum.auto()
    KEY_CERT_SIGN = enum.auto()
    CRL_SIGN = enum.auto()
    ENCIPHER_ONLY = enum.auto()
    DECIPHER_ONLY = enum.auto()

    def to_extension(self) -> Optional[x509.KeyUsage]:
        """The KeyUsage extension value, or None when no bit is set."""
        if not self:
            return None
        return x509.KeyUsage(
            digital_signature=KeyUsage.DIGITAL_SIGNATURE in self,
            content_commitment=KeyUsage.CONTENT_COMMITMENT in self,
            key_encipherment=KeyUsage.KEY_ENCIPHERMENT in self,
            data_encipherment=KeyUsage.DATA_ENCIPHERMENT in self,
            key_agreement=KeyUsage.KEY_AGREEMENT in self,
            key_cert_sign=KeyUsage.KEY_CERT_SIGN in self,
            crl_sign=KeyUsage.CRL_SIGN in self,
            encipher_only=KeyUsage.ENCIPHER_ONLY in self,
            decipher_only=KeyUsage.DECIPHER_ONLY in self,
        )


def default_common_name(serial: int) -> str:
    """Derive the fallback CN from the first three bytes of the serial."""
    return DEFAULT_CN_PREFIX + int_to_bytes(serial)[:3].hex()


def with_common_name(name: Optional[x509.Name], cn: str) -> x509.Name:
    """Return `name` with its CN replaced by `cn` (appended if absent)."""
    attr = x509.NameAttribute(NameOID.COMMON_NAME, cn)
    if name is None:
        return x509.Name([attr])

    rdns = []
    replaced = False
    for rdn in name.rdns:
        attrs = []
        for a in rdn:
            if a.oid == NameOID.COMMON_NAME:
                if replaced:
                    continue
                a = attr
                replaced = True
            attrs.append(a)
        if attrs:
            rdns.append(x509.RelativeDistinguishedName(attrs))
    if not replaced:
        rdns.append(x509.RelativeDistinguishedName([attr]))
    return x509.Name(rdns)


class CertParams(BaseModel):
    """Mutable configuration record for one certificate."""
    model_config = ConfigDict(
        frozen=False,  # Options mutate the record in place
        validate_assignment=True,  # Validate fields on assignment
        extra='forbid',  # Don't allow extra fields
        arbitrary_types_allowed=True,  # cryptography objects
    )

    subject: Optional[x509.Name] = None
    serial_number: Optional[int] = Field(default=None, ge=1)

    # key_factory defers key generation to resolve()
    key_factory: Optional[Callable[[], SigningKey]] = None
    private_key: Optional[SigningKey] = None

    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None

    key_usage: KeyUsage = KeyUsage.DIGITAL_SIGNATURE | KeyUsage.KEY_ENCIPHERMENT
    ext_key_usage: List[x509.ObjectIdentifier] = Field(
        default_factory=lambda: [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]
    )
    basic_constraints_valid: bool = False
    is_ca: bool = False

    dns_names: List[str] = Field(default_factory=list)
    email_addresses: List[str] = Field(default_factory=list)
    ip_addresses: List[Union[IPv4Address, IPv6Address]] = Field(default_factory=list)

    authority: Optional[x509.Certificate] = None
    authority_key: Optional[SigningKey] = None
    chain: List[bytes] = Field(default_factory=list)

    @field_validator("not_before", "not_after")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @property
    def common_name(self) -> Optional[str]:
        if self.subject is None:
            return None
        attrs = self.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        return attrs[0].value if attrs else None

    def resolve(self, randbelow: Callable[[int], int] = secrets.randbelow) -> None:
        """Fill every unset field with its default.

        Order matters: serial, subject, key, not_before, not_after.
        Errors from `randbelow` or the key factory propagate unchanged.
        """
        if self.serial_number is None:
            self.serial_number = 1 + randbelow(MAX_SERIAL - 1)
            logger.debug("drew random serial number %x", self.serial_number)

        if not self.common_name:
            cn = default_common_name(self.serial_number)
            self.subject = with_common_name(self.subject, cn)
            logger.debug("using default common name %r", cn)

        if self.private_key is None:
            factory = self.key_factory or generate_rsa_key
            self.private_key = factory()

        if self.not_before is None:
            self.not_before = now_utc()

        if self.not_after is None:
            self.not_after = self.not_before + DEFAULT_VALIDITY

        if self.not_after <= self.not_before:
            raise ConfigurationError(
                f"not_after ({self.not_after.isoformat()}) must be later than "
                f"not_before ({self.not_before.isoformat()})"
            )
