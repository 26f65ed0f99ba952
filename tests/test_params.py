"""Tests for resolving CertParams defaults."""

from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

import pytest

from certnow import CertParams, ConfigurationError, KeyUsage
from certnow.common.params import MAX_SERIAL, default_common_name, with_common_name


def test_default_common_name():
    """Tests the CN derivation from the serial's leading bytes."""
    assert default_common_name(0x0102030405) == "Self Signed Cert 010203"
    assert default_common_name(0xAB) == "Self Signed Cert ab"


def test_resolve_fills_everything(fixed_random):
    """Tests that resolve() fills serial, subject, key and validity."""
    p = CertParams(key_factory=lambda: ec.generate_private_key(ec.SECP256R1()))
    before = datetime.now(timezone.utc)
    p.resolve(fixed_random)
    after = datetime.now(timezone.utc)

    assert p.serial_number == 0xABCDEF1235
    assert fixed_random.bounds == [MAX_SERIAL - 1]
    assert p.common_name == "Self Signed Cert abcdef"
    assert isinstance(p.private_key, ec.EllipticCurvePrivateKey)
    assert before <= p.not_before <= after
    assert p.not_after == p.not_before + timedelta(days=90)


def test_resolve_default_key_is_rsa_2048():
    """Tests that without a key option an RSA-2048 key is generated."""
    p = CertParams(serial_number=1)
    p.resolve()
    assert isinstance(p.private_key, rsa.RSAPrivateKey)
    assert p.private_key.key_size == 2048


def test_resolve_keeps_explicit_values(fixed_random):
    """Tests that explicit values are never replaced by defaults."""
    nb = datetime(2030, 1, 1, tzinfo=timezone.utc)
    na = datetime(2031, 1, 1, tzinfo=timezone.utc)
    key = ec.generate_private_key(ec.SECP256R1())
    p = CertParams(
        serial_number=7,
        subject=with_common_name(None, "explicit"),
        key_factory=lambda: key,
        not_before=nb,
        not_after=na,
    )
    p.resolve(fixed_random)

    assert fixed_random.bounds == []
    assert p.serial_number == 7
    assert p.common_name == "explicit"
    assert p.private_key is key
    assert (p.not_before, p.not_after) == (nb, na)


def test_resolve_adds_cn_to_subject_without_one():
    """Tests that a subject lacking a CN gets the default CN appended."""
    name = x509.Name([x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Acme")])
    p = CertParams(subject=name, serial_number=0xFFFFFF01, key_factory=lambda: ec.generate_private_key(ec.SECP256R1()))
    p.resolve()

    assert p.common_name == "Self Signed Cert ffffff"
    assert p.subject.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)[0].value == "Acme"


def test_resolve_rejects_inverted_window():
    """Tests that not_after equal to not_before is a configuration error."""
    t = datetime(2030, 1, 1, tzinfo=timezone.utc)
    p = CertParams(serial_number=1, not_before=t, not_after=t, key_factory=lambda: ec.generate_private_key(ec.SECP256R1()))
    with pytest.raises(ConfigurationError):
        p.resolve()


def test_key_factory_failure_propagates():
    """Tests that key generation errors surface unchanged."""
    def broken():
        raise RuntimeError("keygen failed")

    p = CertParams(serial_number=1, key_factory=broken)
    with pytest.raises(RuntimeError, match="keygen failed"):
        p.resolve()


def test_key_usage_extension():
    """Tests the KeyUsage flag to extension conversion."""
    assert KeyUsage.NONE.to_extension() is None

    ext = (KeyUsage.KEY_CERT_SIGN | KeyUsage.CRL_SIGN).to_extension()
    assert ext.key_cert_sign
    assert ext.crl_sign
    assert not ext.digital_signature


def test_extra_fields_forbidden():
    """Tests that unknown fields are rejected."""
    with pytest.raises(ValueError):
        CertParams(common_nam="typo")


def test_lowest_random_draw_is_a_valid_serial():
    """Tests that a zero draw still resolves to a positive, issuable serial."""
    p = CertParams(key_factory=lambda: ec.generate_private_key(ec.SECP256R1()))
    p.resolve(lambda bound: 0)

    assert p.serial_number == 1
    assert p.common_name == "Self Signed Cert 01"


def test_highest_random_draw_stays_below_bound():
    """Tests that the largest draw maps to the top of the 63-bit serial space."""
    p = CertParams(key_factory=lambda: ec.generate_private_key(ec.SECP256R1()))
    p.resolve(lambda bound: bound - 1)

    assert p.serial_number == MAX_SERIAL - 1
