"""Shared fixtures for certnow tests."""

from cryptography.hazmat.primitives.asymmetric import ec

import pytest

from certnow import KeyUsage, generate, options

CA_USAGE = KeyUsage.DIGITAL_SIGNATURE | KeyUsage.KEY_CERT_SIGN | KeyUsage.CRL_SIGN


@pytest.fixture(scope="session")
def root_ca():
    """A self-signed EC root authority, shared by the whole session."""
    return generate(
        options.common_name("Test Root CA"),
        options.add_date(20, 0, 0),
        options.ecdsa(ec.SECP256R1()),
        options.key_usage(CA_USAGE),
        options.ext_key_usage(),
        options.is_ca(True),
    )


@pytest.fixture(scope="session")
def intermediate_ca(root_ca):
    """An EC intermediate authority issued by `root_ca`."""
    return generate(
        options.authority(root_ca),
        options.common_name("Test Intermediate CA"),
        options.add_date(10, 0, 0),
        options.ecdsa(ec.SECP256R1()),
        options.key_usage(CA_USAGE),
        options.ext_key_usage(),
        options.is_ca(True),
    )


class RecordingRandom:
    """Deterministic stand-in for secrets.randbelow that records its bounds."""

    def __init__(self, value: int):
        self.value = value
        self.bounds = []

    def __call__(self, bound: int) -> int:
        self.bounds.append(bound)
        return self.value


@pytest.fixture()
def fixed_random():
    """A randbelow provider that always returns 0xABCDEF1234."""
    return RecordingRandom(0xABCDEF1234)
