"""Shared fixtures: a throwaway trusted-signer key in several encodings."""

from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """2048-bit key; generating one per test is slow."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_key) -> bytes:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def pkcs8_der(rsa_key) -> bytes:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def pem_key_file(tmp_path: Path, pkcs1_pem: bytes) -> Path:
    path = tmp_path / "signer.pem"
    path.write_bytes(pkcs1_pem)
    return path


@pytest.fixture
def der_key_file(tmp_path: Path, pkcs8_der: bytes) -> Path:
    path = tmp_path / "signer.der"
    path.write_bytes(pkcs8_der)
    return path
