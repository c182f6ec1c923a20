"""Loading of trusted-signer private keys from PEM text or DER bytes."""

from pathlib import Path
from typing import BinaryIO, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from urlbuilder.errors import SigningError

PEM_MARKER = b"-----BEGIN"


def _require_rsa(key) -> rsa.RSAPrivateKey:
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def from_pem_string(
    pem: Union[str, bytes],
    password: Optional[bytes] = None,
) -> rsa.RSAPrivateKey:
    """Load a PEM encoded key (PKCS#1 ``RSA PRIVATE KEY`` or PKCS#8).

    Raises:
        SigningError: If the text is not a readable RSA private key.
    """
    data = pem.encode("ascii") if isinstance(pem, str) else pem
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError) as e:
        raise SigningError(f"Unable to load PEM private key: {e}") from e
    return _require_rsa(key)


def from_der_binary(
    source: Union[bytes, BinaryIO],
    password: Optional[bytes] = None,
) -> rsa.RSAPrivateKey:
    """Load a DER encoded key from bytes or a binary stream.

    Raises:
        SigningError: If the data is not a readable RSA private key.
    """
    data = source if isinstance(source, (bytes, bytearray)) else source.read()
    try:
        key = serialization.load_der_private_key(bytes(data), password=password)
    except (ValueError, TypeError) as e:
        raise SigningError(f"Unable to load DER private key: {e}") from e
    return _require_rsa(key)


def load_private_key(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """Read a key file, detecting PEM versus DER from its contents."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SigningError(f"Unable to read private key file {path}: {e}") from e

    if data.lstrip().startswith(PEM_MARKER):
        return from_pem_string(data)
    return from_der_binary(data)
