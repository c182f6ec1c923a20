"""CDN URLs signed with a canned policy.

A canned policy grants access to exactly one resource until one instant.
The policy document is signed with the trusted signer's RSA key and the
signature travels in the ``Signature`` query parameter together with
``Expires`` and ``Key-Pair-Id``.
"""

import base64
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

from botocore.signers import CloudFrontSigner
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from urlbuilder.encoders import NO_ENCODING
from urlbuilder.errors import ConfigurationError, SigningError
from urlbuilder.http_utils import create_content_disposition_header
from urlbuilder.models import NO_EXPIRATION, Expiration, TimeUnit
from urlbuilder.url_builder import UrlBuilder, is_blank

LOG = logging.getLogger("urlbuilder.cloudfront")

DEFAULT_ALGORITHM = "SHA1withRSA"

# Signature algorithm names mapped to their digest
SIGNATURE_ALGORITHMS = {
    "sha1withrsa": hashes.SHA1,
    "sha256withrsa": hashes.SHA256,
}


def cloudfront_b64encode(data: bytes) -> str:
    """Base64 with the CDN's substitutions: ``+``→``-``, ``=``→``_``, ``/``→``~``.

    This is not the standard URL-safe alphabet; padding is kept as ``_``.
    """
    return (
        base64.b64encode(data)
        .decode("ascii")
        .replace("+", "-")
        .replace("=", "_")
        .replace("/", "~")
    )


class TrustedSignerCredentials:
    """Key pair id plus the private key registered for it."""

    def __init__(
        self,
        key_pair_id: str,
        private_key: rsa.RSAPrivateKey,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        """Bind a private key to a signature algorithm.

        Raises:
            SigningError: If the algorithm is unknown or the key is not an
                RSA private key.
        """
        hash_cls = SIGNATURE_ALGORITHMS.get((algorithm or "").lower())
        if hash_cls is None:
            raise SigningError(f"Unsupported signature algorithm: {algorithm}")
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningError(
                f"{algorithm} requires an RSA private key, got {type(private_key).__name__}"
            )

        self.key_pair_id = key_pair_id
        self.algorithm = algorithm
        self._private_key = private_key
        self._hash_cls = hash_cls
        self._signer = CloudFrontSigner(key_pair_id, self.rsa_sign)

    def rsa_sign(self, message: bytes) -> bytes:
        """Raw PKCS#1 v1.5 signature of ``message``."""
        try:
            return self._private_key.sign(message, padding.PKCS1v15(), self._hash_cls())
        except (UnsupportedAlgorithm, ValueError, TypeError) as e:
            raise SigningError(f"Failed to generate signature: {e}") from e

    def build_policy(self, resource: str, expires: int) -> str:
        """Canned policy JSON for ``resource`` valid until ``expires`` seconds."""
        date_less_than = datetime.fromtimestamp(expires, tz=timezone.utc)
        return self._signer.build_policy(resource, date_less_than)

    def sign(self, text: str) -> str:
        """Sign the UTF-8 bytes of ``text``, encoded for a query string."""
        return cloudfront_b64encode(self.rsa_sign(text.encode("utf-8")))

    def __repr__(self) -> str:
        return f"TrustedSignerCredentials(key_pair_id={self.key_pair_id!r}, algorithm={self.algorithm!r})"


@dataclass(frozen=True)
class CloudfrontUrl:
    """Everything needed to render one signed CDN URL."""

    distribution_hostname: str
    key: str
    signer: TrustedSignerCredentials
    ssl: bool = False
    expiration: Expiration = NO_EXPIRATION
    attachment_filename: Optional[str] = None
    content_type: Optional[str] = None
    parameters: tuple[tuple[str, str], ...] = ()


def render_cloudfront_url(url: CloudfrontUrl, clock: Callable[[], float] = time.time) -> str:
    """Render and sign ``url``.

    Raises:
        ConfigurationError: If no expiration is set or the hostname is blank.
        SigningError: If the signature cannot be produced.
    """
    expires = url.expiration.resolve_seconds(clock())
    if expires is None:
        raise ConfigurationError("Expire date must be set.")

    builder = UrlBuilder(url.distribution_hostname, url.key)
    builder.using_ssl(url.ssl)
    builder.add_parameters(url.parameters)

    if not is_blank(url.attachment_filename):
        builder.add_parameter(
            "response-content-disposition",
            create_content_disposition_header("attachment", url.attachment_filename),
        )

    if not is_blank(url.content_type):
        builder.add_parameter("response-content-type", url.content_type)

    resource = builder.render()
    policy = url.signer.build_policy(resource, expires)
    LOG.debug("Signing canned policy for %s expiring at %d", resource, expires)

    builder.add_parameter("Expires", expires)
    builder.add_parameter("Signature", url.signer.sign(policy), encoder=NO_ENCODING)
    builder.add_parameter("Key-Pair-Id", url.signer.key_pair_id)

    return builder.render()


class CloudfrontUrlBuilder:
    """Fluent construction of canned-policy CDN URLs; an expiration is required."""

    def __init__(
        self,
        distribution_hostname: str,
        key: str,
        key_pair_id: str,
        private_key: rsa.RSAPrivateKey,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        signer = TrustedSignerCredentials(key_pair_id, private_key, algorithm)
        self._url = CloudfrontUrl(
            distribution_hostname=distribution_hostname,
            key=key,
            signer=signer,
        )

    @property
    def config(self) -> CloudfrontUrl:
        return self._url

    def _update(self, **changes) -> "CloudfrontUrlBuilder":
        self._url = replace(self._url, **changes)
        return self

    def with_distribution_hostname(self, hostname: str) -> "CloudfrontUrlBuilder":
        return self._update(distribution_hostname=hostname)

    def with_key(self, key: str) -> "CloudfrontUrlBuilder":
        return self._update(key=key)

    def with_attachment_filename(self, filename: Optional[str]) -> "CloudfrontUrlBuilder":
        return self._update(attachment_filename=filename)

    def with_content_type(self, content_type: Optional[str]) -> "CloudfrontUrlBuilder":
        """Override the Content-Type the CDN returns."""
        return self._update(content_type=content_type)

    def add_parameter(self, key: str, value: str) -> "CloudfrontUrlBuilder":
        """Extra query parameter; it is covered by the signature."""
        return self._update(parameters=self._url.parameters + ((key, value),))

    def with_ssl(self, use_ssl: bool = True) -> "CloudfrontUrlBuilder":
        return self._update(ssl=use_ssl)

    def expire_in(self, duration: int, unit: TimeUnit) -> "CloudfrontUrlBuilder":
        """Valid for ``duration`` from the moment of rendering."""
        return self._update(expiration=Expiration.after(duration, unit))

    def expire_at(self, instant: datetime) -> "CloudfrontUrlBuilder":
        """Valid until ``instant``, accurate to the second."""
        return self._update(expiration=Expiration.at(instant))

    def render(self, clock: Callable[[], float] = time.time) -> str:
        return render_cloudfront_url(self._url, clock)

    def __str__(self) -> str:
        return self.render()
