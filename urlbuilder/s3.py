"""Object-store URLs, optionally time-limited with a query-string signature.

Typical usage::

    S3UrlBuilder("urlbuildertests.widen.com", "cat.jpeg") \\
        .expire_in(1, TimeUnit.HOURS) \\
        .using_credentials(access_key_id, secret_access_key) \\
        .render()

produces ``http://urlbuildertests.widen.com.s3.amazonaws.com/cat.jpeg?Signature=...&Expires=...&AWSAccessKeyId=...``.

Configuration is an immutable ``S3Url``; ``render_s3_url`` turns it into a
string without touching it, so a builder can be rendered repeatedly.

Signing follows the query-string authentication scheme described in
http://s3.amazonaws.com/doc/s3-developer-guide/RESTAuthentication.html
"""

import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from botocore.auth import HmacV1Auth
from botocore.credentials import Credentials

from urlbuilder.bucket_names import is_dns_compatible
from urlbuilder.errors import ConfigurationError
from urlbuilder.models import (
    NO_EXPIRATION,
    BucketEncoding,
    Expiration,
    Region,
    S3Credentials,
    TimeUnit,
)
from urlbuilder.url_builder import GenerationMode, UrlBuilder, is_blank

LOG = logging.getLogger("urlbuilder.s3")

SIGNED_URL_REQUIRED = (
    "Signed URL required: expiration and credentials must be set "
    "when generating signed URLs."
)


@dataclass(frozen=True)
class S3Url:
    """Everything needed to render one object-store URL."""

    bucket: str
    key: tuple[str, ...]
    endpoint: str = Region.US_STANDARD.endpoint
    bucket_encoding: BucketEncoding = BucketEncoding.DNS
    expiration: Expiration = NO_EXPIRATION
    attachment_filename: Optional[str] = None
    credentials: Optional[S3Credentials] = None
    ssl: bool = False
    fragment: Optional[str] = None
    mode: GenerationMode = GenerationMode.FULLY_QUALIFIED

    @property
    def key_path(self) -> str:
        """Encoded key, segments joined by ``/``."""
        return "/".join(self.key)

    @property
    def canonical_resource(self) -> str:
        """``/bucket/key``, independent of the addressing style."""
        return f"/{self.bucket}/{self.key_path}"


def encode_key(key: str) -> tuple[str, ...]:
    """Split and percent-encode an object key, as path segments are."""
    if is_blank(key):
        raise ConfigurationError("key cannot be null or empty.")
    return tuple(UrlBuilder().make_path_segments(key))


def choose_bucket_encoding(bucket: str, requested: BucketEncoding) -> BucketEncoding:
    """Pick the addressing style actually used for ``bucket``.

    Names that cannot live in a hostname always fall back to path style.
    """
    if requested is BucketEncoding.PATH or not is_dns_compatible(bucket):
        return BucketEncoding.PATH
    return requested


def string_to_sign(
    expires: int,
    canonical_resource: str,
    params: tuple = (),
    session_token: Optional[str] = None,
) -> str:
    """Build the text signed for a GET query-string signature.

    Args:
        expires: Expiry in epoch seconds.
        canonical_resource: ``/bucket/key`` with the key already encoded.
        params: Query parameters present before signing, raw values.
        session_token: Temporary credential token, if any.
    """
    lines = [
        "GET",  # http verb
        "",  # content md5
        "",  # content type
        str(expires),
        canonical_resource,
    ]
    text = "\n".join(lines)

    if params:
        text += "?" + "".join(f"{p.key}={p.value}" for p in params)

    if session_token is not None:
        text += f"x-amz-security-token={session_token}"

    return text


def sign(text: str, credentials: S3Credentials) -> str:
    """HMAC-SHA1 of ``text`` keyed by the secret, standard Base64."""
    signer = HmacV1Auth(
        Credentials(
            credentials.access_key_id,
            credentials.secret_access_key,
            credentials.session_token,
        )
    )
    return signer.sign_string(text)


def _has_credentials(credentials: Optional[S3Credentials]) -> bool:
    return (
        credentials is not None
        and not is_blank(credentials.access_key_id)
        and not is_blank(credentials.secret_access_key)
    )


def render_s3_url(url: S3Url, clock: Callable[[], float] = time.time) -> str:
    """Render ``url``; signs it when an expiration is set.

    Args:
        url: URL configuration.
        clock: Source of the current epoch time, used for relative
            expirations.

    Raises:
        ConfigurationError: If an attachment filename is set without
            expiration and credentials, or an expiration without
            credentials.
    """
    canonical_resource = url.canonical_resource
    encoding = choose_bucket_encoding(url.bucket, url.bucket_encoding)

    builder = UrlBuilder().using_ssl(url.ssl).with_fragment(url.fragment)
    if url.mode is GenerationMode.PROTOCOL_RELATIVE:
        builder.mode_protocol_relative()
    else:
        builder.mode_fully_qualified()

    if encoding is BucketEncoding.PATH:
        builder.with_hostname(url.endpoint)
        builder.with_encoded_path(canonical_resource)
    elif encoding is BucketEncoding.VIRTUAL_DNS:
        builder.with_hostname(url.bucket)
        builder.with_encoded_path(url.key_path)
    else:
        builder.with_hostname(f"{url.bucket}.{url.endpoint}")
        builder.with_encoded_path(url.key_path)

    LOG.debug("Bucket %s addressed as %s", url.bucket, encoding.name)

    expires = url.expiration.resolve_seconds(clock())
    signed = expires is not None

    if not is_blank(url.attachment_filename):
        if not signed or not _has_credentials(url.credentials):
            raise ConfigurationError(SIGNED_URL_REQUIRED)

        builder.add_parameter(
            "response-content-disposition",
            f'attachment; filename="{url.attachment_filename}"',
        )

    if signed:
        if not _has_credentials(url.credentials):
            raise ConfigurationError(SIGNED_URL_REQUIRED)

        text = string_to_sign(
            expires,
            canonical_resource,
            builder.parameters,
            url.credentials.session_token,
        )
        LOG.debug("Signing %s expiring at %d", canonical_resource, expires)

        builder.add_parameter("Signature", sign(text, url.credentials))
        builder.add_parameter("Expires", expires)
        builder.add_parameter("AWSAccessKeyId", url.credentials.access_key_id)

    return builder.render()


class S3UrlBuilder:
    """Fluent construction of object-store URLs.

    Every call replaces the underlying immutable ``S3Url``; rendering
    never changes it.
    """

    def __init__(self, bucket: str, key: str):
        """Start a URL for ``key`` in ``bucket``.

        Raises:
            ConfigurationError: If bucket or key is blank.
        """
        if is_blank(bucket):
            raise ConfigurationError("bucket cannot be null or empty.")
        self._url = S3Url(bucket=bucket, key=encode_key(key))

    @property
    def config(self) -> S3Url:
        return self._url

    @property
    def key(self) -> str:
        """Current encoded key, segments separated by ``/``."""
        return self._url.key_path

    def _update(self, **changes) -> "S3UrlBuilder":
        self._url = replace(self._url, **changes)
        return self

    def with_bucket(self, bucket: str) -> "S3UrlBuilder":
        if is_blank(bucket):
            raise ConfigurationError("bucket cannot be null or empty.")
        return self._update(bucket=bucket)

    def with_key(self, key: str) -> "S3UrlBuilder":
        return self._update(key=encode_key(key))

    def in_region(self, region: Region) -> "S3UrlBuilder":
        """Use the endpoint of ``region``. Default is US_STANDARD."""
        if region is None:
            raise ConfigurationError("region cannot be null.")
        return self._update(endpoint=region.endpoint)

    def with_endpoint(self, endpoint: str) -> "S3UrlBuilder":
        """Use a custom endpoint hostname, e.g. for API-compatible stores.

        For Amazon regions prefer ``in_region``.
        """
        if is_blank(endpoint):
            raise ConfigurationError("endpoint cannot be null or empty.")
        return self._update(endpoint=endpoint.strip())

    def using_bucket_in_hostname(self) -> "S3UrlBuilder":
        """Prefix the bucket to the endpoint hostname. Default."""
        return self._update(bucket_encoding=BucketEncoding.DNS)

    def using_bucket_virtual_host(self) -> "S3UrlBuilder":
        """Use the bucket name itself as the hostname."""
        return self._update(bucket_encoding=BucketEncoding.VIRTUAL_DNS)

    def using_bucket_in_path(self) -> "S3UrlBuilder":
        """Put the bucket in the path, after the endpoint hostname."""
        return self._update(bucket_encoding=BucketEncoding.PATH)

    def expire_in(self, duration: int, unit: TimeUnit) -> "S3UrlBuilder":
        """Valid for ``duration`` from the moment of rendering."""
        return self._update(expiration=Expiration.after(duration, unit))

    def expire_at(self, instant: datetime) -> "S3UrlBuilder":
        """Valid until ``instant``, accurate to the second."""
        return self._update(expiration=Expiration.at(instant))

    def using_credentials(
        self,
        access_key_id: str,
        secret_access_key: str,
        session_token: Optional[str] = None,
    ) -> "S3UrlBuilder":
        """Account key pair used to sign; required for signed URLs."""
        if access_key_id is None:
            raise ConfigurationError("access_key_id cannot be null.")
        if secret_access_key is None:
            raise ConfigurationError("secret_access_key cannot be null.")

        return self._update(
            credentials=S3Credentials(access_key_id, secret_access_key, session_token)
        )

    def with_attachment_filename(self, filename: Optional[str]) -> "S3UrlBuilder":
        """Ask the store to serve the object as a download named ``filename``."""
        return self._update(attachment_filename=None if is_blank(filename) else filename)

    def using_ssl(self, use_ssl: bool = True) -> "S3UrlBuilder":
        return self._update(ssl=use_ssl)

    def with_fragment(self, fragment: Optional[str]) -> "S3UrlBuilder":
        """Add a ``#fragment``; it is not part of the signature."""
        return self._update(fragment=fragment)

    def mode_protocol_relative(self) -> "S3UrlBuilder":
        return self._update(mode=GenerationMode.PROTOCOL_RELATIVE)

    def mode_fully_qualified(self) -> "S3UrlBuilder":
        """Default mode."""
        return self._update(mode=GenerationMode.FULLY_QUALIFIED)

    def render(self, clock: Callable[[], float] = time.time) -> str:
        return render_s3_url(self._url, clock)

    def __str__(self) -> str:
        return self.render()
