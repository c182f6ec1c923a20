"""Data models shared by the URL signers, the config loader and the CLI."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from urlbuilder.errors import ConfigurationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Region(Enum):
    """Known object-store regions and their endpoints.

    With path-style addressing the region must match the location of the
    bucket.
    """

    US_STANDARD = "s3.amazonaws.com"
    US_WEST_NORTHERN_CALIFORNIA = "s3-us-west-1.amazonaws.com"
    US_WEST_OREGON = "s3-us-west-2.amazonaws.com"
    EU_IRELAND = "s3-eu-west-1.amazonaws.com"
    ASIA_PACIFIC_SINGAPORE = "s3-ap-southeast-1.amazonaws.com"
    ASIA_PACIFIC_SYDNEY = "s3-ap-southeast-2.amazonaws.com"
    ASIA_PACIFIC_TOKYO = "s3-ap-northeast-1.amazonaws.com"
    SOUTH_AMERICA_SAO_PAULO = "s3-sa-east-1.amazonaws.com"

    @property
    def endpoint(self) -> str:
        return self.value


class BucketEncoding(Enum):
    """Where the bucket name goes in an object-store URL."""

    DNS = "dns"  # bucket.s3.amazonaws.com/key
    VIRTUAL_DNS = "virtual_dns"  # bucket/key, bucket is a CNAME
    PATH = "path"  # s3.amazonaws.com/bucket/key


class TimeUnit(Enum):
    """Duration units for relative expiration, valued in milliseconds."""

    MILLISECONDS = 1
    SECONDS = 1000
    MINUTES = 60 * 1000
    HOURS = 60 * 60 * 1000
    DAYS = 24 * 60 * 60 * 1000

    def to_millis(self, duration: int) -> int:
        return duration * self.value


def to_epoch_millis(instant: datetime) -> int:
    """Milliseconds since the epoch; naive datetimes are taken as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return (instant - EPOCH) // timedelta(milliseconds=1)


@dataclass(frozen=True)
class Expiration:
    """When a signed URL stops working.

    Either an absolute ``instant`` or a ``duration`` in ``unit`` counted
    from the moment of rendering. A relative expiration therefore yields a
    different ``Expires`` value on every render; an absolute one does not.
    """

    instant: Optional[datetime] = None
    duration: int = 0
    unit: Optional[TimeUnit] = None

    @classmethod
    def at(cls, instant: datetime) -> "Expiration":
        if instant is None:
            raise ConfigurationError("instant cannot be null.")
        return cls(instant=instant)

    @classmethod
    def after(cls, duration: int, unit: TimeUnit) -> "Expiration":
        if duration is None:
            raise ConfigurationError("duration cannot be null.")
        if unit is None:
            raise ConfigurationError("unit cannot be null.")
        return cls(duration=duration, unit=unit)

    def resolve_millis(self, now: float) -> Optional[int]:
        """Expiry in epoch milliseconds, or None when no expiration is set.

        Args:
            now: Current time in epoch seconds, as returned by ``time.time()``.
        """
        if self.instant is not None:
            return to_epoch_millis(self.instant)

        if not self.duration or self.unit is None:
            return None

        return int(now * 1000) + self.unit.to_millis(self.duration)

    def resolve_seconds(self, now: float) -> Optional[int]:
        """Expiry in whole epoch seconds, rounded down."""
        millis = self.resolve_millis(now)
        if millis is None:
            return None
        return millis // 1000


NO_EXPIRATION = Expiration()


@dataclass(frozen=True)
class S3Credentials:
    """Access key pair, optionally with a temporary session token."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


@dataclass
class S3Settings:
    """Object-store settings read from configuration."""

    aws_access_key_id: str
    aws_secret_access_key: str = field(repr=False)
    aws_session_token: Optional[str] = field(default=None, repr=False)
    region: Region = Region.US_STANDARD
    endpoint: Optional[str] = None

    def credentials(self) -> S3Credentials:
        return S3Credentials(
            access_key_id=self.aws_access_key_id,
            secret_access_key=self.aws_secret_access_key,
            session_token=self.aws_session_token,
        )


@dataclass
class CloudfrontSettings:
    """CDN trusted-signer settings read from configuration."""

    key_pair_id: str
    private_key_path: str
    distribution_hostname: Optional[str] = None


@dataclass
class Settings:
    """Everything the CLI may need; either section can be absent."""

    s3: Optional[S3Settings] = None
    cloudfront: Optional[CloudfrontSettings] = None


@dataclass
class GeneratedUrl:
    """Result handed to reporters after a URL is built."""

    provider: str
    url: str
    signed: bool = False
    expires: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "url": self.url,
            "signed": self.signed,
            "expires": self.expires,
        }
