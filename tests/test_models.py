"""Tests for data models."""

from datetime import datetime, timedelta, timezone

import pytest

from urlbuilder.errors import ConfigurationError
from urlbuilder.models import (
    NO_EXPIRATION,
    Expiration,
    GeneratedUrl,
    Region,
    S3Credentials,
    S3Settings,
    TimeUnit,
    to_epoch_millis,
)


class TestRegion:
    """Tests for Region enum."""

    def test_endpoints(self):
        """Verify a few well-known endpoints."""
        assert Region.US_STANDARD.endpoint == "s3.amazonaws.com"
        assert Region.EU_IRELAND.endpoint == "s3-eu-west-1.amazonaws.com"
        assert Region.SOUTH_AMERICA_SAO_PAULO.endpoint == "s3-sa-east-1.amazonaws.com"


class TestTimeUnit:
    """Tests for TimeUnit conversions."""

    def test_to_millis(self):
        assert TimeUnit.MILLISECONDS.to_millis(5) == 5
        assert TimeUnit.SECONDS.to_millis(2) == 2000
        assert TimeUnit.MINUTES.to_millis(1) == 60_000
        assert TimeUnit.HOURS.to_millis(1) == 3_600_000
        assert TimeUnit.DAYS.to_millis(1) == 86_400_000


class TestToEpochMillis:
    """Tests for datetime conversion."""

    def test_aware_datetime(self):
        instant = datetime(2018, 4, 1, tzinfo=timezone.utc)
        assert to_epoch_millis(instant) == 1522540800000

    def test_naive_datetime_is_utc(self):
        assert to_epoch_millis(datetime(2018, 4, 1)) == 1522540800000

    def test_other_timezone(self):
        instant = datetime(2018, 4, 1, 2, tzinfo=timezone(timedelta(hours=2)))
        assert to_epoch_millis(instant) == 1522540800000


class TestExpiration:
    """Tests for Expiration resolution."""

    def test_no_expiration(self):
        assert NO_EXPIRATION.resolve_millis(1000.0) is None
        assert NO_EXPIRATION.resolve_seconds(1000.0) is None

    def test_absolute_is_stable(self):
        """An absolute expiration ignores the current time."""
        expiration = Expiration.at(datetime(2018, 4, 1, tzinfo=timezone.utc))

        assert expiration.resolve_seconds(0.0) == 1522540800
        assert expiration.resolve_seconds(99999.0) == 1522540800

    def test_relative_uses_now(self):
        """A relative expiration moves with the clock."""
        expiration = Expiration.after(1, TimeUnit.HOURS)

        assert expiration.resolve_seconds(1000.0) == 4600
        assert expiration.resolve_seconds(2000.0) == 5600

    def test_seconds_round_down(self):
        expiration = Expiration.after(1500, TimeUnit.MILLISECONDS)
        assert expiration.resolve_seconds(10.0) == 11

    def test_zero_duration_is_unset(self):
        assert Expiration.after(0, TimeUnit.SECONDS).resolve_millis(10.0) is None

    def test_null_unit_raises(self):
        with pytest.raises(ConfigurationError, match="unit"):
            Expiration.after(1, None)

    def test_null_instant_raises(self):
        with pytest.raises(ConfigurationError, match="instant"):
            Expiration.at(None)


class TestCredentials:
    """Tests for credential dataclasses."""

    def test_secret_not_in_repr(self):
        credentials = S3Credentials("AKIA", "super-secret", "token-value")
        assert "super-secret" not in repr(credentials)
        assert "token-value" not in repr(credentials)

    def test_settings_to_credentials(self):
        settings = S3Settings(
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token="token",
        )
        assert settings.credentials() == S3Credentials("AKIA", "secret", "token")
        assert settings.region is Region.US_STANDARD


class TestGeneratedUrl:
    """Tests for GeneratedUrl."""

    def test_to_dict(self):
        result = GeneratedUrl(provider="s3", url="http://b.s3.amazonaws.com/k", signed=True, expires=10)
        assert result.to_dict() == {
            "provider": "s3",
            "url": "http://b.s3.amazonaws.com/k",
            "signed": True,
            "expires": 10,
        }

    def test_defaults(self):
        result = GeneratedUrl(provider="s3", url="http://b.s3.amazonaws.com/k")
        assert result.signed is False
        assert result.expires is None
