"""Tests for DNS-compatible bucket name checks."""

import pytest

from urlbuilder.bucket_names import is_dns_compatible


class TestIsDnsCompatible:
    """Tests for is_dns_compatible."""

    @pytest.mark.parametrize(
        "name",
        [
            "bucketuno",
            "urlbuildertests.widen.com",
            "my-bucket.example",
            "abc",
            "a" * 63,
            "123.456",
        ],
    )
    def test_valid_names(self, name: str):
        assert is_dns_compatible(name) is True

    @pytest.mark.parametrize(
        "name",
        [
            None,
            "BucketUno",
            "ab",
            "a" * 64,
            "my_bucket",
            "my!bucket",
            "my@bucket",
            "my#bucket",
            "bucket-",
            "bucket.",
            "my..bucket",
            "my-.bucket.com",
            "my.-bucket",
        ],
    )
    def test_invalid_names(self, name):
        assert is_dns_compatible(name) is False
