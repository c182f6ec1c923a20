"""Tests for configuration loading module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from urlbuilder.config import (
    ConfigError,
    has_env_settings,
    load_from_env,
    load_from_json,
    load_settings,
    parse_region,
)
from urlbuilder.errors import ConfigurationError
from urlbuilder.models import Region


def write_config(tmp_path: Path, data) -> Path:
    config_file = tmp_path / "urlbuilder.json"
    config_file.write_text(json.dumps(data))
    return config_file


class TestParseRegion:
    """Tests for parse_region function."""

    def test_enum_name(self):
        assert parse_region("EU_IRELAND") is Region.EU_IRELAND

    def test_enum_name_case_insensitive(self):
        assert parse_region("asia_pacific_tokyo") is Region.ASIA_PACIFIC_TOKYO

    def test_endpoint(self):
        assert parse_region("s3-us-west-2.amazonaws.com") is Region.US_WEST_OREGON

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_defaults_to_us_standard(self, name):
        assert parse_region(name) is Region.US_STANDARD

    def test_unknown_raises_error(self):
        with pytest.raises(ConfigError, match="Unknown region"):
            parse_region("MARS_BASE_ONE")


class TestLoadFromJson:
    """Tests for load_from_json function."""

    def test_valid_config_with_all_fields(self, tmp_path: Path):
        """Load a valid config file with both sections."""
        config_file = write_config(tmp_path, {
            "s3": {
                "aws_access_key_id": "test-key",
                "aws_secret_access_key": "test-secret",
                "aws_session_token": "test-token",
                "region": "EU_IRELAND",
                "endpoint": "s3clone.example.com",
            },
            "cloudfront": {
                "key_pair_id": "APKAEXAMPLE",
                "private_key_path": "cf.pem",
                "distribution_hostname": "d111.cloudfront.net",
            },
        })

        settings = load_from_json(str(config_file))

        assert settings.s3.aws_access_key_id == "test-key"
        assert settings.s3.aws_session_token == "test-token"
        assert settings.s3.region is Region.EU_IRELAND
        assert settings.s3.endpoint == "s3clone.example.com"
        assert settings.cloudfront.key_pair_id == "APKAEXAMPLE"
        assert settings.cloudfront.distribution_hostname == "d111.cloudfront.net"

    def test_optional_fields_default(self, tmp_path: Path):
        """Region defaults to US_STANDARD and optional fields to None."""
        config_file = write_config(tmp_path, {
            "s3": {"aws_access_key_id": "key", "aws_secret_access_key": "secret"},
        })

        settings = load_from_json(str(config_file))

        assert settings.s3.region is Region.US_STANDARD
        assert settings.s3.endpoint is None
        assert settings.s3.aws_session_token is None
        assert settings.cloudfront is None

    def test_missing_file_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file doesn't exist."""
        with pytest.raises(ConfigError, match="Config file not found"):
            load_from_json(str(tmp_path / "nonexistent.json"))

    def test_malformed_json_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file contains invalid JSON."""
        config_file = tmp_path / "urlbuilder.json"
        config_file.write_text("{ invalid json }")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_from_json(str(config_file))

    def test_non_object_raises_error(self, tmp_path: Path):
        config_file = write_config(tmp_path, ["s3"])

        with pytest.raises(ConfigError, match="JSON object"):
            load_from_json(str(config_file))

    def test_empty_config_returns_empty_settings(self, tmp_path: Path):
        config_file = write_config(tmp_path, {})

        settings = load_from_json(str(config_file))

        assert settings.s3 is None
        assert settings.cloudfront is None

    def test_missing_required_field_raises_error(self, tmp_path: Path):
        """Raise ConfigError when required field is missing."""
        config_file = write_config(tmp_path, {"cloudfront": {"key_pair_id": "APKAEXAMPLE"}})

        with pytest.raises(ConfigError, match="Missing required field 'private_key_path'"):
            load_from_json(str(config_file))

    def test_config_error_is_configuration_error(self, tmp_path: Path):
        """CLI callers only need to catch ConfigurationError."""
        with pytest.raises(ConfigurationError):
            load_from_json(str(tmp_path / "nonexistent.json"))


class TestLoadFromEnv:
    """Tests for load_from_env function."""

    def test_s3_env_vars_parsed_correctly(self):
        env_vars = {
            "AWS_ACCESS_KEY_ID": "env-key",
            "AWS_SECRET_ACCESS_KEY": "env-secret",
            "URLBUILDER_S3_REGION": "SOUTH_AMERICA_SAO_PAULO",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings = load_from_env()

        assert settings.s3.aws_access_key_id == "env-key"
        assert settings.s3.region is Region.SOUTH_AMERICA_SAO_PAULO
        assert settings.cloudfront is None

    def test_cloudfront_env_vars_parsed_correctly(self):
        env_vars = {
            "CLOUDFRONT_KEY_PAIR_ID": "APKAEXAMPLE",
            "CLOUDFRONT_PRIVATE_KEY_PATH": "/keys/cf.der",
            "CLOUDFRONT_DISTRIBUTION_HOSTNAME": "d111.cloudfront.net",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings = load_from_env()

        assert settings.s3 is None
        assert settings.cloudfront.private_key_path == "/keys/cf.der"
        assert settings.cloudfront.distribution_hostname == "d111.cloudfront.net"

    def test_partial_section_raises_error(self):
        """A section with some but not all required variables is an error."""
        with patch.dict(os.environ, {"AWS_ACCESS_KEY_ID": "env-key"}, clear=True):
            with pytest.raises(ConfigError, match="aws_secret_access_key"):
                load_from_env()

    def test_empty_values_ignored(self):
        with patch.dict(os.environ, {"AWS_ACCESS_KEY_ID": ""}, clear=True):
            assert has_env_settings() is False
            settings = load_from_env()

        assert settings.s3 is None


class TestLoadSettings:
    """Tests for load_settings priority."""

    def test_env_takes_priority_over_file(self, tmp_path: Path):
        config_file = write_config(tmp_path, {
            "s3": {"aws_access_key_id": "file-key", "aws_secret_access_key": "file-secret"},
        })
        env_vars = {"AWS_ACCESS_KEY_ID": "env-key", "AWS_SECRET_ACCESS_KEY": "env-secret"}

        with patch.dict(os.environ, env_vars, clear=True):
            settings = load_settings(str(config_file))

        assert settings.s3.aws_access_key_id == "env-key"

    def test_falls_back_to_file(self, tmp_path: Path):
        config_file = write_config(tmp_path, {
            "s3": {"aws_access_key_id": "file-key", "aws_secret_access_key": "file-secret"},
        })

        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(config_file))

        assert settings.s3.aws_access_key_id == "file-key"

    def test_nothing_configured_returns_empty_settings(self, tmp_path: Path):
        """Unsigned URLs need no configuration at all."""
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(tmp_path / "absent.json"))

        assert settings.s3 is None
        assert settings.cloudfront is None
