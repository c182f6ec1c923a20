"""Configuration loading for the URL builder CLI.

Supports two configuration sources:
1. Environment variables (for CI/CD) - takes priority
2. urlbuilder.json file (for local development)

Environment Variables:
    AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_SESSION_TOKEN
    URLBUILDER_S3_REGION     region name, e.g. EU_IRELAND
    URLBUILDER_S3_ENDPOINT   custom endpoint hostname
    CLOUDFRONT_KEY_PAIR_ID, CLOUDFRONT_PRIVATE_KEY_PATH
    CLOUDFRONT_DISTRIBUTION_HOSTNAME

JSON Format:
    {
        "s3": {"aws_access_key_id": "...", "aws_secret_access_key": "...",
               "region": "EU_IRELAND"},
        "cloudfront": {"key_pair_id": "...", "private_key_path": "cf.pem"}
    }
"""

import json
import os
from pathlib import Path
from typing import Optional

from urlbuilder.errors import ConfigurationError
from urlbuilder.models import CloudfrontSettings, Region, S3Settings, Settings

DEFAULT_CONFIG_PATH = "urlbuilder.json"


class ConfigError(ConfigurationError):
    """Raised when configuration loading fails."""

    pass


# Required fields per configuration section
S3_REQUIRED_FIELDS = ["aws_access_key_id", "aws_secret_access_key"]
CLOUDFRONT_REQUIRED_FIELDS = ["key_pair_id", "private_key_path"]

# Environment variable -> settings field
S3_ENV_VARS = {
    "AWS_ACCESS_KEY_ID": "aws_access_key_id",
    "AWS_SECRET_ACCESS_KEY": "aws_secret_access_key",
    "AWS_SESSION_TOKEN": "aws_session_token",
    "URLBUILDER_S3_REGION": "region",
    "URLBUILDER_S3_ENDPOINT": "endpoint",
}
CLOUDFRONT_ENV_VARS = {
    "CLOUDFRONT_KEY_PAIR_ID": "key_pair_id",
    "CLOUDFRONT_PRIVATE_KEY_PATH": "private_key_path",
    "CLOUDFRONT_DISTRIBUTION_HOSTNAME": "distribution_hostname",
}


def parse_region(name: Optional[str]) -> Region:
    """Look up a region by enum name (case-insensitive) or endpoint."""
    if not name:
        return Region.US_STANDARD

    for region in Region:
        if name.upper() == region.name or name.lower() == region.endpoint:
            return region

    raise ConfigError(f"Unknown region: {name}")


def _check_required(section: str, values: dict, required: list[str]) -> None:
    for field in required:
        if not values.get(field):
            raise ConfigError(f"Missing required field '{field}' in '{section}' settings")


def build_s3_settings(values: dict) -> S3Settings:
    """Create S3Settings from a raw dictionary.

    Raises:
        ConfigError: If a required field is missing or the region is unknown.
    """
    _check_required("s3", values, S3_REQUIRED_FIELDS)

    return S3Settings(
        aws_access_key_id=values["aws_access_key_id"],
        aws_secret_access_key=values["aws_secret_access_key"],
        aws_session_token=values.get("aws_session_token") or None,
        region=parse_region(values.get("region")),
        endpoint=values.get("endpoint") or None,
    )


def build_cloudfront_settings(values: dict) -> CloudfrontSettings:
    """Create CloudfrontSettings from a raw dictionary.

    Raises:
        ConfigError: If a required field is missing.
    """
    _check_required("cloudfront", values, CLOUDFRONT_REQUIRED_FIELDS)

    return CloudfrontSettings(
        key_pair_id=values["key_pair_id"],
        private_key_path=values["private_key_path"],
        distribution_hostname=values.get("distribution_hostname") or None,
    )


def load_from_json(config_path: str) -> Settings:
    """Load settings from a JSON file.

    Args:
        config_path: Path to the JSON config file.

    Returns:
        Settings with whichever sections the file defines.

    Raises:
        ConfigError: If file doesn't exist, contains invalid JSON,
                    or a section is missing required fields.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    settings = Settings()

    if "s3" in data:
        settings.s3 = build_s3_settings(data["s3"])

    if "cloudfront" in data:
        settings.cloudfront = build_cloudfront_settings(data["cloudfront"])

    return settings


def _read_env(mapping: dict[str, str]) -> dict:
    return {
        field: os.environ[var]
        for var, field in mapping.items()
        if os.environ.get(var)
    }


def load_from_env() -> Settings:
    """Load settings from environment variables.

    A section is only built when at least one of its variables is set;
    a partially configured section is an error.

    Raises:
        ConfigError: If a section's required variables are missing.
    """
    settings = Settings()

    s3_values = _read_env(S3_ENV_VARS)
    if s3_values:
        settings.s3 = build_s3_settings(s3_values)

    cloudfront_values = _read_env(CLOUDFRONT_ENV_VARS)
    if cloudfront_values:
        settings.cloudfront = build_cloudfront_settings(cloudfront_values)

    return settings


def has_env_settings() -> bool:
    """Check if any recognised environment variable is set."""
    names = list(S3_ENV_VARS) + list(CLOUDFRONT_ENV_VARS)
    return any(os.environ.get(name) for name in names)


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings with environment priority.

    Priority order:
    1. Environment variables (if any recognised variable is set)
    2. JSON config file

    Returns:
        Settings; sections stay None when nothing configures them.
        Commands decide which sections they require.
    """
    if has_env_settings():
        return load_from_env()

    if Path(config_path).exists():
        return load_from_json(config_path)

    return Settings()
