"""Command-line interface for the URL builder.

Collects inputs from arguments and configuration, builds the URL through
the library, and hands the result to the reporters.
"""

import argparse
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from urlbuilder.cloudfront import DEFAULT_ALGORITHM, CloudfrontUrlBuilder
from urlbuilder.config import DEFAULT_CONFIG_PATH, load_settings, parse_region
from urlbuilder.errors import ConfigurationError, SigningError
from urlbuilder.models import GeneratedUrl, Settings
from urlbuilder.private_keys import load_private_key
from urlbuilder.reporters import ConsoleReporter, JsonReporter, Reporter
from urlbuilder.s3 import S3UrlBuilder

LOG = logging.getLogger("urlbuilder.cli")

BUCKET_STYLES = ("dns", "virtual", "path")

DEFAULT_CLOUDFRONT_EXPIRY = 3600


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_url_generated(self, result: GeneratedUrl) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_url_generated(result)

    def on_error(self, message: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_error(message)


def _query_param(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def _add_expiry_args(parser: argparse.ArgumentParser, default_seconds: Optional[int]) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--expires-in",
        type=int,
        metavar="SECONDS",
        default=default_seconds,
        help="Signed URL lifetime in seconds, counted from now",
    )
    group.add_argument(
        "--expires-at",
        type=int,
        metavar="EPOCH",
        help="Absolute expiry as Unix epoch seconds",
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="urlbuilder",
        description="Build plain or signed object-store and CDN URLs",
    )

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Print only the URL",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON result to file",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    s3 = commands.add_parser("s3", help="Object-store URL")
    s3.add_argument("bucket")
    s3.add_argument("key")
    s3.add_argument("--region", help="Region name, e.g. EU_IRELAND")
    s3.add_argument("--endpoint", help="Custom endpoint hostname")
    s3.add_argument(
        "--bucket-style",
        choices=BUCKET_STYLES,
        default="dns",
        help="Where the bucket goes in the URL (default: dns)",
    )
    s3.add_argument("--attachment", metavar="FILENAME", help="Download filename")
    s3.add_argument("--fragment", help="Fragment appended after '#'")
    s3.add_argument("--ssl", action="store_true", help="Use https")
    _add_expiry_args(s3, default_seconds=None)

    cloudfront = commands.add_parser("cloudfront", help="Signed CDN URL")
    cloudfront.add_argument("hostname", nargs="?", help="Distribution hostname")
    cloudfront.add_argument("key")
    cloudfront.add_argument("--key-pair-id", help="Trusted signer key pair id")
    cloudfront.add_argument("--private-key", metavar="PATH", help="PEM or DER key file")
    cloudfront.add_argument(
        "--algorithm",
        default=DEFAULT_ALGORITHM,
        help=f"Signature algorithm (default: {DEFAULT_ALGORITHM})",
    )
    cloudfront.add_argument("--attachment", metavar="FILENAME", help="Download filename")
    cloudfront.add_argument("--content-type", help="Content-Type override")
    cloudfront.add_argument(
        "--param",
        action="append",
        type=_query_param,
        default=[],
        metavar="KEY=VALUE",
        help="Extra query parameter (repeatable)",
    )
    cloudfront.add_argument("--ssl", action="store_true", help="Use https")
    _add_expiry_args(cloudfront, default_seconds=DEFAULT_CLOUDFRONT_EXPIRY)

    return parser.parse_args(argv)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [ConsoleReporter(quiet=args.quiet)]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def _apply_expiry(builder, args: argparse.Namespace) -> Optional[int]:
    """Configure expiration on ``builder``.

    Relative lifetimes are fixed to an absolute instant here so that the
    reported expiry matches the one in the URL.

    Returns:
        Expiry in epoch seconds, or None for an unsigned URL.
    """
    if args.expires_at is not None:
        expires = args.expires_at
    elif args.expires_in:
        expires = int(time.time()) + args.expires_in
    else:
        return None

    builder.expire_at(datetime.fromtimestamp(expires, tz=timezone.utc))
    return expires


def build_s3(args: argparse.Namespace, settings: Settings) -> GeneratedUrl:
    """Build an object-store URL from arguments and settings."""
    builder = S3UrlBuilder(args.bucket, args.key).using_ssl(args.ssl)

    s3_settings = settings.s3
    if args.endpoint:
        builder.with_endpoint(args.endpoint)
    elif args.region:
        builder.in_region(parse_region(args.region))
    elif s3_settings is not None:
        builder.in_region(s3_settings.region)
        if s3_settings.endpoint:
            builder.with_endpoint(s3_settings.endpoint)

    if args.bucket_style == "path":
        builder.using_bucket_in_path()
    elif args.bucket_style == "virtual":
        builder.using_bucket_virtual_host()

    builder.with_attachment_filename(args.attachment)
    builder.with_fragment(args.fragment)

    expires = _apply_expiry(builder, args)
    signed = expires is not None

    if signed and s3_settings is not None:
        credentials = s3_settings.credentials()
        builder.using_credentials(
            credentials.access_key_id,
            credentials.secret_access_key,
            credentials.session_token,
        )

    return GeneratedUrl(provider="s3", url=builder.render(), signed=signed, expires=expires)


def build_cloudfront(args: argparse.Namespace, settings: Settings) -> GeneratedUrl:
    """Build a signed CDN URL from arguments and settings."""
    cf_settings = settings.cloudfront

    hostname = args.hostname or (cf_settings.distribution_hostname if cf_settings else None)
    key_pair_id = args.key_pair_id or (cf_settings.key_pair_id if cf_settings else None)
    key_path = args.private_key or (cf_settings.private_key_path if cf_settings else None)

    if not hostname:
        raise ConfigurationError("Distribution hostname must be set.")
    if not key_pair_id or not key_path:
        raise ConfigurationError("Key pair id and private key must be set.")

    private_key = load_private_key(key_path)
    builder = CloudfrontUrlBuilder(hostname, args.key, key_pair_id, private_key, args.algorithm)
    builder.with_ssl(args.ssl)
    builder.with_attachment_filename(args.attachment)
    builder.with_content_type(args.content_type)
    for key, value in args.param:
        builder.add_parameter(key, value)

    expires = _apply_expiry(builder, args)

    return GeneratedUrl(provider="cloudfront", url=builder.render(), signed=True, expires=expires)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 2 for errors
    """
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    try:
        settings = load_settings(args.config)
        if args.command == "s3":
            result = build_s3(args, settings)
        else:
            result = build_cloudfront(args, settings)
    except ConfigurationError as e:
        reporter.on_error(f"Configuration error: {e}")
        return 2
    except SigningError as e:
        reporter.on_error(f"Signing error: {e}")
        return 2

    LOG.debug("Generated %s URL", result.provider)
    reporter.on_url_generated(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
