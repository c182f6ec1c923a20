"""
Signed URL builder for object-store and CDN front ends.

Builds syntactically correct URLs, optionally time-limited and signed
with query-string parameters the storage provider verifies.
"""

__version__ = "2.0.0"

from urlbuilder.cloudfront import CloudfrontUrlBuilder, TrustedSignerCredentials
from urlbuilder.errors import (
    ConfigurationError,
    SigningError,
    UnparsableUrlError,
    UrlBuilderError,
)
from urlbuilder.http_utils import create_content_disposition_header
from urlbuilder.models import BucketEncoding, Region, TimeUnit
from urlbuilder.s3 import S3UrlBuilder
from urlbuilder.url_builder import UrlBuilder

__all__ = [
    "__version__",
    "UrlBuilder",
    "S3UrlBuilder",
    "CloudfrontUrlBuilder",
    "TrustedSignerCredentials",
    "create_content_disposition_header",
    "BucketEncoding",
    "Region",
    "TimeUnit",
    "UrlBuilderError",
    "ConfigurationError",
    "UnparsableUrlError",
    "SigningError",
]
