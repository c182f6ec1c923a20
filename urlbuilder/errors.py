"""Exceptions raised while building and signing URLs."""


class UrlBuilderError(Exception):
    """Base class for all URL builder errors."""

    pass


class ConfigurationError(UrlBuilderError):
    """Raised when a required setting is missing or invalid.

    Detected before any signing work is done; the render call that raised
    it produced no URL.
    """

    pass


class UnparsableUrlError(UrlBuilderError):
    """Raised when a string is not a well-formed absolute http(s) URL."""

    pass


class SigningError(UrlBuilderError):
    """Raised when the signature primitive cannot be used.

    Covers unknown algorithm names, keys that do not fit the algorithm,
    key material that cannot be loaded, and failures inside the
    cryptography library itself.
    """

    pass
