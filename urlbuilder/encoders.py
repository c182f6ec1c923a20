"""Percent-encoding strategies for URL components.

An ``Encoder`` is a plain pair of functions. Query parameters carry their
own encoder, so a value that is already URL-safe (a CDN signature) can be
emitted as-is while ordinary values are escaped at render time.
"""

from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote_plus, unquote_plus


def percent_encode(text: str) -> str:
    """Form-encode ``text`` as UTF-8, then write spaces as ``%20``.

    Form encoding turns a space into ``+`` and a literal plus into ``%2B``,
    so the replacement below only ever touches encoded spaces.
    """
    if text is None:
        return ""
    # "~" stays literal (RFC 3986 unreserved) where java.net.URLEncoder writes
    # %7E; both name the same resource and signers sign what they render.
    return quote_plus(text, safe="*").replace("+", "%20")


def percent_decode(text: str) -> str:
    """Inverse of form encoding; ``+`` decodes to a space."""
    if text is None:
        return ""
    return unquote_plus(text)


def _identity(text: str) -> str:
    return text


@dataclass(frozen=True)
class Encoder:
    """Encode/decode function pair applied to one URL component."""

    encode: Callable[[str], str]
    decode: Callable[[str], str]


DEFAULT_ENCODER = Encoder(encode=percent_encode, decode=percent_decode)

# Values that were made URL-safe by whoever produced them.
NO_ENCODING = Encoder(encode=_identity, decode=_identity)
