"""Fluent builder for syntactically correct http(s) URLs.

Typical usage::

    UrlBuilder("my.host.com", "foo").append_path_segment("bar").add_parameter("a", "b").render()

produces ``http://my.host.com/foo/bar?a=b``.

Path segments are percent-encoded once, when they are added. Query values
are kept raw and encoded at render time with the encoder stored next to
each parameter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Union
from urllib.parse import parse_qsl, unquote, urlsplit

from urlbuilder.encoders import DEFAULT_ENCODER, Encoder
from urlbuilder.errors import ConfigurationError, UnparsableUrlError

# Ports that are never written into a URL
DEFAULT_PORTS = (80, 443)


class GenerationMode(Enum):
    """How much of the URL is rendered in front of the path."""

    FULLY_QUALIFIED = "fully_qualified"  # http://my.host.com/foo
    PROTOCOL_RELATIVE = "protocol_relative"  # //my.host.com/foo
    HOSTNAME_RELATIVE = "hostname_relative"  # /foo


@dataclass(frozen=True)
class QueryParam:
    """One query string entry, value stored unencoded."""

    key: str
    value: Optional[str]
    encoder: Encoder = DEFAULT_ENCODER

    def render(self) -> str:
        encoded_key = self.encoder.encode(self.key)
        if not self.value:
            return encoded_key
        return f"{encoded_key}={self.encoder.encode(self.value)}"


def is_blank(text: Optional[str]) -> bool:
    """True for ``None``, empty, or whitespace-only strings."""
    return text is None or not text.strip()


def _reencode(text: str, encoder: Encoder) -> str:
    """Normalise the percent-encoding of a parsed path segment or fragment.

    Outside the query a literal ``+`` is not a space, so it is kept as
    written instead of being decoded and escaped to ``%2B``.
    """
    return "+".join(encoder.encode(unquote(piece)) for piece in text.split("+"))


def _netloc_host(netloc: str) -> str:
    """Host part of ``netloc`` with its original case."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[: host.find("]") + 1]
    return host.partition(":")[0]


class UrlBuilder:
    """Mutable URL model rendered on demand.

    Each builder instance owns its state; share a builder between threads
    only with external locking.
    """

    def __init__(
        self,
        hostname: Optional[str] = None,
        path: Optional[str] = None,
        port: int = 0,
        encoder: Encoder = DEFAULT_ENCODER,
    ):
        """Create a builder.

        Args:
            hostname: Host for absolute URLs. Passing any hostname, even a
                blank one, selects fully qualified rendering.
            path: Initial path, split on ``/`` and encoded per segment.
            port: Explicit port; 0 means the scheme default.
            encoder: Encoder for path segments, the fragment, and query
                parameters added without an explicit encoder.
        """
        self._encoder = encoder
        self._ssl = False
        self._hostname = ""
        self._port = 0
        self._path: list[str] = []
        self._trailing_slash = False
        self._fragment: Optional[str] = None
        self._encoded_fragment: Optional[str] = None
        self._params: list[QueryParam] = []

        if hostname is None:
            self._mode = GenerationMode.HOSTNAME_RELATIVE
        else:
            self._mode = GenerationMode.FULLY_QUALIFIED
            self.with_hostname(hostname)

        self.with_port(port)
        self.with_path(path)

    @classmethod
    def parse(cls, url: str, encoder: Encoder = DEFAULT_ENCODER) -> "UrlBuilder":
        """Build from an absolute http(s) URL string.

        Path segments and the fragment keep their meaning, including a
        literal ``+`` and a trailing slash; their encoding is normalised.
        Query keys and values are form-decoded and re-encoded on render.

        Raises:
            UnparsableUrlError: If ``url`` is not a well-formed absolute URL.
        """
        if is_blank(url):
            raise UnparsableUrlError(f"Not an absolute URL: {url!r}")

        try:
            parts = urlsplit(url.strip())
            port = parts.port
        except ValueError as e:
            raise UnparsableUrlError(f"Not an absolute URL: {url!r}") from e

        scheme = parts.scheme.lower()
        if scheme not in ("http", "https") or not parts.hostname:
            raise UnparsableUrlError(f"Not an absolute URL: {url!r}")

        builder = cls(_netloc_host(parts.netloc), encoder=encoder)
        builder.using_ssl(scheme == "https")
        if port is not None:
            builder.with_port(port)

        builder._path = [
            _reencode(segment, encoder)
            for segment in parts.path.split("/")
            if not is_blank(segment)
        ]
        if builder._path and parts.path.endswith("/"):
            builder.include_trailing_slash()

        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            builder.add_parameter(key, value)

        if parts.fragment:
            builder.with_fragment(unquote(parts.fragment))
            if builder._fragment is not None:
                builder._encoded_fragment = _reencode(parts.fragment, encoder)

        return builder

    # -- host and scheme ---------------------------------------------------

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def port(self) -> int:
        return self._port

    @property
    def ssl(self) -> bool:
        return self._ssl

    @property
    def mode(self) -> GenerationMode:
        return self._mode

    def with_hostname(self, hostname: Optional[str]) -> "UrlBuilder":
        """Set the host; surrounding whitespace is trimmed."""
        self._hostname = (hostname or "").strip()
        return self

    def with_port(self, port: int) -> "UrlBuilder":
        """Set the port. Port 443 also switches the scheme to https."""
        self._port = port
        if port == 443:
            self.using_ssl()
        return self

    def using_ssl(self, use_ssl: bool = True) -> "UrlBuilder":
        self._ssl = use_ssl
        return self

    # -- path --------------------------------------------------------------

    @property
    def path(self) -> str:
        """Slash separated path, always with a leading slash."""
        return "/" + "/".join(self._path)

    @property
    def path_segments(self) -> tuple[str, ...]:
        """Encoded path segments in URL order."""
        return tuple(self._path)

    def make_path_segments(self, value: Optional[str], encode: bool = True) -> list[str]:
        """Split ``value`` on slashes, dropping blank segments.

        Args:
            value: Raw path text.
            encode: Percent-encode each kept segment.
        """
        if value is None:
            return []

        segments = [s for s in value.split("/") if not is_blank(s)]
        if encode:
            return [self._encoder.encode(s) for s in segments]
        return segments

    def with_path(self, path: Optional[str]) -> "UrlBuilder":
        """Replace the path; use ``append_path_segment`` to extend it."""
        self._path = self.make_path_segments(path)
        return self

    def with_encoded_path(self, path: Optional[str]) -> "UrlBuilder":
        """Replace the path with segments that are already percent-encoded."""
        self._path = self.make_path_segments(path, encode=False)
        return self

    def append_path_segment(self, value: Optional[str]) -> "UrlBuilder":
        """Append to the path.

        Multiple consecutive slashes collapse, and each segment is encoded
        on its own.
        """
        if not is_blank(value):
            self._path.extend(self.make_path_segments(value))
        return self

    def prepend_path_segment(self, value: Optional[str]) -> "UrlBuilder":
        """Insert ``value`` at the beginning of the path."""
        if not is_blank(value):
            self._path[0:0] = self.make_path_segments(value)
        return self

    def include_trailing_slash(self, include: bool = True) -> "UrlBuilder":
        """End a non-empty path with ``/``. Off by default."""
        self._trailing_slash = include
        return self

    # -- query -------------------------------------------------------------

    @property
    def parameters(self) -> tuple[QueryParam, ...]:
        return tuple(self._params)

    def add_parameter(
        self,
        key: str,
        value: Optional[object] = None,
        encoder: Optional[Encoder] = None,
    ) -> "UrlBuilder":
        """Append a query parameter; blank keys are ignored.

        Args:
            key: Parameter name.
            value: Converted with ``str()``. ``None`` or ``""`` renders the
                key alone, without ``=``.
            encoder: Encoder for this parameter; defaults to the builder's.
        """
        if is_blank(key):
            return self

        raw = None if value is None else str(value)
        self._params.append(QueryParam(key, raw, encoder or self._encoder))
        return self

    def add_parameters(
        self,
        params: Union[Mapping[str, object], Iterable[tuple[str, object]]],
    ) -> "UrlBuilder":
        """Append several parameters, keeping their iteration order."""
        items = params.items() if isinstance(params, Mapping) else params
        for key, value in items:
            self.add_parameter(key, value)
        return self

    def clear_parameters(self) -> "UrlBuilder":
        self._params.clear()
        return self

    def remove_parameters(self, *keys: str) -> "UrlBuilder":
        """Drop every parameter whose key is one of ``keys``."""
        self._params = [p for p in self._params if p.key not in keys]
        return self

    # -- fragment ----------------------------------------------------------

    @property
    def fragment(self) -> Optional[str]:
        return self._fragment

    def with_fragment(self, fragment: Optional[str]) -> "UrlBuilder":
        """Text after ``#``; encoded on render. Blank values are ignored."""
        if not is_blank(fragment):
            self._fragment = fragment
            self._encoded_fragment = None
        return self

    # -- generation mode ---------------------------------------------------

    def mode_fully_qualified(self) -> "UrlBuilder":
        """Render ``http://my.host.com/foo/bar.html``."""
        self._mode = GenerationMode.FULLY_QUALIFIED
        return self

    def mode_protocol_relative(self) -> "UrlBuilder":
        """Render ``//my.host.com/foo/bar.html``."""
        self._mode = GenerationMode.PROTOCOL_RELATIVE
        return self

    def mode_hostname_relative(self) -> "UrlBuilder":
        """Render ``/foo/bar.html``."""
        self._mode = GenerationMode.HOSTNAME_RELATIVE
        return self

    # -- rendering ---------------------------------------------------------

    def render(self) -> str:
        """Build the URL for the current state.

        May be called any number of times; the result reflects the state
        at the time of the call.

        Raises:
            ConfigurationError: If the mode is fully qualified and no
                hostname is set.
        """
        if self._mode is GenerationMode.FULLY_QUALIFIED and is_blank(self._hostname):
            raise ConfigurationError(
                "Hostname cannot be blank when generation mode is FULLY_QUALIFIED."
            )

        url = []

        if self._mode is GenerationMode.FULLY_QUALIFIED:
            scheme = "https" if self._ssl else "http"
            url.append(f"{scheme}://{self._hostname}")
        elif self._mode is GenerationMode.PROTOCOL_RELATIVE:
            url.append(f"//{self._hostname}")

        if self._mode is not GenerationMode.HOSTNAME_RELATIVE:
            if self._port > 0 and self._port not in DEFAULT_PORTS:
                url.append(f":{self._port}")

        url.append("/")
        if self._path:
            url.append("/".join(self._path))
            if self._trailing_slash:
                url.append("/")

        if self._params:
            url.append("?")
            url.append("&".join(p.render() for p in self._params))

        if self._encoded_fragment is not None:
            url.append("#" + self._encoded_fragment)
        elif self._fragment:
            url.append("#" + self._encoder.encode(self._fragment))

        return "".join(url)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"UrlBuilder(mode={self._mode.name}, hostname={self._hostname!r}, path={self.path!r})"
