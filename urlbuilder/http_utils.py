"""HTTP header helpers."""

import re
import unicodedata

from urlbuilder.encoders import percent_encode

# Non-printable ASCII, plus the characters browsers mishandle inside a
# quoted filename: backslash, double quote and percent.
_UNSAFE_FILENAME_CHARS = re.compile(r'[^\x20-\x7E]|[\\"%]')


def ascii_filename(filename: str) -> str:
    """Strip ``filename`` down to characters every client accepts.

    Accented letters are decomposed first so that ``é`` keeps its ``e``.
    """
    decomposed = unicodedata.normalize("NFD", filename)
    return _UNSAFE_FILENAME_CHARS.sub("", decomposed)


def create_content_disposition_header(disposition_type: str, filename: str) -> str:
    """Build a Content-Disposition value following RFC 6266, appendix D.

    The plain ``filename`` parameter holds an ASCII-only name. When that
    differs from ``filename``, the UTF-8 original is added as an RFC 5987
    ``filename*`` parameter for clients that understand it.

    Args:
        disposition_type: ``inline`` or ``attachment``.
        filename: Filename as the user should see it.

    Returns:
        The header value, e.g. ``attachment; filename="foo.jpg"``.
    """
    safe_name = ascii_filename(filename)
    header = f'{disposition_type}; filename="{safe_name}"'

    if safe_name != filename:
        header += f"; filename*=UTF-8''{percent_encode(filename)}"

    return header
