"""Bucket name checks for virtual-host style addressing.

To conform with DNS requirements a bucket name:
- has no uppercase characters and none of ``_ ! @ #``
- is between 3 and 63 characters long
- does not end with a dash or a period
- has no two adjacent periods
- has no dash next to a period (``my-.bucket.com``, ``my.-bucket``)
"""

from typing import Optional

ILLEGAL_CHARACTERS = ("_", "!", "@", "#")

MIN_LENGTH = 3
MAX_LENGTH = 63


def is_dns_compatible(name: Optional[str]) -> bool:
    """Return True if ``name`` can be embedded in a hostname."""
    if name is None:
        return False

    if name.lower() != name:
        return False

    if any(c in name for c in ILLEGAL_CHARACTERS):
        return False

    if not MIN_LENGTH <= len(name) <= MAX_LENGTH:
        return False

    if name.endswith(("-", ".")):
        return False

    if ".." in name:
        return False

    if "-." in name or ".-" in name:
        return False

    return True
