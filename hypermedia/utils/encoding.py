"""Percent-encoding tables for URI template expansion (RFC 6570, section 1.5)."""

from __future__ import annotations

import re
from urllib.parse import quote

# gen-delims / sub-delims
RESERVED = ":/?#[]@" + "!$&'()*+,;="

# quote() never encodes ALPHA, DIGIT and "_.-~", which is exactly the unreserved set
_PCT_TRIPLET = re.compile(r"%[0-9A-Fa-f]{2}")


def encode_unreserved(value: str) -> str:
    """Encode everything outside the unreserved set (simple string expansion)."""
    return quote(value, safe="")


def encode_reserved(value: str) -> str:
    """Encode for reserved/fragment expansion.

    Reserved characters pass through and well-formed ``%XX`` triplets are kept
    as they are; a lone ``%`` is still encoded.
    """
    encoded = []
    last = 0
    for match in _PCT_TRIPLET.finditer(value):
        encoded.append(quote(value[last:match.start()], safe=RESERVED))
        encoded.append(match.group(0))
        last = match.end()
    encoded.append(quote(value[last:], safe=RESERVED))
    return "".join(encoded)
