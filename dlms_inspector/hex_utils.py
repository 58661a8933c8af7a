"""Canonicalisation and validation of hex-encoded PDUs."""

import re

from .errors import ValidationError

_HEX_RE = re.compile(r"[0-9A-F]*")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_hex(value: str) -> str:
    """Strip all whitespace and upper-case *value*."""

    return _WHITESPACE_RE.sub("", value).upper()


def validate_hex(value: str) -> bool:
    """Return True if *value* normalises to even-length upper-case hex.

    The empty string is valid here; ``DlmsParser`` rejects it separately.
    """

    try:
        clean = normalize_hex(value)
    except (TypeError, AttributeError):
        return False
    return _HEX_RE.fullmatch(clean) is not None and len(clean) % 2 == 0


def hex_to_bytes(value: str) -> bytes:
    clean = normalize_hex(value)
    if not clean:
        raise ValidationError("Empty hex data")
    if not validate_hex(clean):
        raise ValidationError("Invalid hex format", f"input={value!r}")
    return bytes.fromhex(clean)
