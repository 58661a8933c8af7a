"""Heuristic interpretation of opaque OctetString payloads.

Hypotheses are tried in a fixed order: ASCII text, DLMS date-time, OBIS
code, then the A-XDR type tag in the first byte. Every hypothesis that holds
is recorded, but only the first one able to label the value sets
``primary_display``. A hypothesis that hits malformed hex simply does not
apply.
"""

import logging
from typing import List, Optional, Tuple

from .models import OctetStringAnalysis

logger = logging.getLogger(__name__)

MIN_ANALYSIS_LENGTH = 4  # hex characters
MIN_ASCII_LENGTH = 3
TEXT_PUNCTUATION = " _-."

TIMESTAMP_MIN_HEX = 24  # 12-byte COSEM date-time
TIMESTAMP_YEAR_RANGE = (2000, 2100)
OBIS_MIN_HEX = 12

# A-XDR tags that only get an informational label.
_PLAIN_TYPE_LABELS = {
    0x0F: "Integer type",
    0x10: "Long type",
    0x12: "Unsigned type",
    0x16: "Enum type",
}


def _to_bytes(hex_string: str) -> List[int]:
    pairs = [hex_string[i:i + 2] for i in range(0, len(hex_string), 2)]
    values = []
    for pair in pairs:
        if not all(c in "0123456789abcdefABCDEF" for c in pair):
            raise ValueError(f"not a hex pair: {pair!r}")
        values.append(int(pair, 16))
    return values


def _is_text_char(char: str, punctuation: str) -> bool:
    return char.isalpha() or char.isdecimal() or char in punctuation


def decode_ascii(hex_string: str, punctuation: str = "_") -> Optional[str]:
    """Decode one character per byte; None unless every character is text-like."""

    try:
        decoded = "".join(chr(b) for b in _to_bytes(hex_string))
    except ValueError:
        return None
    if all(_is_text_char(c, punctuation) for c in decoded):
        return decoded
    return None


def _ascii_hypothesis(hex_string: str) -> Optional[str]:
    decoded = decode_ascii(hex_string, TEXT_PUNCTUATION)
    if decoded is None or len(decoded) < MIN_ASCII_LENGTH:
        return None
    return decoded


def _timestamp_hypothesis(hex_string: str) -> Optional[str]:
    if len(hex_string) < TIMESTAMP_MIN_HEX or not hex_string.startswith("07"):
        return None
    try:
        data = _to_bytes(hex_string)
    except ValueError:
        return None
    if len(data) < 12:
        return None

    year = (data[0] << 8) | data[1]
    month, day = data[2], data[3]
    # data[4] is the day of week
    hour, minute, second = data[5], data[6], data[7]

    low, high = TIMESTAMP_YEAR_RANGE
    if not (low <= year <= high and 1 <= month <= 12 and 1 <= day <= 31
            and 0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        return None
    return f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}"


def _obis_hypothesis(hex_string: str) -> Optional[str]:
    # Five dotted groups; not the A-B:C.D.E*F form used for instance ids.
    if len(hex_string) < OBIS_MIN_HEX:
        return None
    try:
        data = _to_bytes(hex_string)
    except ValueError:
        return None
    if len(data) < 6 or data[5] != 0xFF:
        return None
    return ".".join(str(b) for b in data[:5])


def _structure_hypothesis(hex_string: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(structure_info, primary label candidate)`` for the first byte."""

    try:
        tag = _to_bytes(hex_string[:2])[0]
    except (ValueError, IndexError):
        return None, None

    if tag == 0x09:
        length = (len(hex_string) - 2) // 2
        return "OctetString type", f"OctetString ({length} bytes of binary data)"
    if tag in (0x0A, 0x0C):
        label = "VisibleString type" if tag == 0x0A else "UTF8String type"
        decoded = None
        if len(hex_string) > 4:
            # skip tag and length bytes
            decoded = decode_ascii(hex_string[4:])
        return label, f"Text: {decoded}" if decoded else None
    if tag in _PLAIN_TYPE_LABELS:
        return _PLAIN_TYPE_LABELS[tag], None
    if tag == 0x01:
        return "Array type", "Array of data elements"
    if tag == 0x02:
        return "Structure type", "Structured data container"
    return None, None


def analyze_octet_string(hex_string: str) -> OctetStringAnalysis:
    """Classify ``hex_string`` as text, timestamp, OBIS code or typed data."""

    if len(hex_string) < MIN_ANALYSIS_LENGTH:
        return OctetStringAnalysis(raw_hex=hex_string)

    primary: Optional[str] = None
    readable = False

    ascii_text = _ascii_hypothesis(hex_string)
    if ascii_text is not None:
        readable = True
        primary = f"Text: {ascii_text}"

    timestamp = _timestamp_hypothesis(hex_string)
    if timestamp is not None:
        readable = True
        primary = primary or f"Timestamp: {timestamp}"

    obis_code = _obis_hypothesis(hex_string)
    if obis_code is not None:
        readable = True
        primary = primary or f"OBIS Code: {obis_code}"

    structure_info, structure_label = _structure_hypothesis(hex_string)
    if structure_label is not None:
        readable = True
        primary = primary or structure_label

    logger.debug(f"Octet string {hex_string[:16]}... classified as {primary!r}")
    return OctetStringAnalysis(
        raw_hex=hex_string,
        ascii_decoding=ascii_text,
        possible_timestamp=timestamp,
        possible_obis_code=obis_code,
        structure_info=structure_info,
        has_readable_interpretation=readable,
        primary_display=primary,
    )
