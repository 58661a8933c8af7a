"""Exception taxonomy for the DLMS parsing pipeline.

Builders and helpers raise these; ``DlmsParser`` catches them at its boundary
and turns them into ``ParseFailure`` results so nothing escapes to the caller.
"""

from typing import Optional


class DlmsParserError(Exception):
    """Base class for every recoverable parsing failure."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(DlmsParserError):
    """Input is not an even-length hexadecimal string (or is empty)."""


class UnsupportedCommand(DlmsParserError):
    """The leading octet does not name a known DLMS command."""

    def __init__(self, command_byte: int):
        super().__init__(f"Unsupported DLMS command: 0x{command_byte:02X}")
        self.command_byte = command_byte


class DecodeError(DlmsParserError):
    """The decoder failed, or produced a structure the builder cannot use."""

    def __init__(self, command: str, reason: str, detail: Optional[str] = None):
        super().__init__(f"Failed to parse {command}: {reason}", detail)
        self.command = command
        self.reason = reason


class ConversionError(DlmsParserError):
    """Both XML to JSON engines rejected the document."""

    def __init__(self, primary: Exception, fallback: Exception):
        super().__init__(
            "Failed to convert XML to JSON",
            f"primary: {primary}; fallback: {fallback}",
        )
        self.primary = primary
        self.fallback = fallback
