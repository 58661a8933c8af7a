"""Decode and classify hex-encoded DLMS/COSEM application-layer PDUs."""

__version__ = "1.0.0"

from .commands import CommandKind, dispatch_command
from .decoder import GuruxPduDecoder, PduDecoder
from .errors import (
    ConversionError,
    DecodeError,
    DlmsParserError,
    UnsupportedCommand,
    ValidationError,
)
from .hex_utils import normalize_hex, validate_hex
from .json_convert import XmlToJsonConverter
from .models import DlmsMessage, OctetStringAnalysis, ParseFailure, ParseSuccess
from .obis import format_instance_id
from .octet_string import analyze_octet_string
from .parser import DlmsParser

__all__ = [
    "CommandKind",
    "dispatch_command",
    "GuruxPduDecoder",
    "PduDecoder",
    "ConversionError",
    "DecodeError",
    "DlmsParserError",
    "UnsupportedCommand",
    "ValidationError",
    "normalize_hex",
    "validate_hex",
    "XmlToJsonConverter",
    "DlmsMessage",
    "OctetStringAnalysis",
    "ParseFailure",
    "ParseSuccess",
    "format_instance_id",
    "analyze_octet_string",
    "DlmsParser",
]
