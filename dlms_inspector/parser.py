"""Entry point of the parsing pipeline.

    hex -> normalise/validate -> dispatch -> decode -> build -> ParseResult

Nothing raised inside the pipeline reaches the caller: every failure comes
back as a ``ParseFailure``.
"""

import logging
from typing import Iterable, List, Optional, Union

from .builders import build_message
from .commands import dispatch_command
from .decoder import GuruxPduDecoder, PduDecoder
from .errors import DlmsParserError
from .hex_utils import hex_to_bytes, normalize_hex, validate_hex
from .json_convert import XmlToJsonConverter
from .models import MessageBase, ParseFailure, ParseSuccess

logger = logging.getLogger(__name__)

ParseResult = Union[ParseSuccess, ParseFailure]


class DlmsParser:
    """Parse hex-encoded DLMS APDUs into message records.

    The parser holds no per-call state; one instance can serve any number of
    calls (and threads, provided the decoder is thread-safe).
    """

    def __init__(
        self,
        decoder: Optional[PduDecoder] = None,
        converter: Optional[XmlToJsonConverter] = None,
    ):
        self.decoder = decoder or GuruxPduDecoder()
        self.converter = converter or XmlToJsonConverter()

    def validate_hex(self, hex_data: str) -> bool:
        return validate_hex(hex_data)

    def decode(self, hex_data: str) -> MessageBase:
        """Like ``parse_hex`` but raises ``DlmsParserError`` instead."""

        pdu = hex_to_bytes(hex_data)
        kind = dispatch_command(pdu[0])
        return build_message(kind, normalize_hex(hex_data), pdu, self.decoder, self.converter)

    def parse_hex(self, hex_data: str) -> ParseResult:
        try:
            return ParseSuccess(data=self.decode(hex_data))
        except DlmsParserError as exc:
            return ParseFailure(message=exc.message, detail=exc.detail)
        except Exception as exc:
            logger.exception("Unexpected failure while parsing DLMS data")
            return ParseFailure(message=f"Failed to parse DLMS data: {exc}", detail=type(exc).__name__)

    def parse_many(self, hex_data_list: Iterable[str]) -> ParseResult:
        """Parse every item; succeed only if all of them parse.

        Failures are reported together, each prefixed with its index.
        """

        messages: List[MessageBase] = []
        errors: List[str] = []
        for index, hex_data in enumerate(hex_data_list):
            result = self.parse_hex(hex_data)
            if isinstance(result, ParseSuccess):
                messages.append(result.data)
            else:
                errors.append(f"Index {index}: {result.message}")

        if errors:
            logger.info(f"Batch parse failed for {len(errors)} of {len(messages) + len(errors)} items")
            return ParseFailure(message=f"Failed to parse some messages: {'; '.join(errors)}")
        logger.info(f"Batch parsed {len(messages)} messages")
        return ParseSuccess(data=messages)
