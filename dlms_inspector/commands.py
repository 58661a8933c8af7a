"""Leading-octet dispatch table for DLMS application-layer PDUs."""

import enum
import logging

from .errors import UnsupportedCommand

logger = logging.getLogger(__name__)


class CommandKind(enum.IntEnum):
    """Known DLMS/ACSE command tags (first byte of the APDU)."""

    AARQ = 0x60
    AARE = 0x61
    GET_REQUEST = 0xC0
    GET_RESPONSE = 0xC4
    ACTION_REQUEST = 0xC3
    ACTION_RESPONSE = 0xC7
    SET_REQUEST = 0xC1
    SET_RESPONSE = 0xC5
    READ_REQUEST = 0x05
    READ_RESPONSE = 0x0C
    WRITE_REQUEST = 0x06
    WRITE_RESPONSE = 0x0D

    @property
    def message_type(self) -> str:
        """Discriminator used by the message model (e.g. ``GetRequest``)."""
        return _MESSAGE_TYPES[self]


_MESSAGE_TYPES = {
    CommandKind.AARQ: "AARQ",
    CommandKind.AARE: "AARE",
    CommandKind.GET_REQUEST: "GetRequest",
    CommandKind.GET_RESPONSE: "GetResponse",
    CommandKind.ACTION_REQUEST: "ActionRequest",
    CommandKind.ACTION_RESPONSE: "ActionResponse",
    CommandKind.SET_REQUEST: "SetRequest",
    CommandKind.SET_RESPONSE: "SetResponse",
    CommandKind.READ_REQUEST: "ReadRequest",
    CommandKind.READ_RESPONSE: "ReadResponse",
    CommandKind.WRITE_REQUEST: "WriteRequest",
    CommandKind.WRITE_RESPONSE: "WriteResponse",
}


def dispatch_command(first_byte: int) -> CommandKind:
    """Map the leading octet to a ``CommandKind`` or raise ``UnsupportedCommand``."""

    try:
        kind = CommandKind(first_byte & 0xFF)
    except ValueError:
        logger.warning(f"Unsupported DLMS command byte 0x{first_byte & 0xFF:02X}")
        raise UnsupportedCommand(first_byte & 0xFF) from None
    logger.debug(f"Dispatched 0x{kind.value:02X} -> {kind.message_type}")
    return kind
