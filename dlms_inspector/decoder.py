"""PDU to XML decoding.

The parser only needs ``bytes -> xml text``. ``GuruxPduDecoder`` is the
default engine; anything implementing ``PduDecoder`` can be swapped in.
"""

import logging
from typing import Protocol

from gurux_dlms import GXByteBuffer, GXDLMSTranslator
from gurux_dlms.enums import TranslatorOutputType

from .config import settings

logger = logging.getLogger(__name__)


class PduDecoder(Protocol):
    """Translate one raw APDU into the decoder's XML description."""

    def decode(self, pdu: bytes) -> str:
        ...


class GuruxPduDecoder:
    """Decoder backed by the Gurux ``GXDLMSTranslator``.

    Leaf elements carry their value in a ``Value`` attribute, e.g.
    ``<ClassId Value="0012" />``.
    """

    def __init__(self, use_logical_name: bool = settings.GURUX_USE_LOGICAL_NAME):
        self.use_logical_name = use_logical_name

    def _translator(self) -> GXDLMSTranslator:
        # One translator per PDU; GXDLMSTranslator is stateful.
        translator = GXDLMSTranslator()
        translator.outputType = TranslatorOutputType.SIMPLE_XML
        translator.useLogicalNameReferencing = self.use_logical_name
        return translator

    def decode(self, pdu: bytes) -> str:
        if not pdu:
            raise ValueError("empty PDU")
        xml = self._translator().pduToXml(GXByteBuffer(pdu))
        logger.debug(f"Gurux produced {len(xml)} characters of XML for {len(pdu)} bytes")
        return xml
