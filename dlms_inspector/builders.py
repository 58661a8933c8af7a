"""Per-command assembly of message records from decoder XML.

``build_message`` drives the common steps (decode, repair, display JSON,
field extraction) and hands a ``DecodedPdu`` to the builder registered for
the command. Builders only read fields through ``XmlFieldExtractor``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .commands import CommandKind
from .decoder import PduDecoder
from .errors import DecodeError
from .json_convert import XmlToJsonConverter
from .mappings import (
    MISSING_VALUE,
    NOT_AVAILABLE,
    UNKNOWN,
    map_acse_service_user,
    map_action_result,
    map_application_context_name,
    map_association_result,
    map_mechanism_name,
)
from .models import (
    AareMessage,
    AarqMessage,
    ActionParameters,
    ActionRequestMessage,
    ActionResponseMessage,
    DoubleLongUnsignedParameter,
    GetRequestMessage,
    GetResponseMessage,
    InitiateRequest,
    InitiateResponse,
    MessageBase,
    OctetStringParameter,
    ReadRequestMessage,
    ReadResponseMessage,
    RequestType,
    ResponseType,
    SetRequestMessage,
    SetResponseMessage,
    WriteRequestMessage,
    WriteResponseMessage,
)
from .obis import format_instance_id
from .octet_string import analyze_octet_string
from .xml_tools import XmlFieldExtractor, normalize_structure

logger = logging.getLogger(__name__)

# Commands whose decoder output may carry a duplicated wrapper element.
NORMALIZED_COMMANDS = frozenset({CommandKind.ACTION_REQUEST, CommandKind.ACTION_RESPONSE})

# Ordered: the first tag present decides the GetResponse data type.
GET_RESPONSE_DATA_TAGS = (
    ("OctetString", "OCTET_STRING"),
    ("UInt32", "UINT32"),
    ("UInt16", "UINT16"),
    ("UInt8", "UINT8"),
    ("Int32", "INT32"),
    ("Int16", "INT16"),
    ("Int8", "INT8"),
    ("Structure", "STRUCTURE"),
    ("Array", "ARRAY"),
    ("Boolean", "BOOLEAN"),
    ("Integer", "INTEGER"),
    ("Enum", "ENUM"),
    ("String", "STRING"),
    ("DateTime", "DATETIME"),
    ("Date", "DATE"),
    ("Time", "TIME"),
)

OCTET_STRING_TAG = "OctetString"
UNSIGNED_PARAMETER_TAGS = ("UInt32", "UInt16", "UInt8", "Unsigned")

_REQUEST_TYPES = {1: RequestType.NORMAL, 2: RequestType.NEXT, 3: RequestType.WITH_LIST}
_RESPONSE_TYPES = {1: ResponseType.NORMAL, 2: ResponseType.WITH_DATABLOCK, 3: ResponseType.WITH_LIST}


@dataclass(frozen=True)
class DecodedPdu:
    """Everything a builder needs about one PDU."""

    raw_hex: str
    pdu: bytes
    xml: str
    display: str
    fields: XmlFieldExtractor

    @property
    def invoke_id(self) -> int:
        # command, request/response type, invoke-id-and-priority
        return self.pdu[2] if len(self.pdu) > 2 else 0

    @property
    def request_type(self) -> RequestType:
        return _REQUEST_TYPES.get(self.pdu[1] if len(self.pdu) > 1 else 1, RequestType.NORMAL)

    @property
    def response_type(self) -> ResponseType:
        return _RESPONSE_TYPES.get(self.pdu[1] if len(self.pdu) > 1 else 1, ResponseType.NORMAL)

    def base_fields(self) -> dict:
        return {
            "raw_data": self.raw_hex,
            "display_structure": self.display,
            "original_structure": self.xml,
        }


def _hex_int(value: Optional[str], default: int = 0) -> int:
    if value is None:
        return default
    return int(value, 16)


def _descriptor(fields: XmlFieldExtractor, member_tag: str) -> str:
    """``<classId>:<OBIS>:<memberId>`` for attribute and method descriptors."""

    class_id = fields.value("ClassId")
    instance_id = fields.value("InstanceId")
    member_id = fields.value(member_tag)
    if class_id is None or instance_id is None or member_id is None:
        return NOT_AVAILABLE
    return f"{int(class_id, 16)}:{format_instance_id(instance_id)}:{int(member_id, 16)}"


def _octet_string_text(hex_value: str) -> str:
    try:
        return bytes.fromhex(hex_value).decode("latin-1")
    except ValueError:
        return hex_value


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_aarq(decoded: DecodedPdu) -> AarqMessage:
    fields = decoded.fields
    conformance = fields.all_scoped("ProposedConformance", "ConformanceBit", "Name")
    if not conformance:
        conformance = fields.all("ConformanceBit", "Name")

    return AarqMessage(
        **decoded.base_fields(),
        application_context_name=map_application_context_name(fields.value("ApplicationContextName")),
        calling_ap_title=fields.value("CallingAPTitle"),
        sender_acse_requirements=fields.value("SenderACSERequirements") == "1",
        mechanism_name=map_mechanism_name(fields.value("MechanismName")),
        calling_authentication_value=fields.value("CallingAuthentication") or NOT_AVAILABLE,
        user_information=fields.value("UserInformation") or NOT_AVAILABLE,
        initiate_request=InitiateRequest(
            response_allowed=True,
            proposed_dlms_version_number=_hex_int(fields.value("ProposedDlmsVersionNumber")),
            proposed_conformance=conformance,
            client_max_receive_pdu_size=_hex_int(fields.value("ProposedMaxPduSize")),
        ),
    )


def build_aare(decoded: DecodedPdu) -> AareMessage:
    fields = decoded.fields
    acse_service_user = fields.value("ACSEServiceUser")

    return AareMessage(
        **decoded.base_fields(),
        application_context_name=map_application_context_name(fields.value("ApplicationContextName")),
        association_result=map_association_result(fields.value("AssociationResult")),
        result_source_diagnostic=(
            map_acse_service_user(acse_service_user) if acse_service_user is not None else NOT_AVAILABLE
        ),
        user_information=fields.value("UserInformation") or NOT_AVAILABLE,
        initiate_response=InitiateResponse(
            negotiated_dlms_version_number=_hex_int(fields.value("NegotiatedDlmsVersionNumber")),
            negotiated_conformance=fields.all_scoped("NegotiatedConformance", "ConformanceBit", "Name"),
            server_max_receive_pdu_size=_hex_int(fields.value("NegotiatedMaxPduSize")),
            vaa_name=_hex_int(fields.value("VaaName")),
        ),
    )


def build_get_request(decoded: DecodedPdu) -> GetRequestMessage:
    return GetRequestMessage(
        **decoded.base_fields(),
        request_type=decoded.request_type,
        invoke_id=decoded.invoke_id,
        attribute=_descriptor(decoded.fields, "AttributeId"),
        access_selector=decoded.fields.value("AccessSelector"),
    )


def build_get_response(decoded: DecodedPdu) -> GetResponseMessage:
    fields = decoded.fields
    error = fields.value("DataAccessError")
    if error is not None:
        data_type, data = "DATA_ACCESS_ERROR", error
    else:
        scope = XmlFieldExtractor(fields.section("Data") or decoded.xml)
        data_type = next(
            (label for tag, label in GET_RESPONSE_DATA_TAGS if scope.contains(tag)),
            UNKNOWN,
        )
        data = scope.first_value(*(tag for tag, _ in GET_RESPONSE_DATA_TAGS)) or MISSING_VALUE

    analysis = None
    if data_type == "OCTET_STRING" and data != MISSING_VALUE:
        analysis = analyze_octet_string(data)

    return GetResponseMessage(
        **decoded.base_fields(),
        response_type=decoded.response_type,
        invoke_id=decoded.invoke_id,
        data_type=data_type,
        data=data,
        data_analysis=analysis,
    )


def build_action_request(decoded: DecodedPdu) -> ActionRequestMessage:
    fields = decoded.fields
    structure = []
    section = fields.section("MethodInvocationParameters")
    if section is not None:
        for tag, value in fields.tagged_values((OCTET_STRING_TAG,) + UNSIGNED_PARAMETER_TAGS, within=section):
            if tag == OCTET_STRING_TAG:
                structure.append(OctetStringParameter(value=_octet_string_text(value)))
            else:
                structure.append(DoubleLongUnsignedParameter(value=int(value, 16)))

    return ActionRequestMessage(
        **decoded.base_fields(),
        request_type=decoded.request_type,
        invoke_id=decoded.invoke_id,
        method=_descriptor(fields, "MethodId"),
        parameters=ActionParameters(structure=structure),
    )


def build_action_response(decoded: DecodedPdu) -> ActionResponseMessage:
    return ActionResponseMessage(
        **decoded.base_fields(),
        response_type=decoded.response_type,
        invoke_id=decoded.invoke_id,
        action_result=map_action_result(decoded.fields.first_value("Result", "ActionResult")),
    )


def build_set_request(decoded: DecodedPdu) -> SetRequestMessage:
    return SetRequestMessage(
        **decoded.base_fields(),
        request_type=decoded.request_type,
        invoke_id=decoded.invoke_id,
        attribute=_descriptor(decoded.fields, "AttributeId"),
    )


def build_set_response(decoded: DecodedPdu) -> SetResponseMessage:
    return SetResponseMessage(
        **decoded.base_fields(),
        response_type=decoded.response_type,
        invoke_id=decoded.invoke_id,
        result=decoded.fields.value("Result") or UNKNOWN,
    )


def build_read_request(decoded: DecodedPdu) -> ReadRequestMessage:
    return ReadRequestMessage(**decoded.base_fields())


def build_read_response(decoded: DecodedPdu) -> ReadResponseMessage:
    return ReadResponseMessage(**decoded.base_fields())


def build_write_request(decoded: DecodedPdu) -> WriteRequestMessage:
    return WriteRequestMessage(**decoded.base_fields())


def build_write_response(decoded: DecodedPdu) -> WriteResponseMessage:
    return WriteResponseMessage(**decoded.base_fields())


BUILDERS: Dict[CommandKind, Callable[[DecodedPdu], MessageBase]] = {
    CommandKind.AARQ: build_aarq,
    CommandKind.AARE: build_aare,
    CommandKind.GET_REQUEST: build_get_request,
    CommandKind.GET_RESPONSE: build_get_response,
    CommandKind.ACTION_REQUEST: build_action_request,
    CommandKind.ACTION_RESPONSE: build_action_response,
    CommandKind.SET_REQUEST: build_set_request,
    CommandKind.SET_RESPONSE: build_set_response,
    CommandKind.READ_REQUEST: build_read_request,
    CommandKind.READ_RESPONSE: build_read_response,
    CommandKind.WRITE_REQUEST: build_write_request,
    CommandKind.WRITE_RESPONSE: build_write_response,
}


def build_message(
    kind: CommandKind,
    raw_hex: str,
    pdu: bytes,
    decoder: PduDecoder,
    converter: XmlToJsonConverter,
) -> MessageBase:
    """Decode ``pdu`` and assemble the message for ``kind``.

    Every failure is re-raised as ``DecodeError`` naming the command.
    """

    command = kind.message_type
    try:
        xml = decoder.decode(pdu)
    except Exception as exc:
        logger.warning(f"Decoder failed for {command}: {exc}")
        raise DecodeError(command, f"decoder error: {exc}", type(exc).__name__) from exc
    if not xml or not xml.strip():
        raise DecodeError(command, "decoder returned no structure")

    try:
        structure = normalize_structure(xml) if kind in NORMALIZED_COMMANDS else xml
        decoded = DecodedPdu(
            raw_hex=raw_hex,
            pdu=pdu,
            xml=xml,
            display=converter.convert(structure),
            fields=XmlFieldExtractor(structure),
        )
        return BUILDERS[kind](decoded)
    except Exception as exc:
        raise DecodeError(command, str(exc) or type(exc).__name__, type(exc).__name__) from exc
