"""Message records produced by the parser.

Every message is a frozen pydantic model; ``DlmsMessage`` is the closed union
of all variants, discriminated by ``type``. Attributes are snake_case and
serialise to camelCase (``raw_data`` -> ``rawData``) when dumped with
``by_alias=True``.
"""

import re
from enum import Enum
from typing import Annotated, Generic, Literal, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

_RAW_HEX_RE = re.compile(r"(?:[0-9A-F]{2})*")


class FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AssociationResult(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED_PERMANENT = "REJECTED_PERMANENT"
    REJECTED_TRANSIENT = "REJECTED_TRANSIENT"
    UNKNOWN = "UNKNOWN"


class RequestType(str, Enum):
    NORMAL = "NORMAL"
    NEXT = "NEXT"
    WITH_LIST = "WITH_LIST"


class ResponseType(str, Enum):
    NORMAL = "NORMAL"
    WITH_DATABLOCK = "WITH_DATABLOCK"
    WITH_LIST = "WITH_LIST"


class ActionResult(str, Enum):
    SUCCESS = "SUCCESS"
    HARDWARE_FAULT = "HARDWARE_FAULT"
    TEMPORARY_FAILURE = "TEMPORARY_FAILURE"
    READ_WRITE_DENIED = "READ_WRITE_DENIED"
    OBJECT_UNDEFINED = "OBJECT_UNDEFINED"
    OBJECT_CLASS_INCONSISTENT = "OBJECT_CLASS_INCONSISTENT"
    OBJECT_UNAVAILABLE = "OBJECT_UNAVAILABLE"
    TYPE_UNMATCHED = "TYPE_UNMATCHED"
    SCOPE_OF_ACCESS_VIOLATED = "SCOPE_OF_ACCESS_VIOLATED"
    DATA_BLOCK_UNAVAILABLE = "DATA_BLOCK_UNAVAILABLE"
    LONG_ACTION_ABORTED = "LONG_ACTION_ABORTED"
    NO_LONG_ACTION_IN_PROGRESS = "NO_LONG_ACTION_IN_PROGRESS"
    OTHER_REASON = "OTHER_REASON"


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------


class InitiateRequest(FrozenModel):
    response_allowed: bool
    proposed_dlms_version_number: int
    proposed_conformance: Tuple[str, ...] = ()
    client_max_receive_pdu_size: int


class InitiateResponse(FrozenModel):
    negotiated_dlms_version_number: int
    negotiated_conformance: Tuple[str, ...] = ()
    server_max_receive_pdu_size: int
    vaa_name: int


class OctetStringParameter(FrozenModel):
    kind: Literal["octet-string"] = "octet-string"
    value: str


class DoubleLongUnsignedParameter(FrozenModel):
    kind: Literal["double-long-unsigned"] = "double-long-unsigned"
    value: int


ActionParameter = Annotated[
    Union[OctetStringParameter, DoubleLongUnsignedParameter],
    Field(discriminator="kind"),
]


class ActionParameters(FrozenModel):
    structure: Tuple[ActionParameter, ...] = ()


class OctetStringAnalysis(FrozenModel):
    """Competing interpretations of an opaque octet string."""

    raw_hex: str
    ascii_decoding: Optional[str] = None
    possible_timestamp: Optional[str] = None
    possible_obis_code: Optional[str] = None
    structure_info: Optional[str] = None
    has_readable_interpretation: bool = False
    primary_display: Optional[str] = None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class MessageBase(FrozenModel):
    raw_data: str
    display_structure: Optional[str] = None
    original_structure: Optional[str] = None

    @field_validator("raw_data")
    @classmethod
    def _canonical_hex(cls, value: str) -> str:
        if _RAW_HEX_RE.fullmatch(value) is None:
            raise ValueError("raw_data must be upper-case hex of even length")
        return value


class AarqMessage(MessageBase):
    type: Literal["AARQ"] = "AARQ"
    application_context_name: str
    calling_ap_title: Optional[str] = None
    sender_acse_requirements: bool
    mechanism_name: str
    calling_authentication_value: str
    user_information: str
    initiate_request: InitiateRequest


class AareMessage(MessageBase):
    type: Literal["AARE"] = "AARE"
    application_context_name: str
    association_result: AssociationResult
    result_source_diagnostic: str
    user_information: str
    initiate_response: InitiateResponse


class GetRequestMessage(MessageBase):
    type: Literal["GetRequest"] = "GetRequest"
    request_type: RequestType
    invoke_id: int
    attribute: str
    access_selector: Optional[str] = None


class GetResponseMessage(MessageBase):
    type: Literal["GetResponse"] = "GetResponse"
    response_type: ResponseType
    invoke_id: int
    data_type: str
    data: str
    data_analysis: Optional[OctetStringAnalysis] = None


class ActionRequestMessage(MessageBase):
    type: Literal["ActionRequest"] = "ActionRequest"
    request_type: RequestType
    invoke_id: int
    method: str
    parameters: ActionParameters


class ActionResponseMessage(MessageBase):
    type: Literal["ActionResponse"] = "ActionResponse"
    response_type: ResponseType
    invoke_id: int
    action_result: ActionResult


class SetRequestMessage(MessageBase):
    type: Literal["SetRequest"] = "SetRequest"
    request_type: RequestType
    invoke_id: int
    attribute: str


class SetResponseMessage(MessageBase):
    type: Literal["SetResponse"] = "SetResponse"
    response_type: ResponseType
    invoke_id: int
    result: str


class ReadRequestMessage(MessageBase):
    type: Literal["ReadRequest"] = "ReadRequest"


class ReadResponseMessage(MessageBase):
    type: Literal["ReadResponse"] = "ReadResponse"


class WriteRequestMessage(MessageBase):
    type: Literal["WriteRequest"] = "WriteRequest"


class WriteResponseMessage(MessageBase):
    type: Literal["WriteResponse"] = "WriteResponse"


DlmsMessage = Annotated[
    Union[
        AarqMessage,
        AareMessage,
        GetRequestMessage,
        GetResponseMessage,
        ActionRequestMessage,
        ActionResponseMessage,
        SetRequestMessage,
        SetResponseMessage,
        ReadRequestMessage,
        ReadResponseMessage,
        WriteRequestMessage,
        WriteResponseMessage,
    ],
    Field(discriminator="type"),
]

message_adapter: TypeAdapter = TypeAdapter(DlmsMessage)


def message_to_dict(message: MessageBase) -> dict:
    """JSON-ready camelCase dict of any message variant."""
    return message.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Tagged results
# ---------------------------------------------------------------------------

T = TypeVar("T")


class ParseSuccess(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    data: T


class ParseFailure(FrozenModel):
    ok: Literal[False] = False
    message: str
    detail: Optional[str] = None


def result_to_dict(result: Union[ParseSuccess, ParseFailure]) -> dict:
    return result.model_dump(mode="json", by_alias=True)
