"""Closed lookup tables for ACSE/xDLMS codes.

All tables are read-only mappings keyed by upper-cased input; every lookup
has an explicit fallback.
"""

import re
from types import MappingProxyType
from typing import Optional

from .models import ActionResult, AssociationResult

NOT_AVAILABLE = "N/A"
MISSING_VALUE = "Missing"
UNKNOWN = "Unknown"

APPLICATION_CONTEXT_NAMES = MappingProxyType({
    "LN": "2.16.756.5.8.1.1",  # Logical name referencing
    "SN": "2.16.756.5.8.1.2",  # Short name referencing
})

MECHANISM_NAMES = MappingProxyType({
    "LOW": "2.16.756.5.8.2.1",
    "HIGH": "2.16.756.5.8.2.2",
    "HLS_MD5": "2.16.756.5.8.2.3",
    "HLS_SHA1": "2.16.756.5.8.2.4",
    "HLS_GMAC": "2.16.756.5.8.2.5",
})

ASSOCIATION_RESULTS = MappingProxyType({
    "0": AssociationResult.ACCEPTED,
    "00": AssociationResult.ACCEPTED,
    "ACCEPTED": AssociationResult.ACCEPTED,
    "1": AssociationResult.REJECTED_PERMANENT,
    "01": AssociationResult.REJECTED_PERMANENT,
    "REJECTED-PERMANENT": AssociationResult.REJECTED_PERMANENT,
    "2": AssociationResult.REJECTED_TRANSIENT,
    "02": AssociationResult.REJECTED_TRANSIENT,
    "REJECTED-TRANSIENT": AssociationResult.REJECTED_TRANSIENT,
})

ACSE_SERVICE_USER = MappingProxyType({
    "00": "No reason given",
    "01": "No common ACSE version",
    "02": "User data not readable",
})

# Action-Result codes from the xDLMS ASN.1 definition.
ACTION_RESULT_CODES = MappingProxyType({
    0: ActionResult.SUCCESS,
    1: ActionResult.HARDWARE_FAULT,
    2: ActionResult.TEMPORARY_FAILURE,
    3: ActionResult.READ_WRITE_DENIED,
    4: ActionResult.OBJECT_UNDEFINED,
    9: ActionResult.OBJECT_CLASS_INCONSISTENT,
    11: ActionResult.OBJECT_UNAVAILABLE,
    12: ActionResult.TYPE_UNMATCHED,
    13: ActionResult.SCOPE_OF_ACCESS_VIOLATED,
    14: ActionResult.DATA_BLOCK_UNAVAILABLE,
    15: ActionResult.LONG_ACTION_ABORTED,
    16: ActionResult.NO_LONG_ACTION_IN_PROGRESS,
})

# Spellings of the Gurux ErrorCode enum, as written by GXDLMSTranslator
# (code 12 comes out as "UnmatchedType").
GURUX_ACTION_RESULT_NAMES = MappingProxyType({
    "OK": ActionResult.SUCCESS,
    "UNDEFINEDOBJECT": ActionResult.OBJECT_UNDEFINED,
    "INCONSISTENTCLASS": ActionResult.OBJECT_CLASS_INCONSISTENT,
    "UNAVAILABLEOBJECT": ActionResult.OBJECT_UNAVAILABLE,
    "UNMATCHEDTYPE": ActionResult.TYPE_UNMATCHED,
    "ACCESSVIOLATED": ActionResult.SCOPE_OF_ACCESS_VIOLATED,
    "LONGGETORREADABORTED": ActionResult.LONG_ACTION_ABORTED,
    "NOLONGGETORREADINPROGRESS": ActionResult.NO_LONG_ACTION_IN_PROGRESS,
})

# "TypeUnmatched", "type-unmatched" and "TYPE_UNMATCHED" all fold to "TYPEUNMATCHED".
ACTION_RESULT_NAMES = MappingProxyType({
    **{result.name.replace("_", ""): result for result in ActionResult},
    **GURUX_ACTION_RESULT_NAMES,
})

_NAME_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def map_application_context_name(value: Optional[str]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return APPLICATION_CONTEXT_NAMES.get(value.upper(), value)


def map_mechanism_name(value: Optional[str]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return MECHANISM_NAMES.get(value.upper(), value)


def map_association_result(value: Optional[str]) -> AssociationResult:
    if value is None:
        return AssociationResult.UNKNOWN
    return ASSOCIATION_RESULTS.get(value.strip().upper(), AssociationResult.UNKNOWN)


def map_acse_service_user(value: Optional[str]) -> str:
    if value is None:
        return UNKNOWN
    return ACSE_SERVICE_USER.get(value.strip().upper(), UNKNOWN)


def map_action_result(value: Optional[str]) -> ActionResult:
    """Resolve an Action-Result by name or by hexadecimal code."""

    if value is None:
        return ActionResult.OTHER_REASON
    folded = _NAME_SEPARATORS_RE.sub("", value).upper()
    if folded in ACTION_RESULT_NAMES:
        return ACTION_RESULT_NAMES[folded]
    try:
        code = int(folded, 16)
    except ValueError:
        return ActionResult.OTHER_REASON
    return ACTION_RESULT_CODES.get(code, ActionResult.OTHER_REASON)
