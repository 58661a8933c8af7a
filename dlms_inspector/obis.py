"""OBIS helpers for COSEM instance identifiers."""

import re

_INSTANCE_ID_RE = re.compile(r"[0-9A-F]{12}")
_SEPARATORS = ("-", ":", ".", ".", "*")


def format_instance_id(instance_id: str) -> str:
    """Render a 6-byte hex instance id as ``A-B:C.D.E*F``.

    ``"00002C0000FF"`` -> ``"0-0:44.0.0*255"``. Anything that is not exactly
    12 hex characters (after removing spaces) is returned unchanged.
    """

    clean = instance_id.replace(" ", "").upper()
    if _INSTANCE_ID_RE.fullmatch(clean) is None:
        return instance_id

    groups = bytes.fromhex(clean)
    parts = [str(groups[0])]
    for separator, value in zip(_SEPARATORS, groups[1:]):
        parts.append(f"{separator}{value}")
    return "".join(parts)
