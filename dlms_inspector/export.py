"""Render parsed messages as JSON or XML documents."""

import enum
import json
from typing import Optional, Sequence
from xml.sax.saxutils import escape

from .config import settings
from .models import MessageBase, ParseFailure, ParseSuccess, message_to_dict


class ViewFormat(str, enum.Enum):
    JSON = "json"
    XML = "xml"


def _cdata(text: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two.
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def export_json(messages: Sequence[MessageBase], indent: Optional[int] = None) -> str:
    indent = settings.JSON_INDENT if indent is None else indent
    payload = [
        {"messageClass": type(message).__name__, **message_to_dict(message)}
        for message in messages
    ]
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def export_xml(messages: Sequence[MessageBase]) -> str:
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<DlmsMessages>"]
    for message in messages:
        lines.append("  <Message>")
        lines.append(f"    <Type>{escape(message.type)}</Type>")
        lines.append(f"    <RawData>{message.raw_data}</RawData>")
        if message.original_structure is not None:
            lines.append("    <Structure>")
            lines.append(f"      {_cdata(message.original_structure)}")
            lines.append("    </Structure>")
        elif message.display_structure is not None:
            lines.append("    <JsonStructure>")
            lines.append(f"      {_cdata(message.display_structure)}")
            lines.append("    </JsonStructure>")
        lines.append("  </Message>")
    lines.append("</DlmsMessages>")
    return "\n".join(lines)


def export(messages: Sequence[MessageBase], fmt: ViewFormat) -> ParseSuccess | ParseFailure:
    try:
        if fmt is ViewFormat.JSON:
            return ParseSuccess(data=export_json(messages))
        if fmt is ViewFormat.XML:
            return ParseSuccess(data=export_xml(messages))
    except (TypeError, ValueError) as exc:
        return ParseFailure(message=f"Failed to export to {fmt.name}", detail=str(exc))
    return ParseFailure(message=f"Unsupported export format: {fmt}")
