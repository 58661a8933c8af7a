"""XML to pretty-printed JSON for display.

Element names become object keys, repeated siblings become arrays and
attributes are nested under their element::

    <MethodDescriptor><ClassId Value="0012" /></MethodDescriptor>
    -> {"MethodDescriptor": {"ClassId": {"Value": "0012"}}}

``ElementTree`` is the primary engine. If it rejects the document a lenient
``html.parser`` based engine is tried; if that fails too an error envelope is
returned instead. ``XmlToJsonConverter.convert`` never raises.
"""

import json
import logging
import re
import xml.etree.ElementTree as ET
from html.parser import HTMLParser
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import settings
from .errors import ConversionError
from .xml_tools import normalize_structure, normalize_xml_newlines

logger = logging.getLogger(__name__)

JsonEngine = Callable[[str], str]

TEXT_KEY = "#text"


def _add_child(node: Dict[str, Any], list_keys: set, key: str, value: Any) -> None:
    if key not in node:
        node[key] = value
    elif key in list_keys:
        node[key].append(value)
    else:
        node[key] = [node[key], value]
        list_keys.add(key)


def _finish_node(node: Dict[str, Any], text: str) -> Any:
    text = text.strip()
    if not node:
        return text
    if text:
        node[TEXT_KEY] = text
    return node


def _element_to_node(element: ET.Element) -> Any:
    node: Dict[str, Any] = dict(element.attrib)
    list_keys: set = set()
    text = element.text or ""
    for child in element:
        _add_child(node, list_keys, child.tag, _element_to_node(child))
        text += child.tail or ""
    return _finish_node(node, text)


def element_tree_engine(xml: str, indent: int = 2) -> str:
    root = ET.fromstring(xml)
    return json.dumps({root.tag: _element_to_node(root)}, indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Lenient fallback engine
# ---------------------------------------------------------------------------

_TAG_NAME_RE = re.compile(r"<\s*([^\s/>]+)")
_ATTR_RE = re.compile(r"""([^\s=/<>]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")


class _LenientTreeBuilder(HTMLParser):
    """Builds the same node shape as ``_element_to_node`` from sloppy markup.

    ``HTMLParser`` lower-cases names, so the original spelling is recovered
    from the raw start tag. Unmatched end tags are ignored and unclosed
    elements are closed at end of input.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root: Dict[str, Any] = {}
        self._root_lists: set = set()
        # (name, node, list_keys, text parts)
        self._stack: List[Tuple[str, Dict[str, Any], set, List[str]]] = []

    def _open(self) -> None:
        raw = self.get_starttag_text() or ""
        name_match = _TAG_NAME_RE.match(raw)
        if name_match is None:
            raise ValueError(f"unreadable start tag {raw!r}")
        attrs = {m.group(1): m.group(2) if m.group(2) is not None else m.group(3)
                 for m in _ATTR_RE.finditer(raw[name_match.end():])}
        self._stack.append((name_match.group(1), attrs, set(), []))

    def _close_top(self) -> None:
        name, node, _, text = self._stack.pop()
        value = _finish_node(node, "".join(text))
        if self._stack:
            _, parent, parent_lists, _ = self._stack[-1]
            _add_child(parent, parent_lists, name, value)
        else:
            _add_child(self.root, self._root_lists, name, value)

    def handle_starttag(self, tag, attrs):
        self._open()

    def handle_startendtag(self, tag, attrs):
        self._open()
        self._close_top()

    def handle_endtag(self, tag):
        names = [entry[0].lower() for entry in self._stack]
        if tag.lower() not in names:
            return
        while self._stack:
            closing = self._stack[-1][0].lower()
            self._close_top()
            if closing == tag.lower():
                break

    def handle_data(self, data):
        if self._stack:
            self._stack[-1][3].append(data)

    def build(self, xml: str) -> Dict[str, Any]:
        self.feed(xml)
        self.close()
        while self._stack:
            self._close_top()
        if not self.root:
            raise ValueError("no elements found")
        return self.root


def lenient_engine(xml: str, indent: int = 2) -> str:
    return json.dumps(_LenientTreeBuilder().build(xml), indent=indent, ensure_ascii=False)


class XmlToJsonConverter:
    """Decoder XML -> display JSON with a fallback engine and error envelope."""

    def __init__(
        self,
        fallback: Optional[JsonEngine] = None,
        indent: Optional[int] = None,
    ):
        self.indent = settings.JSON_INDENT if indent is None else indent
        self.fallback = fallback or (lambda xml: lenient_engine(xml, self.indent))

    def _primary(self, xml: str) -> str:
        return element_tree_engine(xml, self.indent)

    def convert(self, xml: str) -> str:
        if not xml or not xml.strip():
            return "{}"
        cleaned = normalize_structure(xml)
        try:
            return self._primary(cleaned)
        except Exception as primary_exc:
            logger.warning(f"Primary XML->JSON conversion failed ({primary_exc}); trying fallback")
            try:
                return self.fallback(cleaned)
            except Exception as fallback_exc:
                error = ConversionError(primary_exc, fallback_exc)
                logger.error(f"{error.message}: {error.detail}")
                return self.error_envelope(error, xml)

    def error_envelope(self, error: ConversionError, xml: str) -> str:
        return json.dumps(
            {
                "error": error.message,
                "primaryError": str(error.primary) or type(error.primary).__name__,
                "fallbackError": str(error.fallback) or type(error.fallback).__name__,
                "originalXml": normalize_xml_newlines(xml),
            },
            indent=self.indent,
            ensure_ascii=False,
        )


def convert_xml_to_json(xml: str) -> str:
    return XmlToJsonConverter().convert(xml)
