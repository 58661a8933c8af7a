"""Helpers over the decoder's XML text.

Two concerns live here:

* ``normalize_structure`` repairs the duplicated wrapper element that the
  decoder emits for some Action PDUs, e.g.::

      <ActionRequest>
        <ActionRequestNormal>
          <InvokeIdAndPriority Value="42" />
          <ActionRequest>            <- stripped
            <MethodDescriptor>...</MethodDescriptor>
          </ActionRequest>           <- stripped
        </ActionRequestNormal>
      </ActionRequest>

* ``XmlFieldExtractor`` pulls ``Value``/``Name`` attributes out by tag name.
  Builders only talk to the extractor, so the regex matching below can be
  replaced by a tree query without touching them.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Message elements known to be repeated inside their own "<Name>Normal" wrapper.
DUPLICATED_WRAPPERS = ("ActionRequest", "ActionResponse")


@lru_cache(maxsize=None)
def _wrapper_pattern(name: str) -> re.Pattern:
    return re.compile(
        rf"(<{name}Normal(?:\s[^>]*)?>.*?)<{name}(?:\s[^>]*)?>(.*?)</{name}>(\s*</{name}Normal>)",
        re.DOTALL,
    )


def normalize_xml_newlines(xml: str) -> str:
    return xml.replace("\r\n", "\n").replace("\r", "\n")


def normalize_structure(xml: str) -> str:
    """Strip the inner duplicate of ``ActionRequest``/``ActionResponse``.

    Children of the stripped element are promoted into the ``...Normal``
    wrapper. Any other XML is returned with only its newlines normalised.
    """

    cleaned = normalize_xml_newlines(xml)
    for name in DUPLICATED_WRAPPERS:
        if f"<{name}>" not in cleaned or f"<{name}Normal" not in cleaned:
            continue
        cleaned, count = _wrapper_pattern(name).subn(r"\1\2\3", cleaned)
        if count:
            logger.debug(f"Removed {count} duplicated <{name}> wrapper(s)")
    return cleaned


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _attribute_pattern(tag: str, attr: str) -> re.Pattern:
    return re.compile(
        rf'<{re.escape(tag)}(?=[\s/>])[^>]*?\b{re.escape(attr)}\s*=\s*"([^"]*)"',
        re.IGNORECASE,
    )


@lru_cache(maxsize=None)
def _section_pattern(tag: str) -> re.Pattern:
    tag = re.escape(tag)
    return re.compile(
        rf"<{tag}(?:\s[^>]*)?(?<!/)>(.*?)</{tag}\s*>",
        re.IGNORECASE | re.DOTALL,
    )


def extract_value(xml: str, tag: str, attr: str = "Value") -> Optional[str]:
    """Return the ``Value`` attribute of the first ``tag`` element, or None."""

    match = _attribute_pattern(tag, attr).search(xml)
    if match is None:
        logger.debug(f"No <{tag} {attr}=...> in decoder output")
        return None
    return match.group(1).strip()


def extract_all(xml: str, tag: str, attr: str) -> List[str]:
    """Every ``attr`` value of ``tag`` elements, in document order."""

    return [m.group(1).strip() for m in _attribute_pattern(tag, attr).finditer(xml)]


def extract_tagged_values(xml: str, tags: Sequence[str], attr: str = "Value") -> List[Tuple[str, str]]:
    """(tag, value) pairs for any of ``tags``, in document order.

    The returned tag keeps the spelling used in ``tags``.
    """

    by_lower = {tag.lower(): tag for tag in tags}
    alternatives = "|".join(re.escape(tag) for tag in tags)
    pattern = re.compile(
        rf'<({alternatives})(?=[\s/>])[^>]*?\b{re.escape(attr)}\s*=\s*"([^"]*)"',
        re.IGNORECASE,
    )
    return [(by_lower[m.group(1).lower()], m.group(2).strip()) for m in pattern.finditer(xml)]


def extract_section(xml: str, *tags: str) -> Optional[str]:
    """Inner text of the first element found among ``tags`` (tried in order)."""

    for tag in tags:
        match = _section_pattern(tag).search(xml)
        if match is not None:
            return match.group(1).strip()
    return None


def extract_all_scoped(xml: str, section_tag: str, tag: str, attr: str) -> List[str]:
    """Like ``extract_all`` but limited to the first ``section_tag`` element.

    Used to tell negotiated and proposed conformance blocks apart; both use
    ``ConformanceBit`` children. A missing section yields an empty list.
    """

    section = extract_section(xml, section_tag)
    if section is None:
        return []
    return extract_all(section, tag, attr)


class XmlFieldExtractor:
    """Extraction bound to one decoder XML document."""

    def __init__(self, xml: str):
        self.xml = xml

    def value(self, tag: str) -> Optional[str]:
        return extract_value(self.xml, tag)

    def first_value(self, *tags: str) -> Optional[str]:
        for tag in tags:
            found = extract_value(self.xml, tag)
            if found is not None:
                return found
        return None

    def all(self, tag: str, attr: str = "Value") -> List[str]:
        return extract_all(self.xml, tag, attr)

    def all_scoped(self, section_tag: str, tag: str, attr: str = "Value") -> List[str]:
        return extract_all_scoped(self.xml, section_tag, tag, attr)

    def tagged_values(self, tags: Sequence[str], within: Optional[str] = None) -> List[Tuple[str, str]]:
        return extract_tagged_values(self.xml if within is None else within, tags)

    def section(self, *tags: str) -> Optional[str]:
        return extract_section(self.xml, *tags)

    def contains(self, tag: str) -> bool:
        return re.search(rf"<{re.escape(tag)}(?=[\s/>])", self.xml, re.IGNORECASE) is not None
