# src/jasper_defaults/xml_codec.py
"""
XML <-> dict codec for Jasper's stateXML and topicJRXML resources.

Trees use the xmltodict layout with every child element forced into a list,
so indexed access (`doc["unifiedState"][0]["subFilterList"][0]`) is stable even
when an element occurs only once. Attributes are `@name` keys and the text of
an element that also has attributes is the `#text` string.

Text is kept byte for byte (padded static text, CDATA expressions); only the
indentation between child elements is dropped, and `serialize` writes none
back. Comments are not kept.

The server reads these files back with its own parser, which is why
`serialize` never writes `&apos;` and never writes an XML declaration.
"""
from __future__ import annotations

from typing import Any, Dict
from xml.parsers.expat import ExpatError

import xmltodict

from .errors import XMLParseError

Document = Dict[str, Any]

TEXT_KEY = "#text"

_APOS_ENTITIES = ("&apos;", "&#39;", "&#x27;")


def _force_list(path, key, value) -> bool:
    return key[0] not in "@#"


def _drop_layout_whitespace(node: Any) -> None:
    """Remove whitespace-only `#text` from elements that have child elements."""
    if isinstance(node, list):
        for item in node:
            _drop_layout_whitespace(item)
        return
    if not isinstance(node, dict):
        return
    has_children = False
    for key, value in node.items():
        if key[0] not in "@#":
            has_children = True
            _drop_layout_whitespace(value)
    text = node.get(TEXT_KEY)
    if has_children and isinstance(text, str) and not text.strip():
        del node[TEXT_KEY]


def parse(data: bytes) -> Document:
    try:
        doc = xmltodict.parse(data, force_list=_force_list, strip_whitespace=False)
    except ExpatError as e:
        raise XMLParseError(f"Could not parse XML: {e}") from e
    _drop_layout_whitespace(doc)
    return doc


def serialize(doc: Document) -> bytes:
    xml = xmltodict.unparse(doc, full_document=False)
    for ent in _APOS_ENTITIES:
        xml = xml.replace(ent, "'")
    return xml.encode("utf-8")
