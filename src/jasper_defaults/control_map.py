# src/jasper_defaults/control_map.py
"""
Input-control map derived from a stateXML document.

Jasper identifies a filter three different ways: by its position among the
sub-filters (letter A, B, ...), by an internal field name used in the
expression strings, and by the external parameter name the report definition
declares. The display label the user configures only appears in the crosstab
grouping metadata. A ControlMap ties the four together for one report.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

from .errors import LabelResolutionError, UnknownControlError, XMLParseError
from .xml_codec import Document

logger = logging.getLogger(__name__)

SINGLE_VALUE_OPERATOR = "=="


@dataclass
class ControlMapEntry:
    index: int
    internal_name: str
    is_single: bool
    external_name: str
    label: str
    # str for single-valued controls, list for multi-valued; None = not targeted
    new_value: Optional[Union[str, List[str]]] = None

    @property
    def letter(self) -> str:
        return chr(ord("A") + self.index)


class ControlMap:
    def __init__(self, entries: List[ControlMapEntry]):
        self.entries = entries

    def __iter__(self) -> Iterator[ControlMapEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def by_label(self, label: str) -> ControlMapEntry:
        found = [e for e in self.entries if e.label == label]
        if not found:
            raise UnknownControlError(label)
        if len(found) > 1:
            letters = ", ".join(e.letter for e in found)
            raise UnknownControlError(label, f"is ambiguous in stateXML (sub-filters {letters})")
        return found[0]

    def by_external(self, external_name: str) -> Optional[ControlMapEntry]:
        for e in self.entries:
            if e.external_name == external_name:
                return e
        return None


# ─────────────────────────────────────────────────────────────
# Tree helpers (xmltodict layout, lists forced)
# ─────────────────────────────────────────────────────────────
def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def first(node: Any, key: str) -> Any:
    """First occurrence of child `key`, or None."""
    if not isinstance(node, dict):
        return None
    items = _as_list(node.get(key))
    return items[0] if items else None


def children(node: Any, key: str) -> List[Any]:
    if not isinstance(node, dict):
        return []
    return [c for c in _as_list(node.get(key)) if c is not None]


def text_of(node: Any) -> str:
    if isinstance(node, list):
        node = node[0] if node else None
    if isinstance(node, dict):
        node = node.get("#text")
    if isinstance(node, list):
        node = node[0] if node else None
    return node or ""


def state_root(state_doc: Document) -> Dict[str, Any]:
    root = first(state_doc, "unifiedState")
    if root is None:
        raise XMLParseError("stateXML has no <unifiedState> root")
    return root


def sub_filters(state_doc: Document) -> List[Dict[str, Any]]:
    return children(first(state_root(state_doc), "subFilterList"), "subFilter")


def grouping_dimensions(state_doc: Document) -> List[Dict[str, Any]]:
    """Row group dimensions followed by column group dimensions."""
    crosstab = first(state_root(state_doc), "crosstabState")
    rows = children(first(crosstab, "rowGroups"), "queryDimension")
    cols = children(first(crosstab, "columnGroups"), "queryDimension")
    return rows + cols


def _resolve_label(internal_name: str, dimensions: List[Dict[str, Any]]) -> str:
    for dim in dimensions:
        if dim.get("@name") == internal_name:
            label = dim.get("@fieldDisplay")
            if label:
                return label
            break
    raise LabelResolutionError(internal_name)


def build(state_doc: Document) -> ControlMap:
    dimensions = grouping_dimensions(state_doc)
    entries: List[ControlMapEntry] = []
    for idx, sf in enumerate(sub_filters(state_doc)):
        expr = text_of(sf.get("parameterizedExpressionString"))
        tokens = expr.split()
        if len(tokens) < 3:
            raise XMLParseError(f"sub-filter {idx} has malformed parameterizedExpressionString {expr!r}")
        internal, operator, external = tokens[0], tokens[1], tokens[2]

        entry = ControlMapEntry(
            index=idx,
            internal_name=internal,
            is_single=operator == SINGLE_VALUE_OPERATOR,
            external_name=external,
            label=_resolve_label(internal, dimensions),
        )
        declared = sf.get("@letter")
        if declared and declared != entry.letter:
            logger.warning(
                "sub-filter %d declares letter %s, using positional letter %s",
                idx, declared, entry.letter,
            )
        entries.append(entry)
    return ControlMap(entries)
