# src/jasper_defaults/state_rewriter.py
from __future__ import annotations

import logging
from typing import List, Mapping, Union

from .control_map import ControlMap, ControlMapEntry, sub_filters
from .normalizer import Domain, normalize_values
from .xml_codec import Document

logger = logging.getLogger(__name__)


def expression_string(entry: ControlMapEntry, value: Union[str, List[str]]) -> str:
    if entry.is_single:
        return f"{entry.internal_name} == '{value}'"
    return f"{entry.internal_name} in ('" + "', '".join(value) + "')"


def rewrite_state(
    state_doc: Document,
    control_map: ControlMap,
    input_controls: Mapping[str, str],
    domain: Domain,
) -> Document:
    """
    Write the configured values into the stateXML sub-filters, in place.

    Each targeted entry gets its normalized `new_value`, which the JRXML
    rewriter reuses so both documents carry the same strings.
    """
    filters = sub_filters(state_doc)
    for label, desired in input_controls.items():
        entry = control_map.by_label(label)
        entry.new_value = normalize_values(label, desired, entry.is_single, domain)
        expr = expression_string(entry, entry.new_value)
        filters[entry.index]["expressionString"] = [expr]
        logger.debug("sub-filter %s (%s): %s", entry.letter, label, expr)
    return state_doc
