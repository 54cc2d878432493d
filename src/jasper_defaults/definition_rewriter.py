# src/jasper_defaults/definition_rewriter.py
from __future__ import annotations

import logging
from typing import List, Union

from .control_map import ControlMap, ControlMapEntry, children, first
from .errors import UnknownParameterError, XMLParseError
from .xml_codec import Document

logger = logging.getLogger(__name__)


def default_value_expression(entry: ControlMapEntry, value: Union[str, List[str]]) -> str:
    if entry.is_single:
        return f'"{value}"'
    return 'java.util.Arrays.asList(new Object[]{"' + '", "'.join(value) + '"})'


def rewrite_definition(definition_doc: Document, control_map: ControlMap) -> Document:
    """Set JRXML parameter defaults from the values the state rewrite stored, in place."""
    report = first(definition_doc, "jasperReport")
    if report is None:
        raise XMLParseError("topicJRXML has no <jasperReport> root")

    for param in children(report, "parameter"):
        name = param.get("@name")
        entry = control_map.by_external(name) if name else None
        if entry is None:
            raise UnknownParameterError(name)
        if entry.new_value is None:
            continue
        param["defaultValueExpression"] = [default_value_expression(entry, entry.new_value)]
        logger.debug("parameter %s: %s", name, param["defaultValueExpression"][0])
    return definition_doc
