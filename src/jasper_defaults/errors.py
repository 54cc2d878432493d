# src/jasper_defaults/errors.py
from __future__ import annotations

from typing import Optional


class JasperDefaultsError(RuntimeError):
    """Base for every error that aborts a run."""


class ConfigLoadError(JasperDefaultsError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not open file {path}\n{reason}")
        self.path = path
        self.reason = reason


class ConfigParseError(JasperDefaultsError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not parse JSON {path}\n{reason}")
        self.path = path
        self.reason = reason


class TransportError(JasperDefaultsError):
    def __init__(self, *, service: str, status: Optional[int], url: str, body: str):
        shown = status if status is not None else "n/a"
        super().__init__(f"{service} HTTP {shown}: {url} :: {body[:500]}")
        self.service = service
        self.status = status
        self.url = url
        self.body = body


class XMLParseError(JasperDefaultsError):
    pass


class LabelResolutionError(JasperDefaultsError):
    def __init__(self, internal_name: str):
        super().__init__(
            f"Could not locate the Input Control label for field {internal_name} in stateXML file."
        )
        self.internal_name = internal_name


class UnknownControlError(JasperDefaultsError):
    def __init__(self, label: str, reason: str = "not found in stateXML"):
        super().__init__(f"Input Control {label!r} {reason}")
        self.label = label


class InvalidValueError(JasperDefaultsError):
    def __init__(self, label: str, candidate: str):
        super().__init__(f"The value {candidate} is not valid for the Input Control {label}")
        self.label = label
        self.candidate = candidate


class UnknownParameterError(JasperDefaultsError):
    def __init__(self, parameter: Optional[str]):
        super().__init__(f"JRXML parameter {parameter!r} has no matching Input Control in stateXML")
        self.parameter = parameter
