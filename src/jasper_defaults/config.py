# src/jasper_defaults/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.json"


@dataclass(frozen=True)
class Settings:
    # JasperReports Server
    jasper_base_url: str
    http_client_timeout_seconds: float

    # Resource suffixes appended to report/view paths
    state_xml_suffix: str
    view_jrxml_suffix: str

    # Job configuration used when no file is given on the command line
    default_config_path: str

    # Logging
    log_level: str
    log_format: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            jasper_base_url=os.getenv("JASPER_BASE_URL", "http://localhost:8080/jasperserver-pro"),
            http_client_timeout_seconds=float(os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS", "30")),

            state_xml_suffix=os.getenv("JASPER_STATE_XML_SUFFIX", "_files/stateXML"),
            view_jrxml_suffix=os.getenv("JASPER_VIEW_JRXML_SUFFIX", "_files/topicJRXML"),

            default_config_path=os.getenv("JASPER_DEFAULTS_CONFIG", str(DEFAULT_CONFIG_PATH)),

            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            log_format=os.getenv("LOG_FORMAT", "plain").lower(),
        )


__all__ = ["Settings", "DEFAULT_CONFIG_PATH"]
