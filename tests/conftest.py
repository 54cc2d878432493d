"""Shared pytest configuration: src path setup, sample documents and a fake Jasper client."""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

_ROOT = Path(__file__).resolve().parent.parent

# Allow ``from jasper_defaults import ...`` without an editable install
sys.path.insert(0, str(_ROOT / "src"))

from jasper_defaults.config import Settings  # noqa: E402
from jasper_defaults.errors import TransportError  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def state_xml() -> bytes:
    return (FIXTURES / "state.xml").read_bytes()


@pytest.fixture
def topic_jrxml() -> bytes:
    return (FIXTURES / "topic.jrxml").read_bytes()


@pytest.fixture
def domain() -> Dict[str, List[str]]:
    return {
        "Year": ["2019", "2020", "2021"],
        "Color": ["red", "blue", "green"],
        "Region": ["North America ", "South America", "Europe"],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jasper_base_url="http://jasper.test/jasperserver-pro",
        http_client_timeout_seconds=5.0,
        state_xml_suffix="_files/stateXML",
        view_jrxml_suffix="_files/topicJRXML",
        default_config_path=str(FIXTURES / "jobs.json"),
        log_level="debug",
        log_format="plain",
    )


class FakeJasperClient:
    """In-memory stand-in for JasperClient that records every call in order."""

    def __init__(
        self,
        domains: Dict[str, Dict[str, List[str]]],
        resources: Dict[str, bytes],
        fail_on: Optional[Tuple[str, str]] = None,
    ):
        self.domains = domains
        self.resources = dict(resources)
        self.fail_on = fail_on
        self.calls: List[Tuple[str, str]] = []
        self.puts: Dict[str, bytes] = {}

    def _maybe_fail(self, op: str, path: str) -> None:
        self.calls.append((op, path))
        if self.fail_on == (op, path):
            raise TransportError(service="jasperserver", status=500, url=path, body="boom")

    async def list_input_controls(self, org, view_path):
        self._maybe_fail("controls", view_path)
        if view_path not in self.domains:
            raise TransportError(service="jasperserver", status=404, url=view_path, body="not found")
        return self.domains[view_path]

    async def fetch_resource(self, org, path):
        self._maybe_fail("get", path)
        if path not in self.resources:
            raise TransportError(service="jasperserver", status=404, url=path, body="not found")
        return self.resources[path]

    async def put_resource(self, org, path, content, content_type):
        self._maybe_fail("put", path)
        assert content_type == "application/xml"
        self.puts[path] = content
        self.resources[path] = content
        return {"uri": path}


@pytest.fixture
def fake_client_factory():
    return FakeJasperClient
