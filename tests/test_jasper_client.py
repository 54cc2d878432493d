"""Tests for the JasperReports Server REST client over httpx.MockTransport."""

import base64

import httpx
import pytest

from jasper_defaults.clients.jasper import JasperClient
from jasper_defaults.errors import TransportError
from jasper_defaults.jobs import OrgConfig

ORG = OrgConfig(org="organization_1", username="jasperadmin", password="secret")


def _client(settings, handler):
    return JasperClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_input_controls(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"inputControl": [
            {"id": "P_YEAR", "label": "Year", "state": {"options": [
                {"label": "2019", "value": "2019", "selected": False},
                {"label": "2020", "value": "2020", "selected": True},
            ]}},
            {"id": "P_FREE", "label": "Free text", "state": {"value": "x"}},
        ]})

    async with _client(settings, handler) as client:
        domain = await client.list_input_controls(ORG, "/public/Views/Sales")

    assert domain == {"Year": ["2019", "2020"], "Free text": []}
    assert seen["url"] == "http://jasper.test/jasperserver-pro/rest_v2/reports/public/Views/Sales/inputControls"
    expected = base64.b64encode(b"jasperadmin|organization_1:secret").decode("ascii")
    assert seen["auth"] == f"Basic {expected}"


@pytest.mark.asyncio
async def test_fetch_resource_returns_bytes(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/jasperserver-pro/rest_v2/resources/public/Views/Sales_files/stateXML"
        return httpx.Response(200, content=b"<unifiedState/>")

    async with _client(settings, handler) as client:
        data = await client.fetch_resource(ORG, "/public/Views/Sales_files/stateXML")
    assert data == b"<unifiedState/>"


@pytest.mark.asyncio
async def test_put_resource(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["type"] = request.headers["Content-Type"]
        seen["disposition"] = request.headers["Content-Disposition"]
        seen["body"] = request.content
        return httpx.Response(200, json={"uri": "/public/Views/Sales_files/stateXML"})

    async with _client(settings, handler) as client:
        ack = await client.put_resource(ORG, "/public/Views/Sales_files/stateXML", b"<x/>", "application/xml")

    assert ack == {"uri": "/public/Views/Sales_files/stateXML"}
    assert seen["method"] == "PUT"
    assert seen["type"] == "application/xml"
    assert seen["disposition"] == 'attachment; filename="stateXML"'
    assert seen["body"] == b"<x/>"


@pytest.mark.asyncio
async def test_org_base_url_override(settings):
    org = OrgConfig(org="tenant", username="u", password="p", baseUrl="http://other.test/js/")

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "other.test"
        return httpx.Response(200, content=b"ok")

    async with _client(settings, handler) as client:
        assert await client.fetch_resource(org, "/a") == b"ok"


@pytest.mark.asyncio
async def test_http_error_status(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="Resource not found")

    async with _client(settings, handler) as client:
        with pytest.raises(TransportError) as ei:
            await client.fetch_resource(ORG, "/missing")
    assert ei.value.status == 404
    assert "Resource not found" in str(ei.value)


@pytest.mark.asyncio
async def test_network_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(settings, handler) as client:
        with pytest.raises(TransportError) as ei:
            await client.list_input_controls(ORG, "/v")
    assert ei.value.status is None
