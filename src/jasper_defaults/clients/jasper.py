# src/jasper_defaults/clients/jasper.py
from __future__ import annotations

import logging
import posixpath
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..errors import TransportError
from ..jobs import OrgConfig

logger = logging.getLogger(__name__)

SERVICE = "jasperserver"

# control label -> legal option values, in server order
InputControlDomain = Dict[str, List[str]]


class JasperClient:
    """
    Thin async client for the JasperReports Server REST v2 API.

    Endpoints used:
      - GET /rest_v2/reports{view_path}/inputControls
      - GET /rest_v2/resources{path}
      - PUT /rest_v2/resources{path}
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = settings.jasper_base_url.rstrip("/")
        self.timeout = settings.http_client_timeout_seconds
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "JasperClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────
    # Low-level request helper
    # ─────────────────────────────────────────────────────────────
    def _url(self, org: OrgConfig, path: str) -> str:
        base = (org.base_url or self.base_url).rstrip("/")
        return f"{base}{path}"

    @staticmethod
    def _auth(org: OrgConfig) -> httpx.BasicAuth:
        # multi-tenant login: "user|organization"
        return httpx.BasicAuth(f"{org.username}|{org.org}", org.password)

    async def _request(
        self,
        org: OrgConfig,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        url = self._url(org, path)
        try:
            resp = await self._client.request(
                method, url, headers=headers, content=content, auth=self._auth(org)
            )
        except httpx.HTTPError as e:
            raise TransportError(service=SERVICE, status=None, url=url, body=repr(e)) from e
        if resp.status_code >= 400:
            raise TransportError(service=SERVICE, status=resp.status_code, url=url, body=resp.text)
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return resp

    # ─────────────────────────────────────────────────────────────
    # Public methods
    # ─────────────────────────────────────────────────────────────
    async def list_input_controls(self, org: OrgConfig, view_path: str) -> InputControlDomain:
        """
        Legal values for every input control of a report/view, keyed by control label.
        GET /rest_v2/reports{view_path}/inputControls
        """
        resp = await self._request(
            org, "GET", f"/rest_v2/reports{view_path}/inputControls",
            headers={"Accept": "application/json"},
        )
        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise TransportError(service=SERVICE, status=resp.status_code, url=str(resp.url), body=resp.text) from e

        domain: InputControlDomain = {}
        for ic in data.get("inputControl") or []:
            label = ic.get("label")
            if label is None:
                continue
            options = (ic.get("state") or {}).get("options") or []
            domain[label] = [str(o.get("value", "")) for o in options]
        return domain

    async def fetch_resource(self, org: OrgConfig, path: str) -> bytes:
        """
        Raw content of a file resource.
        GET /rest_v2/resources{path}
        """
        resp = await self._request(org, "GET", f"/rest_v2/resources{path}")
        return resp.content

    async def put_resource(self, org: OrgConfig, path: str, content: bytes, content_type: str) -> Any:
        """
        Replace a file resource with `content`.
        PUT /rest_v2/resources{path}
        """
        headers = {
            "Content-Type": content_type,
            "Content-Disposition": f'attachment; filename="{posixpath.basename(path)}"',
            "Accept": "application/json",
        }
        resp = await self._request(org, "PUT", f"/rest_v2/resources{path}", headers=headers, content=content)
        if resp.headers.get("content-type", "").startswith("application/json"):
            return resp.json()
        return resp.text
