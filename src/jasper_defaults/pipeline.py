# src/jasper_defaults/pipeline.py
"""
Per-report pipeline: fetch the legal values, rewrite stateXML, upload it to the
report and the view, then rewrite and upload the view's topicJRXML.

Stages raise errors from `errors`; the driver turns the first one into a
failed PipelineResult and stops the whole run, so the documents of a report
are never left half-updated by a later stage running after an earlier failure.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from . import control_map as cmap
from . import xml_codec
from .clients.jasper import InputControlDomain, JasperClient
from .config import Settings
from .control_map import ControlMap
from .definition_rewriter import rewrite_definition
from .errors import JasperDefaultsError
from .jobs import JobConfig, OrgConfig, ReportJob
from .state_rewriter import rewrite_state
from .xml_codec import Document

logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml"
DONE_MESSAGE = "Done setting input values"


class Stage(str, Enum):
    FETCH_DOMAIN = "FetchDomain"
    FETCH_STATE = "FetchState"
    PARSE_STATE = "ParseState"
    BUILD_MAP = "BuildMap"
    REWRITE_STATE = "RewriteState"
    SERIALIZE_STATE = "SerializeState"
    UPLOAD_STATE_TO_REPORT = "UploadStateToReport"
    UPLOAD_STATE_TO_VIEW = "UploadStateToView"
    FETCH_DEFINITION = "FetchDefinition"
    PARSE_DEFINITION = "ParseDefinition"
    REWRITE_DEFINITION = "RewriteDefinition"
    SERIALIZE_DEFINITION = "SerializeDefinition"
    UPLOAD_DEFINITION = "UploadDefinition"


@dataclass
class ReportRun:
    """Everything fetched or derived for one report job; discarded afterwards."""
    job: ReportJob
    org: OrgConfig
    domain: InputControlDomain = field(default_factory=dict)
    state_raw: bytes = b""
    state_doc: Optional[Document] = None
    control_map: Optional[ControlMap] = None
    state_xml: bytes = b""
    definition_raw: bytes = b""
    definition_doc: Optional[Document] = None
    definition_xml: bytes = b""


@dataclass
class PipelineResult:
    ok: bool
    message: str
    stage: Optional[Stage] = None
    report_path: Optional[str] = None
    view_path: Optional[str] = None
    error: Optional[JasperDefaultsError] = None

    @classmethod
    def failure(cls, stage: Stage, job: ReportJob, error: JasperDefaultsError) -> "PipelineResult":
        msg = f"{stage.value} failed for report {job.report_path} (view {job.view_path}): {error}"
        return cls(ok=False, message=msg, stage=stage, report_path=job.report_path,
                   view_path=job.view_path, error=error)


StageFn = Callable[[ReportRun], Awaitable[None]]


class ReportPipeline:
    def __init__(self, client: JasperClient, settings: Settings):
        self.client = client
        self.settings = settings
        self._stages: List[Tuple[Stage, StageFn]] = [
            (Stage.FETCH_DOMAIN, self._fetch_domain),
            (Stage.FETCH_STATE, self._fetch_state),
            (Stage.PARSE_STATE, self._parse_state),
            (Stage.BUILD_MAP, self._build_map),
            (Stage.REWRITE_STATE, self._rewrite_state),
            (Stage.SERIALIZE_STATE, self._serialize_state),
            (Stage.UPLOAD_STATE_TO_REPORT, self._upload_state_to_report),
            (Stage.UPLOAD_STATE_TO_VIEW, self._upload_state_to_view),
            (Stage.FETCH_DEFINITION, self._fetch_definition),
            (Stage.PARSE_DEFINITION, self._parse_definition),
            (Stage.REWRITE_DEFINITION, self._rewrite_definition),
            (Stage.SERIALIZE_DEFINITION, self._serialize_definition),
            (Stage.UPLOAD_DEFINITION, self._upload_definition),
        ]

    # ─────────────────────────────────────────────────────────────
    # Drivers
    # ─────────────────────────────────────────────────────────────
    async def run(self, config: JobConfig) -> PipelineResult:
        result = PipelineResult(ok=True, message=DONE_MESSAGE)
        for job in config.reports:
            result = await self.run_report(job, config.org_for(job))
            if not result.ok:
                return result
        return result

    async def run_report(self, job: ReportJob, org: OrgConfig) -> PipelineResult:
        run = ReportRun(job=job, org=org)
        for stage, fn in self._stages:
            try:
                await fn(run)
            except JasperDefaultsError as e:
                logger.error("%s failed: %s", stage.value, e, extra=self._ctx(run, stage))
                return PipelineResult.failure(stage, job, e)
        return PipelineResult(
            ok=True,
            message=f"Input Values have been set in report {job.report_path} and in view {job.view_path}",
            report_path=job.report_path,
            view_path=job.view_path,
        )

    @staticmethod
    def _ctx(run: ReportRun, stage: Stage) -> dict:
        return {"report_path": run.job.report_path, "view_path": run.job.view_path,
                "org": run.org.org, "stage": stage.value}

    def _state_path(self, path: str) -> str:
        return path + self.settings.state_xml_suffix

    def _definition_path(self, path: str) -> str:
        return path + self.settings.view_jrxml_suffix

    # ─────────────────────────────────────────────────────────────
    # Stages
    # ─────────────────────────────────────────────────────────────
    async def _fetch_domain(self, run: ReportRun) -> None:
        run.domain = await self.client.list_input_controls(run.org, run.job.view_path)

    async def _fetch_state(self, run: ReportRun) -> None:
        run.state_raw = await self.client.fetch_resource(run.org, self._state_path(run.job.view_path))

    async def _parse_state(self, run: ReportRun) -> None:
        run.state_doc = xml_codec.parse(run.state_raw)

    async def _build_map(self, run: ReportRun) -> None:
        run.control_map = cmap.build(run.state_doc)

    async def _rewrite_state(self, run: ReportRun) -> None:
        rewrite_state(run.state_doc, run.control_map, run.job.input_controls, run.domain)

    async def _serialize_state(self, run: ReportRun) -> None:
        run.state_xml = xml_codec.serialize(run.state_doc)

    async def _upload_state_to_report(self, run: ReportRun) -> None:
        await self._put(run, self._state_path(run.job.report_path), run.state_xml)
        logger.info("State XML replaced for report %s", run.job.report_path)

    async def _upload_state_to_view(self, run: ReportRun) -> None:
        await self._put(run, self._state_path(run.job.view_path), run.state_xml)
        logger.info("State XML replaced for view %s", run.job.view_path)

    async def _fetch_definition(self, run: ReportRun) -> None:
        run.definition_raw = await self.client.fetch_resource(run.org, self._definition_path(run.job.view_path))

    async def _parse_definition(self, run: ReportRun) -> None:
        run.definition_doc = xml_codec.parse(run.definition_raw)

    async def _rewrite_definition(self, run: ReportRun) -> None:
        rewrite_definition(run.definition_doc, run.control_map)

    async def _serialize_definition(self, run: ReportRun) -> None:
        run.definition_xml = xml_codec.serialize(run.definition_doc)

    async def _upload_definition(self, run: ReportRun) -> None:
        await self._put(run, self._definition_path(run.job.view_path), run.definition_xml)
        logger.info("JRXML replaced for report %s", run.job.view_path)

    async def _put(self, run: ReportRun, path: str, content: bytes) -> Any:
        return await self.client.put_resource(run.org, path, content, XML_CONTENT_TYPE)
