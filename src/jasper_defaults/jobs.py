# src/jasper_defaults/jobs.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigLoadError, ConfigParseError


# ─────────────────────────────────────────────────────────────
# Orgs (tenants) and their credentials
# ─────────────────────────────────────────────────────────────
class OrgConfig(BaseModel):
    """
    A JasperReports Server organization and the credentials used for it.
    Login is `username|org` with `password`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    org: str
    username: str = "jasperadmin"
    password: str = ""
    base_url: Optional[str] = Field(
        default=None, alias="baseUrl",
        description="Overrides JASPER_BASE_URL for this org.",
    )


# ─────────────────────────────────────────────────────────────
# Report jobs
# ─────────────────────────────────────────────────────────────
class ReportJob(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    org: str
    report_path: str = Field(..., alias="reportPath")
    view_path: str = Field(..., alias="viewPath")
    input_controls: Dict[str, str] = Field(
        default_factory=dict, alias="inputControls",
        description="control label -> desired value (comma-joined for multi-valued controls)",
    )


class JobConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    orgs: List[OrgConfig] = Field(default_factory=list)
    reports: List[ReportJob] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_orgs(self):
        known = {o.org for o in self.orgs}
        for job in self.reports:
            if job.org not in known:
                raise ValueError(f"report {job.report_path} references unknown org {job.org!r}")
        return self

    def org_for(self, job: ReportJob) -> OrgConfig:
        return {o.org: o for o in self.orgs}[job.org]


def load_job_config(path: Union[str, Path]) -> JobConfig:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(str(p), str(e)) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigParseError(str(p), str(e)) from e

    try:
        return JobConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(str(p), str(e)) from e
