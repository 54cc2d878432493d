# src/jasper_defaults/cli.py
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .clients.jasper import JasperClient
from .config import Settings
from .errors import JasperDefaultsError
from .jobs import JobConfig, load_job_config
from .logging_conf import configure_logging
from .pipeline import PipelineResult, ReportPipeline

logger = logging.getLogger(__name__)


async def set_defaults(config: JobConfig, settings: Settings) -> PipelineResult:
    async with JasperClient(settings) as client:
        return await ReportPipeline(client, settings).run(config)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jasper-defaults",
        description="Set default input-control values of JasperReports Server reports",
    )
    parser.add_argument(
        "config", nargs="?", default=None,
        help="JSON job configuration (default: JASPER_DEFAULTS_CONFIG or the packaged default_config.json)",
    )
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_format)

    path = args.config or settings.default_config_path
    try:
        config = load_job_config(path)
    except JasperDefaultsError as e:
        print(e, file=sys.stderr)
        return 1
    logger.info("loaded %d report job(s) from %s", len(config.reports), path)

    result = asyncio.run(set_defaults(config, settings))
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1
    print(result.message)
    return 0
