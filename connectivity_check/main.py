"""Console entry point.

Loads settings from the environment, configures logging, wires the
components and performs one full pass. Exit codes: 0 all endpoints
reachable (or nothing to test), 1 one or more endpoints failed, 2 the
endpoint catalog could not be retrieved, 3 nothing to test when empty
catalogs are configured to fail.
"""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console

from connectivity_check.catalog.client import EndpointCatalogClient
from connectivity_check.config.settings import CheckSettings
from connectivity_check.errors import ConnectivityCheckError
from connectivity_check.logging_config import configure_logging
from connectivity_check.probe.prober import ConnectivityProber
from connectivity_check.proxy.resolver import EgressPathResolver
from connectivity_check.report import render_fatal, render_report
from connectivity_check.services.runner import CheckReport, ConnectivityCheckRunner, Verdict

logger = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_INCONCLUSIVE = 3


def build_runner(settings: CheckSettings) -> ConnectivityCheckRunner:
    """Wire the pipeline components from settings."""
    return ConnectivityCheckRunner(
        resolver=EgressPathResolver(proxy_override=settings.proxy),
        catalog_client=EndpointCatalogClient(
            base_url=settings.catalog_base_url,
            instance=settings.catalog_instance,
            timeout_seconds=settings.catalog_timeout_seconds,
        ),
        prober=ConnectivityProber(
            port=settings.probe_port,
            tcp_timeout_seconds=settings.tcp_timeout_seconds,
            http_timeout_seconds=settings.http_timeout_seconds,
        ),
        service_area=settings.service_area,
        max_concurrency=settings.max_concurrency,
    )


def exit_code_for(report: CheckReport, settings: CheckSettings) -> int:
    if report.verdict is Verdict.FAILED:
        return EXIT_FAILED
    if report.verdict is Verdict.INCONCLUSIVE and settings.empty_catalog_is_failure:
        return EXIT_INCONCLUSIVE
    return EXIT_PASSED


def main(console: Console | None = None) -> int:
    """Run one connectivity check and return the process exit code."""
    settings = CheckSettings()
    configure_logging(settings.log_level)
    console = console or Console()

    runner = build_runner(settings)
    try:
        report = asyncio.run(runner.run())
    except ConnectivityCheckError as exc:
        logger.error("Connectivity check aborted: %s", exc.message)
        render_fatal(exc, console)
        return exc.exit_code

    render_report(report, console)
    logger.info("Connectivity check finished: %s", report.verdict.value)
    return exit_code_for(report, settings)
