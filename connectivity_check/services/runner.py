"""Connectivity check orchestration.

Sequences one run: resolve the egress path, fetch the endpoint catalog, then
probe every (group, url) pair. Probes run on a bounded asyncio worker pool;
each result is written to the slot of its originating pair so the report
always follows catalog order, whatever order probes complete in.

A catalog failure aborts the run before any probe starts. Probe failures
never abort the batch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from connectivity_check.catalog.client import EndpointCatalogClient
from connectivity_check.catalog.models import EndpointGroup
from connectivity_check.probe.prober import ConnectivityProber
from connectivity_check.probe.types import ProbeOutcome
from connectivity_check.proxy.resolver import EgressPathResolver
from connectivity_check.proxy.types import EgressPath

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    """Overall result of a run."""

    PASSED = "passed"
    FAILED = "failed"
    INCONCLUSIVE = "inconclusive"  # catalog listed no endpoints to test


@dataclass(frozen=True)
class GroupResult:
    """Probe outcomes for one endpoint group, in the group's URL order."""

    group: EndpointGroup
    outcomes: tuple[ProbeOutcome, ...]

    @property
    def failed(self) -> tuple[ProbeOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.success)


@dataclass(frozen=True)
class CheckReport:
    """Aggregate result of one connectivity check run."""

    egress: EgressPath
    service_area: str
    results: tuple[GroupResult, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return sum(len(result.outcomes) for result in self.results)

    @property
    def failures(self) -> list[tuple[EndpointGroup, ProbeOutcome]]:
        return [
            (result.group, outcome)
            for result in self.results
            for outcome in result.failed
        ]

    @property
    def any_failures(self) -> bool:
        return any(result.failed for result in self.results)

    @property
    def verdict(self) -> Verdict:
        if self.any_failures:
            return Verdict.FAILED
        if self.total == 0:
            return Verdict.INCONCLUSIVE
        return Verdict.PASSED


class ConnectivityCheckRunner:
    """Runs the full resolve → fetch → probe pipeline.

    Parameters
    ----------
    resolver:
        Egress path resolver.
    catalog_client:
        Endpoint catalog client.
    prober:
        Connectivity prober.
    service_area:
        Catalog service area to test (default "MEM").
    max_concurrency:
        Maximum probes in flight (1 = strictly sequential).
    """

    def __init__(
        self,
        *,
        resolver: EgressPathResolver,
        catalog_client: EndpointCatalogClient,
        prober: ConnectivityProber,
        service_area: str = "MEM",
        max_concurrency: int = 8,
    ) -> None:
        self._resolver = resolver
        self._catalog_client = catalog_client
        self._prober = prober
        self._service_area = service_area
        self._max_concurrency = max(1, max_concurrency)

    async def run(self) -> CheckReport:
        """Execute one run.

        Raises
        ------
        FetchError
            If the endpoint catalog cannot be retrieved; no probes are run.
        """
        egress = self._resolver.resolve()
        groups = await self._catalog_client.fetch(self._service_area, egress)

        if not groups:
            logger.warning(
                "Endpoint catalog lists no endpoints to test",
                extra={"service_area": self._service_area},
            )

        results = await self.probe_groups(groups, egress)
        return CheckReport(egress=egress, service_area=self._service_area, results=results)

    async def probe_groups(
        self, groups: list[EndpointGroup], egress: EgressPath
    ) -> tuple[GroupResult, ...]:
        """Probe every URL of every group, returning results in catalog order."""
        semaphore = asyncio.Semaphore(self._max_concurrency)
        urls = [url for group in groups for url in group.urls]

        async def _probe_one(url: str) -> ProbeOutcome:
            async with semaphore:
                outcome = await self._prober.probe(url, egress)
            if not outcome.success:
                logger.info(
                    "Probe failed for %s: %s",
                    url,
                    outcome.detail,
                    extra={
                        "target_url": url,
                        "proxy_used": egress.proxy_address,
                        "failure_reason": outcome.failure_reason.value
                        if outcome.failure_reason
                        else None,
                        "status_code": outcome.status_code,
                    },
                )
            return outcome

        # gather preserves argument order, so outcomes line up with urls
        outcomes = await asyncio.gather(*(_probe_one(url) for url in urls))

        results: list[GroupResult] = []
        offset = 0
        for group in groups:
            count = len(group.urls)
            results.append(
                GroupResult(group=group, outcomes=tuple(outcomes[offset:offset + count]))
            )
            offset += count
        return tuple(results)
