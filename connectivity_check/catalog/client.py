"""Client for the endpoint-list web service.

Fetches the versioned endpoint catalog via
GET {base_url}/endpoints/{instance}?ServiceAreas=...&clientrequestid=...
and normalizes it into endpoint groups. Every call carries a fresh UUID
correlation token so responses are never served from a cache and the
request can be traced server-side.

A catalog that cannot be retrieved makes the rest of the run meaningless,
so every failure surfaces as ``FetchError``; there are no retries and no
cached fallback.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping

import httpx

from connectivity_check.catalog.models import EndpointGroup, EndpointSetList
from connectivity_check.catalog.normalizer import build_groups
from connectivity_check.config.categories import ENDPOINT_CATEGORIES
from connectivity_check.errors import FetchError
from connectivity_check.proxy.types import EgressPath

logger = logging.getLogger(__name__)


class EndpointCatalogClient:
    """HTTP client for the endpoint-list service.

    Parameters
    ----------
    base_url:
        Base URL of the service (e.g. "https://endpoints.office.com").
    instance:
        Cloud instance path segment (default "worldwide").
    timeout_seconds:
        Request timeout (default 30).
    categories:
        Endpoint-set id to category label table.
    """

    def __init__(
        self,
        base_url: str = "https://endpoints.office.com",
        instance: str = "worldwide",
        timeout_seconds: float = 30.0,
        categories: Mapping[int, str] = ENDPOINT_CATEGORIES,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._instance = instance
        self._timeout_seconds = timeout_seconds
        self._categories = categories

    @property
    def endpoint_url(self) -> str:
        return f"{self._base_url}/endpoints/{self._instance}"

    async def fetch(
        self, service_area: str, egress: EgressPath | None = None
    ) -> list[EndpointGroup]:
        """Retrieve and normalize the endpoint groups for ``service_area``.

        Raises
        ------
        FetchError
            If the proxy cannot be used, the request fails, returns a non-2xx
            status, or the payload is not a list of endpoint sets.
        """
        correlation_id = str(uuid.uuid4())
        log_extra = {"correlation_id": correlation_id, "service_area": service_area}
        proxy = egress.proxy_address if egress is not None and egress.is_proxied else None

        try:
            http_client = httpx.AsyncClient(
                proxy=proxy,
                timeout=httpx.Timeout(self._timeout_seconds),
                trust_env=False,
            )
        except (ValueError, ImportError) as exc:
            logger.error("Cannot route catalog request through proxy: %s", exc, extra=log_extra)
            raise FetchError(
                f"Endpoint catalog request cannot use proxy {proxy}: {exc}",
                correlation_id=correlation_id,
                proxy=proxy,
            ) from exc

        try:
            async with http_client as client:
                response = await client.get(
                    self.endpoint_url,
                    params={"ServiceAreas": service_area, "clientrequestid": correlation_id},
                    headers={"client-request-id": correlation_id},
                )
            response.raise_for_status()
            entries = EndpointSetList.validate_python(response.json())

        except httpx.HTTPStatusError as exc:
            logger.error(
                "Endpoint catalog returned status %d", exc.response.status_code, extra=log_extra
            )
            raise FetchError(
                f"Endpoint catalog request returned HTTP {exc.response.status_code}",
                correlation_id=correlation_id,
            ) from exc

        except httpx.HTTPError as exc:
            logger.error("Endpoint catalog request failed: %s", exc, extra=log_extra)
            raise FetchError(
                f"Endpoint catalog request failed: {exc}",
                correlation_id=correlation_id,
            ) from exc

        except ValueError as exc:
            # JSON decode errors and pydantic validation errors
            logger.error("Endpoint catalog payload is malformed", extra=log_extra)
            raise FetchError(
                "Endpoint catalog response is malformed",
                correlation_id=correlation_id,
            ) from exc

        groups = build_groups(entries, service_area, self._categories)
        logger.info(
            "Fetched endpoint catalog",
            extra={**log_extra, "group_count": len(groups)},
        )
        return groups
