"""Catalog normalization logic.

Transforms validated endpoint-set entries into EndpointGroup values:
- Service-area filtering (entries without URLs are dropped)
- Wildcard-subdomain stripping (``*.example.com`` -> ``example.com``)
- Exact-match URL deduplication with a stable lexicographic order
- Category labelling from the static id table
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from connectivity_check.catalog.models import EndpointGroup, EndpointSetEntry
from connectivity_check.config.categories import ENDPOINT_CATEGORIES, category_for

WILDCARD_PREFIX = "*."


def strip_wildcard(url: str) -> str:
    """Strip a leading ``*.`` wildcard so the bare hostname can be tested."""
    while url.startswith(WILDCARD_PREFIX):
        url = url[len(WILDCARD_PREFIX):]
    return url


def dedupe_urls(urls: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate URLs (exact match) and sort them for reproducible output.

    Empty strings are discarded.
    """
    return tuple(sorted({url for url in urls if url}))


def build_groups(
    entries: Iterable[EndpointSetEntry],
    service_area: str,
    categories: Mapping[int, str] = ENDPOINT_CATEGORIES,
) -> list[EndpointGroup]:
    """Build endpoint groups for one service area, keeping the service's order.

    Steps:
    1. Keep entries in ``service_area`` that carry at least one URL
    2. Strip wildcard prefixes from every URL
    3. Deduplicate and sort URLs; drop groups left empty
    4. Attach the category label (unknown ids are kept as uncategorized)
    """
    groups: list[EndpointGroup] = []
    for entry in entries:
        if entry.service_area != service_area or not entry.urls:
            continue

        urls = dedupe_urls(strip_wildcard(url) for url in entry.urls)
        if not urls:
            continue

        groups.append(
            EndpointGroup(
                id=entry.id,
                category=category_for(entry.id, categories),
                urls=urls,
            )
        )
    return groups
