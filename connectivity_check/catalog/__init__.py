"""Endpoint catalog package — retrieval, normalization, and regional labels."""

from connectivity_check.catalog.client import EndpointCatalogClient
from connectivity_check.catalog.models import EndpointGroup, EndpointSetEntry
from connectivity_check.catalog.normalizer import build_groups, dedupe_urls, strip_wildcard
from connectivity_check.catalog.regions import regional_annotation

__all__ = [
    "EndpointCatalogClient",
    "EndpointGroup",
    "EndpointSetEntry",
    "build_groups",
    "dedupe_urls",
    "regional_annotation",
    "strip_wildcard",
]
