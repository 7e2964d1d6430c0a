"""Configuration module — settings and endpoint category labels."""

from connectivity_check.config.categories import (
    ENDPOINT_CATEGORIES,
    UNCATEGORIZED,
    category_for,
)
from connectivity_check.config.settings import CheckSettings

__all__ = [
    "ENDPOINT_CATEGORIES",
    "UNCATEGORIZED",
    "CheckSettings",
    "category_for",
]
