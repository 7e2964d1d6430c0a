"""Category labels for endpoint-set ids published in the MEM service area.

The endpoint-list service identifies each endpoint set by a stable integer
id but carries no human-readable purpose. This table supplies the label
shown in the report. Ids missing from the table are still tested and are
reported under ``UNCATEGORIZED``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

UNCATEGORIZED = "Uncategorized"

# Endpoint-set ids with region-specific hostnames (see catalog.regions)
WIN32_APPS_ID = 170
ATTESTATION_ID = 186

ENDPOINT_CATEGORIES: Mapping[int, str] = MappingProxyType({
    163: "Intune client and host service",
    164: "Autopilot",
    165: "Autopilot dependencies",
    169: "Microsoft Store",
    WIN32_APPS_ID: "Scripts & Win32 Apps",
    171: "Push notifications",
    172: "Delivery Optimization",
    173: "Windows Update for Business",
    178: "Apple device management",
    179: "Android AOSP device management",
    181: "Remote Help",
    182: "Collect diagnostics",
    ATTESTATION_ID: "Microsoft Azure attestation",
    187: "Remote Help dependencies",
    188: "Android Enterprise",
    189: "Windows Autopatch",
})


def category_for(endpoint_id: int, categories: Mapping[int, str] = ENDPOINT_CATEGORIES) -> str:
    """Return the category label for an endpoint-set id."""
    return categories.get(endpoint_id, UNCATEGORIZED)
