"""Regional qualifiers for region-specific endpoint hostnames.

Some endpoint sets publish one hostname per geography. A device only needs
the hostnames of its own tenant's region, so the report labels them to make
a failure in another region easy to discount.
"""

from __future__ import annotations

from connectivity_check.config.categories import ATTESTATION_ID, WIN32_APPS_ID

ASIA_PACIFIC = "Asia & Pacific"
EUROPE = "Europe"
NORTH_AMERICA = "North America"
DEFAULT_REGION = "Default"

_ATTESTATION_DOMAIN = "attest.azure.net"

# Hostname prefixes, keyed by endpoint-set id
_PREFIX_REGIONS: dict[int, tuple[tuple[str, str], ...]] = {
    WIN32_APPS_ID: (
        ("approd", ASIA_PACIFIC),
        ("euprod", EUROPE),
        ("naprod", NORTH_AMERICA),
    ),
}

# Domain suffixes, keyed by endpoint-set id; the bare domain is the fallback
_SUFFIX_REGIONS: dict[int, tuple[tuple[str, str], ...]] = {
    ATTESTATION_ID: (
        (f".jpe.{_ATTESTATION_DOMAIN}", ASIA_PACIFIC),
        (f".ae.{_ATTESTATION_DOMAIN}", ASIA_PACIFIC),
        (f".neu.{_ATTESTATION_DOMAIN}", EUROPE),
        (f".weu.{_ATTESTATION_DOMAIN}", EUROPE),
        (f".uks.{_ATTESTATION_DOMAIN}", EUROPE),
        (f".eus.{_ATTESTATION_DOMAIN}", NORTH_AMERICA),
        (f".cus.{_ATTESTATION_DOMAIN}", NORTH_AMERICA),
        (f".wus.{_ATTESTATION_DOMAIN}", NORTH_AMERICA),
        (_ATTESTATION_DOMAIN, DEFAULT_REGION),
    ),
}


def regional_annotation(group_id: int, url: str) -> str | None:
    """Return the region a hostname serves, or None if it is not region-specific."""
    host = url.lower()

    for prefix, region in _PREFIX_REGIONS.get(group_id, ()):
        if host.startswith(prefix):
            return region

    for suffix, region in _SUFFIX_REGIONS.get(group_id, ()):
        if host.endswith(suffix):
            return region

    return None
