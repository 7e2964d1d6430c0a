"""Pydantic Settings for the connectivity check.

All environment variables use the CONNCHECK_ prefix.
Example: CONNCHECK_MAX_CONCURRENCY=1, CONNCHECK_PROXY=proxy.corp:8080
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class CheckSettings(BaseSettings):
    """Connectivity check configuration validated from environment variables."""

    log_level: str = "WARNING"

    # Endpoint catalog
    service_area: str = "MEM"
    catalog_base_url: str = "https://endpoints.office.com"
    catalog_instance: str = "worldwide"
    catalog_timeout_seconds: float = Field(default=30.0, ge=1)

    # Probing
    tcp_timeout_seconds: float = Field(default=10.0, ge=1)
    http_timeout_seconds: float = Field(default=30.0, ge=1)
    probe_port: int = Field(default=443, ge=1, le=65535)
    max_concurrency: int = Field(default=8, ge=1, le=64)  # 1 = strictly sequential

    # Proxy
    proxy: str | None = None  # Overrides system proxy discovery

    # Whether a catalog with zero matching endpoints fails the run
    empty_catalog_is_failure: bool = False

    model_config = {"env_prefix": "CONNCHECK_"}
