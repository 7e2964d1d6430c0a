"""Shared test fixtures for the connectivity check test suite."""

from __future__ import annotations

import os

import pytest

from connectivity_check.config.settings import CheckSettings
from connectivity_check.probe.prober import ConnectivityProber


# ---------------------------------------------------------------------------
# Keep the host environment out of settings and proxy discovery
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CONNCHECK_* and proxy variables inherited from the host."""
    for key in list(os.environ):
        if key.startswith("CONNCHECK_") or key.lower() in {
            "http_proxy",
            "https_proxy",
            "all_proxy",
            "no_proxy",
        }:
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> CheckSettings:
    """Test settings with short timeouts."""
    return CheckSettings(
        catalog_timeout_seconds=5,
        tcp_timeout_seconds=2,
        http_timeout_seconds=5,
        max_concurrency=4,
    )


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def prober(settings: CheckSettings) -> ConnectivityProber:
    return ConnectivityProber(
        port=settings.probe_port,
        tcp_timeout_seconds=settings.tcp_timeout_seconds,
        http_timeout_seconds=settings.http_timeout_seconds,
    )


@pytest.fixture
def catalog_payload() -> list[dict]:
    """A trimmed endpoint-list service response."""
    return [
        {
            "id": 163,
            "serviceArea": "MEM",
            "serviceAreaDisplayName": "Microsoft Intune",
            "urls": [
                "*.manage.microsoft.com",
                "manage.microsoft.com",
                "*.dm.microsoft.com",
            ],
            "tcpPorts": "80,443",
            "required": True,
        },
        {
            "id": 170,
            "serviceArea": "MEM",
            "urls": [
                "swda01-mscdn.manage.microsoft.com",
                "naprodimedatapri.azureedge.net",
                "euprodimedatapri.azureedge.net",
                "approdimedatapri.azureedge.net",
            ],
        },
        {
            "id": 172,
            "serviceArea": "MEM",
            "ips": ["13.107.6.0/24"],
        },
        {
            "id": 46,
            "serviceArea": "Common",
            "urls": ["login.microsoftonline.com"],
        },
        {
            "id": 999,
            "serviceArea": "MEM",
            "urls": ["*.new-service.microsoft.com"],
        },
    ]
