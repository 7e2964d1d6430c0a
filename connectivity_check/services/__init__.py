"""Orchestration services."""

from connectivity_check.services.runner import (
    CheckReport,
    ConnectivityCheckRunner,
    GroupResult,
    Verdict,
)

__all__ = ["CheckReport", "ConnectivityCheckRunner", "GroupResult", "Verdict"]
