"""Connectivity probing package — TCP and proxied HTTPS probes with error classification."""

from connectivity_check.probe.classifier import ClassificationRule, classify_error
from connectivity_check.probe.prober import ConnectivityProber
from connectivity_check.probe.types import FailureReason, ProbeOutcome

__all__ = [
    "ClassificationRule",
    "ConnectivityProber",
    "FailureReason",
    "ProbeOutcome",
    "classify_error",
]
