"""Probe outcome data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureReason(str, Enum):
    """Categorical cause of a failed probe."""

    DNS_RESOLUTION = "dns_resolution"
    HOST_UNREACHABLE = "host_unreachable"
    TCP_CONNECT = "tcp_connect"
    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    TLS = "tls"
    PROXY = "proxy"
    HTTP_STATUS = "http_status"
    UNCLASSIFIED = "unclassified"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[FailureReason, str] = {
    FailureReason.DNS_RESOLUTION: "DNS resolution failed",
    FailureReason.HOST_UNREACHABLE: "Host unreachable",
    FailureReason.TCP_CONNECT: "TCP connection failed",
    FailureReason.TIMEOUT: "Connection timed out",
    FailureReason.CONNECTION_REFUSED: "Connection refused",
    FailureReason.TLS: "TLS/certificate error",
    FailureReason.PROXY: "Proxy error",
    FailureReason.HTTP_STATUS: "Unexpected HTTP status",
    FailureReason.UNCLASSIFIED: "Unclassified error",
}


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of testing one hostname.

    A failed outcome always carries a reason and a non-empty detail.
    """

    url: str
    success: bool
    failure_reason: FailureReason | None = None
    detail: str = ""
    status_code: int | None = None
    latency_ms: float | None = None

    def __post_init__(self) -> None:
        if self.success and self.failure_reason is not None:
            raise ValueError("A successful probe cannot carry a failure reason")
        if not self.success and (self.failure_reason is None or not self.detail):
            raise ValueError("A failed probe needs a failure reason and detail")

    @classmethod
    def ok(
        cls,
        url: str,
        *,
        status_code: int | None = None,
        latency_ms: float | None = None,
    ) -> ProbeOutcome:
        return cls(url=url, success=True, status_code=status_code, latency_ms=latency_ms)

    @classmethod
    def failed(
        cls,
        url: str,
        reason: FailureReason,
        detail: str | None = None,
        *,
        status_code: int | None = None,
    ) -> ProbeOutcome:
        return cls(
            url=url,
            success=False,
            failure_reason=reason,
            detail=detail or reason.label,
            status_code=status_code,
        )
