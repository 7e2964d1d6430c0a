"""Single-endpoint connectivity probes.

Direct egress: resolve the hostname, then open a raw TCP connection to
port 443. Proxied egress: issue an HTTPS GET through the proxy and accept
only status 200. One attempt per URL, bounded by a timeout; failures are
returned as ``ProbeOutcome`` values, never raised.
"""

from __future__ import annotations

import asyncio
import contextlib
import socket
import time

import httpx

from connectivity_check.probe.classifier import classify_error, first_sentence
from connectivity_check.probe.types import FailureReason, ProbeOutcome
from connectivity_check.proxy.types import EgressPath


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 1)


class ConnectivityProber:
    """Tests reachability of one hostname over the resolved egress path.

    Parameters
    ----------
    port:
        TCP port for direct probes (default 443).
    tcp_timeout_seconds:
        Bound on DNS resolution and on the TCP handshake (default 10).
    http_timeout_seconds:
        Bound on proxied HTTPS requests (default 30).
    """

    def __init__(
        self,
        port: int = 443,
        tcp_timeout_seconds: float = 10.0,
        http_timeout_seconds: float = 30.0,
    ) -> None:
        self._port = port
        self._tcp_timeout_seconds = tcp_timeout_seconds
        self._http_timeout_seconds = http_timeout_seconds

    async def probe(self, url: str, egress: EgressPath) -> ProbeOutcome:
        """Probe ``url`` over ``egress``."""
        if egress.is_proxied and egress.proxy_address:
            return await self.probe_via_proxy(url, egress.proxy_address)
        return await self.probe_tcp(url)

    # ------------------------------------------------------------------
    # Direct
    # ------------------------------------------------------------------

    async def probe_tcp(self, url: str) -> ProbeOutcome:
        """Open and immediately close a TCP connection to ``url``."""
        loop = asyncio.get_running_loop()
        started = time.monotonic()

        try:
            await asyncio.wait_for(
                loop.getaddrinfo(url, self._port, type=socket.SOCK_STREAM),
                timeout=self._tcp_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ProbeOutcome.failed(
                url, FailureReason.DNS_RESOLUTION, f"DNS lookup for {url} timed out"
            )
        except (OSError, ValueError) as exc:
            return ProbeOutcome.failed(
                url,
                FailureReason.DNS_RESOLUTION,
                f"Could not resolve {url}: {getattr(exc, 'strerror', None) or exc}",
            )

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(url, self._port),
                timeout=self._tcp_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ProbeOutcome.failed(
                url,
                FailureReason.TIMEOUT,
                f"TCP connection to {url}:{self._port} timed out "
                f"after {self._tcp_timeout_seconds:g}s",
            )
        except OSError as exc:
            reason, detail = classify_error(exc, default=FailureReason.TCP_CONNECT)
            return ProbeOutcome.failed(url, reason, detail)

        latency_ms = _elapsed_ms(started)
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()
        return ProbeOutcome.ok(url, latency_ms=latency_ms)

    # ------------------------------------------------------------------
    # Proxied
    # ------------------------------------------------------------------

    async def probe_via_proxy(self, url: str, proxy_address: str) -> ProbeOutcome:
        """GET ``https://url`` through ``proxy_address``; only HTTP 200 passes."""
        started = time.monotonic()

        try:
            http_client = httpx.AsyncClient(
                proxy=proxy_address,
                timeout=httpx.Timeout(self._http_timeout_seconds),
                follow_redirects=True,
                trust_env=False,
            )
        except (ValueError, ImportError) as exc:
            # Unsupported proxy scheme, or a transport extra that is not installed
            detail = first_sentence(str(exc)) or type(exc).__name__
            return ProbeOutcome.failed(
                url,
                FailureReason.PROXY,
                f"{FailureReason.PROXY.label}: cannot use {proxy_address}: {detail}",
            )

        try:
            async with http_client as client:
                response = await client.get(f"https://{url}")
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            reason, detail = classify_error(exc)
            return ProbeOutcome.failed(url, reason, detail)

        status = response.status_code
        if status == 200:
            return ProbeOutcome.ok(url, status_code=status, latency_ms=_elapsed_ms(started))

        description = response.reason_phrase or httpx.codes.get_reason_phrase(status) or "Unknown"
        return ProbeOutcome.failed(
            url,
            FailureReason.HTTP_STATUS,
            f"HTTP {status} - {description}",
            status_code=status,
        )
