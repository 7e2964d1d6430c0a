"""Egress path resolution from the system proxy configuration.

On Windows the effective WinHTTP proxy is read with ``netsh winhttp show
proxy``, which is what system services use for enrollment traffic. Other
platforms fall back to the proxy map Python derives from the environment
and OS settings (``urllib.request.getproxies``).

Resolution never fails a run: if the system cannot be queried the
resolver logs a warning and reports a direct path, since testing direct
connectivity is still informative.
"""

from __future__ import annotations

import logging
import re
import subprocess
import sys
import urllib.request
from collections.abc import Callable

from connectivity_check.errors import ProxyResolutionError
from connectivity_check.proxy.types import EgressPath

logger = logging.getLogger(__name__)

_NETSH_COMMAND = ["netsh", "winhttp", "show", "proxy"]
_NETSH_TIMEOUT_SECONDS = 10

_DIRECT_ACCESS_RE = re.compile(r"direct access\s*\(no proxy server\)", re.IGNORECASE)
_PROXY_SERVER_RE = re.compile(r"proxy server\(s\)\s*:\s*(?P<value>\S+)", re.IGNORECASE)

# Scheme preference when a per-scheme list such as "http=a:80;https=b:443" is configured
_SCHEME_PREFERENCE = ("https", "http")


def select_proxy_entry(value: str) -> str:
    """Pick the proxy to use from a WinHTTP proxy-server value.

    A plain ``host:port`` is returned as-is. For per-scheme lists the
    ``https=`` entry wins, then ``http=``, then the first entry.
    """
    entries = [part.strip() for part in value.split(";") if part.strip()]
    if not entries:
        raise ProxyResolutionError("Empty WinHTTP proxy server value")

    by_scheme: dict[str, str] = {}
    for entry in entries:
        scheme, sep, address = entry.partition("=")
        if sep and address:
            by_scheme.setdefault(scheme.strip().lower(), address.strip())

    for scheme in _SCHEME_PREFERENCE:
        if scheme in by_scheme:
            return by_scheme[scheme]

    _, sep, address = entries[0].partition("=")
    return address.strip() if sep and address.strip() else entries[0]


def parse_winhttp_output(output: str) -> str | None:
    """Extract the proxy server from ``netsh winhttp show proxy`` output.

    Returns None for the direct-access sentinel.
    """
    if _DIRECT_ACCESS_RE.search(output):
        return None

    match = _PROXY_SERVER_RE.search(output)
    if match is None:
        raise ProxyResolutionError("Unrecognized netsh winhttp output")
    return select_proxy_entry(match.group("value"))


def query_winhttp_proxy() -> str | None:
    """Query the WinHTTP proxy configured for system services."""
    try:
        completed = subprocess.run(
            _NETSH_COMMAND,
            capture_output=True,
            text=True,
            timeout=_NETSH_TIMEOUT_SECONDS,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise ProxyResolutionError(f"netsh winhttp query failed: {exc}") from exc
    return parse_winhttp_output(completed.stdout)


def query_environment_proxy() -> str | None:
    """Query the proxy Python derives from environment variables and OS settings."""
    try:
        proxies = urllib.request.getproxies()
    except (OSError, ValueError) as exc:
        raise ProxyResolutionError(f"System proxy lookup failed: {exc}") from exc

    for scheme in _SCHEME_PREFERENCE:
        if proxies.get(scheme):
            return proxies[scheme]
    return None


def query_system_proxy() -> str | None:
    """Return the raw configured proxy value for this platform, or None for direct."""
    if sys.platform == "win32":
        return query_winhttp_proxy()
    return query_environment_proxy()


class EgressPathResolver:
    """Resolves whether outbound traffic is direct or routed through an HTTP proxy.

    Parameters
    ----------
    proxy_override:
        Explicit proxy value; when set the system is not queried.
    query:
        Callable returning the raw system proxy value (None for direct).
        Raises ``ProxyResolutionError`` when the system cannot be queried.
    """

    def __init__(
        self,
        proxy_override: str | None = None,
        query: Callable[[], str | None] = query_system_proxy,
    ) -> None:
        self._proxy_override = proxy_override
        self._query = query

    def resolve(self) -> EgressPath:
        """Resolve the egress path, degrading to direct on any query failure."""
        if self._proxy_override:
            raw: str | None = self._proxy_override
        else:
            try:
                raw = self._query()
            except ProxyResolutionError as exc:
                logger.warning("Proxy resolution failed, assuming direct access: %s", exc.message)
                return EgressPath.direct()

        if not raw:
            logger.info("No proxy configured, using direct connections")
            return EgressPath.direct()

        try:
            egress = EgressPath.proxied(raw)
        except ValueError as exc:
            logger.warning("Ignoring invalid proxy value, assuming direct access: %s", exc)
            return EgressPath.direct()

        logger.info("Using proxy", extra={"proxy_used": egress.proxy_address})
        return egress
