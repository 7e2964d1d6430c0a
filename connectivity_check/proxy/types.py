"""Egress path data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse


PROXY_SCHEMES = frozenset({"http", "https"})


class EgressKind(str, Enum):
    """How outbound traffic leaves the device."""

    DIRECT = "direct"
    PROXIED = "proxied"


def normalize_proxy_address(raw: str) -> str:
    """Return a ``scheme://host[:port]`` proxy address.

    Values that already carry an ``http`` or ``https`` scheme pass through
    unchanged; bare ``host:port`` values are prefixed with ``http://``.

    Raises ``ValueError`` if no host can be extracted or the scheme is not
    an HTTP proxy scheme.
    """
    address = raw.strip()
    if not address:
        raise ValueError("Proxy address is empty")

    if "://" not in address:
        address = f"http://{address}"

    try:
        parsed = urlparse(address)
        parsed.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise ValueError(f"Invalid proxy address: {raw!r}") from exc

    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"Invalid proxy address: {raw!r}")
    if parsed.scheme.lower() not in PROXY_SCHEMES:
        raise ValueError(f"Unsupported proxy scheme {parsed.scheme!r} in {raw!r}")
    return address


@dataclass(frozen=True)
class EgressPath:
    """The resolved route outbound connections take: direct, or via an HTTP proxy."""

    kind: EgressKind
    proxy_address: str | None = None

    def __post_init__(self) -> None:
        if self.kind is EgressKind.PROXIED and not self.proxy_address:
            raise ValueError("A proxied egress path needs a proxy address")
        if self.kind is EgressKind.DIRECT and self.proxy_address is not None:
            raise ValueError("A direct egress path cannot carry a proxy address")

    @classmethod
    def direct(cls) -> EgressPath:
        return cls(kind=EgressKind.DIRECT)

    @classmethod
    def proxied(cls, address: str) -> EgressPath:
        """Build a proxied path, coercing bare ``host:port`` to ``http://host:port``."""
        return cls(kind=EgressKind.PROXIED, proxy_address=normalize_proxy_address(address))

    @property
    def is_proxied(self) -> bool:
        return self.kind is EgressKind.PROXIED

    def describe(self) -> str:
        if self.is_proxied:
            return f"proxy {self.proxy_address}"
        return "direct connection"
