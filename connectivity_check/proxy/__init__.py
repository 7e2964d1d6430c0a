"""Egress path package — direct vs. proxied outbound traffic."""

from connectivity_check.proxy.resolver import EgressPathResolver
from connectivity_check.proxy.types import EgressKind, EgressPath, normalize_proxy_address

__all__ = ["EgressKind", "EgressPath", "EgressPathResolver", "normalize_proxy_address"]
