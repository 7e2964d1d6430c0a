"""Error hierarchy for the connectivity check.

All check-specific errors extend ConnectivityCheckError. Only catalog
retrieval failures are fatal to a run; proxy resolution failures are
recovered locally, and per-URL probe failures are reported as values
(see ``connectivity_check.probe.types.ProbeOutcome``), never raised.
"""

from __future__ import annotations


class ConnectivityCheckError(Exception):
    """Base error for all connectivity-check errors."""

    exit_code: int = 2
    message: str = "Connectivity check failed"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class FetchError(ConnectivityCheckError):
    """The endpoint catalog could not be retrieved or parsed."""

    exit_code = 2
    message = "Endpoint catalog could not be retrieved"


class ProxyResolutionError(ConnectivityCheckError):
    """The system proxy configuration could not be queried."""

    message = "System proxy configuration could not be read"
