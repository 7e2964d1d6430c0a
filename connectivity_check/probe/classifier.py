"""Transport error classification.

Errors are matched against an ordered list of rules; the first matching
rule decides the failure reason. A rule matches on exception type or errno
anywhere in the exception chain, or on a case-insensitive substring of the
chained messages. Errnos embedded in message text as ``[Errno N]`` count
too: asyncio folds the per-address failures of a multi-address connect
into one ``OSError`` whose own errno is None. Anything unmatched falls back
to the caller's default, with the first sentence of the error message as
detail.
"""

from __future__ import annotations

import errno
import re
import socket
import ssl
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import httpx

from connectivity_check.probe.types import FailureReason


@dataclass(frozen=True)
class ClassificationRule:
    """Maps matching errors to a failure reason."""

    reason: FailureReason
    exc_types: tuple[type[BaseException], ...] = ()
    errnos: frozenset[int] = frozenset()
    patterns: tuple[str, ...] = ()

    def matches(
        self,
        chain: Sequence[BaseException],
        message: str,
        errnos: frozenset[int] = frozenset(),
    ) -> bool:
        if any(isinstance(exc, self.exc_types) for exc in chain):
            return True
        if self.errnos & errnos:
            return True
        return any(pattern in message for pattern in self.patterns)


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        FailureReason.TIMEOUT,
        exc_types=(httpx.TimeoutException, TimeoutError, socket.timeout),
        errnos=frozenset({errno.ETIMEDOUT}),
        patterns=("timed out", "timeout"),
    ),
    ClassificationRule(
        FailureReason.PROXY,
        exc_types=(httpx.ProxyError,),
        patterns=("proxy",),
    ),
    ClassificationRule(
        FailureReason.DNS_RESOLUTION,
        exc_types=(socket.gaierror,),
        patterns=(
            "name or service not known",
            "nodename nor servname",
            "getaddrinfo failed",
            "name resolution",
            "no such host",
            "could not resolve",
            "no address associated",
        ),
    ),
    ClassificationRule(
        FailureReason.HOST_UNREACHABLE,
        errnos=frozenset({errno.ENETUNREACH, errno.EHOSTUNREACH}),
        patterns=("network is unreachable", "no route to host", "host is unreachable"),
    ),
    ClassificationRule(
        FailureReason.CONNECTION_REFUSED,
        exc_types=(ConnectionRefusedError,),
        errnos=frozenset({errno.ECONNREFUSED}),
        patterns=("connection refused", "actively refused"),
    ),
    ClassificationRule(
        FailureReason.TLS,
        exc_types=(ssl.SSLError,),
        patterns=("ssl", "tls", "certificate"),
    ),
)


_EMBEDDED_ERRNO = re.compile(r"\[errno (-?\d+)\]")


def exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` and its causes/contexts, guarding against cycles."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def chain_errnos(chain: Sequence[BaseException], message: str) -> frozenset[int]:
    """Collect errnos from the chain and from ``[Errno N]`` markers in ``message``."""
    found = {exc.errno for exc in chain if isinstance(exc, OSError) and isinstance(exc.errno, int)}
    found.update(int(value) for value in _EMBEDDED_ERRNO.findall(message))
    return frozenset(found)


def first_sentence(text: str) -> str:
    """Return the first sentence (or first line) of an error message."""
    sentence = text.strip().split("\n", 1)[0]
    sentence = sentence.split(". ", 1)[0]
    return sentence.strip().rstrip(".")


def classify_error(
    exc: BaseException,
    default: FailureReason = FailureReason.UNCLASSIFIED,
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
) -> tuple[FailureReason, str]:
    """Classify a transport error into ``(reason, detail)``."""
    chain = list(exception_chain(exc))
    message = " ".join(str(item) for item in chain).lower()
    errnos = chain_errnos(chain, message)

    sentence = next(
        (first_sentence(str(item)) for item in chain if str(item).strip()),
        "",
    ) or type(exc).__name__

    for rule in rules:
        if rule.matches(chain, message, errnos):
            return rule.reason, f"{rule.reason.label}: {sentence}"

    if default is FailureReason.UNCLASSIFIED:
        return default, sentence
    return default, f"{default.label}: {sentence}"
