"""Unit tests for egress path types and the egress path resolver."""

import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from connectivity_check.errors import ProxyResolutionError
from connectivity_check.proxy.resolver import (
    EgressPathResolver,
    parse_winhttp_output,
    query_environment_proxy,
    query_system_proxy,
    query_winhttp_proxy,
    select_proxy_entry,
)
from connectivity_check.proxy.types import EgressKind, EgressPath, normalize_proxy_address

_NETSH_DIRECT = """
Current WinHTTP proxy settings:

    Direct access (no proxy server).
"""

_NETSH_PROXY = """
Current WinHTTP proxy settings:

    Proxy Server(s) :  10.0.0.1:8080
    Bypass List     :  *.local
"""

_NETSH_PER_SCHEME = """
Current WinHTTP proxy settings:

    Proxy Server(s) :  http=plain.corp:80;https=secure.corp:8443
    Bypass List     :  (none)
"""


class TestNormalizeProxyAddress:
    def test_bare_host_port_gets_http_scheme(self):
        assert normalize_proxy_address("10.0.0.1:8080") == "http://10.0.0.1:8080"

    def test_scheme_passes_through(self):
        assert normalize_proxy_address("https://proxy.corp:3128") == "https://proxy.corp:3128"

    def test_surrounding_whitespace_trimmed(self):
        assert normalize_proxy_address("  proxy.corp:80 \n") == "http://proxy.corp:80"

    def test_scheme_case_insensitive(self):
        assert normalize_proxy_address("HTTP://proxy.corp:80") == "HTTP://proxy.corp:80"

    @pytest.mark.parametrize("raw", ["socks5://127.0.0.1:1080", "ftp://10.0.0.1:21", "socks4://proxy.corp:1080"])
    def test_non_http_schemes_raise(self, raw):
        with pytest.raises(ValueError, match="Unsupported proxy scheme"):
            normalize_proxy_address(raw)

    @pytest.mark.parametrize("raw", ["", "   ", "http://", "http://:8080", "proxy.corp:notaport"])
    def test_invalid_values_raise(self, raw):
        with pytest.raises(ValueError):
            normalize_proxy_address(raw)


class TestEgressPath:
    def test_direct(self):
        egress = EgressPath.direct()
        assert egress.kind is EgressKind.DIRECT
        assert egress.proxy_address is None
        assert egress.is_proxied is False
        assert egress.describe() == "direct connection"

    def test_proxied_normalizes(self):
        egress = EgressPath.proxied("10.0.0.1:8080")
        assert egress.kind is EgressKind.PROXIED
        assert egress.proxy_address == "http://10.0.0.1:8080"
        assert egress.describe() == "proxy http://10.0.0.1:8080"

    def test_proxied_without_address_rejected(self):
        with pytest.raises(ValueError):
            EgressPath(kind=EgressKind.PROXIED)

    def test_direct_with_address_rejected(self):
        with pytest.raises(ValueError):
            EgressPath(kind=EgressKind.DIRECT, proxy_address="http://p:1")

    def test_is_immutable(self):
        egress = EgressPath.direct()
        with pytest.raises(AttributeError):
            egress.proxy_address = "http://p:1"  # type: ignore[misc]


class TestWinHttpParsing:
    def test_direct_access(self):
        assert parse_winhttp_output(_NETSH_DIRECT) is None

    def test_single_proxy(self):
        assert parse_winhttp_output(_NETSH_PROXY) == "10.0.0.1:8080"

    def test_per_scheme_prefers_https(self):
        assert parse_winhttp_output(_NETSH_PER_SCHEME) == "secure.corp:8443"

    def test_unrecognized_output_raises(self):
        with pytest.raises(ProxyResolutionError):
            parse_winhttp_output("Access is denied.")

    def test_select_http_when_no_https(self):
        assert select_proxy_entry("ftp=f:21;http=h:80") == "h:80"

    def test_select_first_entry_for_other_schemes(self):
        assert select_proxy_entry("socks=s:1080") == "s:1080"

    def test_select_plain_value(self):
        assert select_proxy_entry("proxy.corp:8080") == "proxy.corp:8080"

    def test_select_empty_raises(self):
        with pytest.raises(ProxyResolutionError):
            select_proxy_entry(";")


class TestSystemQueries:
    def test_winhttp_runs_netsh(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=_NETSH_PROXY, stderr="")
        with patch("connectivity_check.proxy.resolver.subprocess.run", return_value=completed) as run:
            assert query_winhttp_proxy() == "10.0.0.1:8080"
        assert run.call_args.args[0] == ["netsh", "winhttp", "show", "proxy"]

    def test_winhttp_missing_command_raises(self):
        with patch(
            "connectivity_check.proxy.resolver.subprocess.run",
            side_effect=FileNotFoundError("netsh"),
        ):
            with pytest.raises(ProxyResolutionError):
                query_winhttp_proxy()

    def test_winhttp_non_zero_exit_raises(self):
        with patch(
            "connectivity_check.proxy.resolver.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "netsh"),
        ):
            with pytest.raises(ProxyResolutionError):
                query_winhttp_proxy()

    def test_environment_prefers_https(self):
        proxies = {"http": "http://plain:80", "https": "http://secure:443"}
        with patch("connectivity_check.proxy.resolver.urllib.request.getproxies", return_value=proxies):
            assert query_environment_proxy() == "http://secure:443"

    def test_environment_falls_back_to_http(self):
        with patch(
            "connectivity_check.proxy.resolver.urllib.request.getproxies",
            return_value={"http": "plain:80", "no": "localhost"},
        ):
            assert query_environment_proxy() == "plain:80"

    def test_environment_without_proxy(self):
        with patch("connectivity_check.proxy.resolver.urllib.request.getproxies", return_value={}):
            assert query_environment_proxy() is None

    def test_environment_lookup_error_raises(self):
        with patch(
            "connectivity_check.proxy.resolver.urllib.request.getproxies",
            side_effect=OSError("registry unavailable"),
        ):
            with pytest.raises(ProxyResolutionError):
                query_environment_proxy()

    def test_windows_uses_winhttp(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("connectivity_check.proxy.resolver.sys.platform", "win32")
        with patch("connectivity_check.proxy.resolver.query_winhttp_proxy", return_value="p:1") as winhttp:
            assert query_system_proxy() == "p:1"
        winhttp.assert_called_once()

    def test_other_platforms_use_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("connectivity_check.proxy.resolver.sys.platform", "linux")
        with patch("connectivity_check.proxy.resolver.query_environment_proxy", return_value=None) as env:
            assert query_system_proxy() is None
        env.assert_called_once()


class TestEgressPathResolver:
    def test_no_proxy_is_direct(self):
        resolver = EgressPathResolver(query=lambda: None)
        assert resolver.resolve() == EgressPath.direct()

    def test_bare_proxy_is_scheme_qualified(self):
        resolver = EgressPathResolver(query=lambda: "10.0.0.1:8080")
        assert resolver.resolve() == EgressPath(EgressKind.PROXIED, "http://10.0.0.1:8080")

    def test_scheme_qualified_proxy_unchanged(self):
        resolver = EgressPathResolver(query=lambda: "https://proxy.corp:443")
        assert resolver.resolve().proxy_address == "https://proxy.corp:443"

    def test_override_skips_system_query(self):
        query = MagicMock(return_value=None)
        resolver = EgressPathResolver(proxy_override="proxy.corp:3128", query=query)
        assert resolver.resolve().proxy_address == "http://proxy.corp:3128"
        query.assert_not_called()

    def test_query_failure_degrades_to_direct(self, caplog: pytest.LogCaptureFixture):
        def _fail() -> str | None:
            raise ProxyResolutionError("netsh not found")

        resolver = EgressPathResolver(query=_fail)
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve() == EgressPath.direct()
        assert "netsh not found" in caplog.text

    def test_invalid_proxy_value_degrades_to_direct(self, caplog: pytest.LogCaptureFixture):
        resolver = EgressPathResolver(query=lambda: "http://:0")
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve().is_proxied is False
        assert "invalid proxy" in caplog.text.lower()

    @pytest.mark.parametrize("value", ["socks5://127.0.0.1:1080", "ftp://10.0.0.1:21"])
    def test_non_http_proxy_degrades_to_direct(self, value: str, caplog: pytest.LogCaptureFixture):
        resolver = EgressPathResolver(query=lambda: value)
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve() == EgressPath.direct()
        assert "unsupported proxy scheme" in caplog.text.lower()

    def test_non_http_override_degrades_to_direct(self):
        resolver = EgressPathResolver(proxy_override="socks5://proxy.corp:1080", query=lambda: None)
        assert resolver.resolve() == EgressPath.direct()
