"""Tests for hostname resolution."""

import ipaddress
import socket
from unittest.mock import patch

import pytest

from pingdisco.resolver import ReverseDNSResolver, clean_hostname


class TestCleanHostname:
    """Tests for trailing-dot stripping."""

    def test_strips_trailing_dot(self):
        assert clean_hostname("gateway.lan.") == "gateway.lan"

    def test_leaves_plain_name(self):
        assert clean_hostname("gateway.lan") == "gateway.lan"

    def test_empty(self):
        assert clean_hostname("") == ""
        assert clean_hostname(None) == ""


class TestReverseDNSResolver:
    """Tests for system reverse DNS resolution."""

    @pytest.mark.asyncio
    async def test_first_name_used(self):
        with patch(
            "pingdisco.resolver.socket.gethostbyaddr",
            return_value=("router.home.", ["alias.home"], ["192.168.1.1"]),
        ) as mock_lookup:
            name = await ReverseDNSResolver().resolve(ipaddress.IPv4Address("192.168.1.1"))

        assert name == "router.home"
        mock_lookup.assert_called_once_with("192.168.1.1")

    @pytest.mark.asyncio
    async def test_falls_back_to_alias(self):
        with patch(
            "pingdisco.resolver.socket.gethostbyaddr",
            return_value=("", ["nas.local."], ["192.168.1.20"]),
        ):
            assert await ReverseDNSResolver().resolve("192.168.1.20") == "nas.local"

    @pytest.mark.asyncio
    async def test_empty_result(self):
        with patch(
            "pingdisco.resolver.socket.gethostbyaddr",
            return_value=("", [], ["192.168.1.21"]),
        ):
            assert await ReverseDNSResolver().resolve("192.168.1.21") == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        socket.herror(1, "Unknown host"),
        socket.gaierror(-2, "Name or service not known"),
        OSError("resolver down"),
    ])
    async def test_lookup_failure_means_no_name(self, error):
        with patch("pingdisco.resolver.socket.gethostbyaddr", side_effect=error):
            assert await ReverseDNSResolver().resolve("192.168.1.22") == ""
