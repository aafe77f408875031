"""Tests for liveness probes."""

import asyncio
import ipaddress
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pingdisco.probers import (
    ICMPSocketProber,
    LivenessProber,
    PingProcessProber,
    build_ping_command,
    create_prober,
)


class TestBuildPingCommand:
    """Tests for platform ping command lines."""

    def test_linux(self):
        cmd = build_ping_command("192.168.1.1", 1.0, system="Linux")
        assert cmd == ["ping", "-c", "1", "-W", "1", "192.168.1.1"]

    def test_windows(self):
        cmd = build_ping_command("192.168.1.1", 1.0, system="Windows")
        assert cmd == ["ping", "-n", "1", "-w", "1000", "192.168.1.1"]

    def test_macos_uses_milliseconds(self):
        cmd = build_ping_command("192.168.1.1", 1.0, system="Darwin")
        assert cmd == ["ping", "-c", "1", "-W", "1000", "192.168.1.1"]

    def test_linux_rounds_fractional_timeout_up(self):
        cmd = build_ping_command("10.0.0.1", 0.3, system="Linux")
        assert cmd[cmd.index("-W") + 1] == "1"

        cmd = build_ping_command("10.0.0.1", 2.5, system="Linux")
        assert cmd[cmd.index("-W") + 1] == "3"


def _fake_process(returncode):
    proc = MagicMock()
    proc.wait = AsyncMock(return_value=returncode)
    return proc


class TestPingProcessProber:
    """Tests for the external ping probe."""

    def test_name(self):
        assert PingProcessProber().name == "process"

    @pytest.mark.asyncio
    async def test_zero_exit_is_reachable(self):
        prober = PingProcessProber()
        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_fake_process(0)),
        ) as mock_exec:
            assert await prober.probe(ipaddress.IPv4Address("192.168.1.1")) is True

        args = mock_exec.call_args[0]
        assert args[0] == "ping"
        assert args[-1] == "192.168.1.1"

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_unreachable(self):
        prober = PingProcessProber()
        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_fake_process(1)),
        ):
            assert await prober.probe("192.168.1.2") is False

    @pytest.mark.asyncio
    async def test_missing_binary_is_unreachable(self):
        """A missing ping tool must not surface as an error."""
        prober = PingProcessProber(executable="definitely-not-ping")
        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("no such file")),
        ):
            assert await prober.probe("192.168.1.3") is False

    @pytest.mark.asyncio
    async def test_permission_denied_is_unreachable(self):
        prober = PingProcessProber()
        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=PermissionError("denied")),
        ):
            assert await prober.probe("192.168.1.4") is False

    @pytest.mark.asyncio
    async def test_hung_process_is_killed(self, monkeypatch):
        monkeypatch.setattr("pingdisco.probers.process.PROCESS_GRACE_SECONDS", 0.0)
        prober = PingProcessProber(timeout=0.05)

        killed = asyncio.Event()
        proc = MagicMock()
        proc.kill = MagicMock(side_effect=lambda: killed.set())

        async def wait():
            await killed.wait()
            return -9

        proc.wait = wait

        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            assert await prober.probe("192.168.1.5") is False

        proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_cancelled_sweep_kills_ping(self):
        prober = PingProcessProber(timeout=30)

        started = asyncio.Event()
        killed = asyncio.Event()
        proc = MagicMock()
        proc.returncode = None
        proc.kill = MagicMock(side_effect=lambda: killed.set())

        async def wait():
            started.set()
            await asyncio.Event().wait()

        proc.wait = wait

        with patch(
            "pingdisco.probers.process.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            task = asyncio.create_task(prober.probe("192.168.1.5"))
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        proc.kill.assert_called_once()
        assert killed.is_set()

    @pytest.mark.asyncio
    async def test_is_available_checks_path(self):
        with patch("pingdisco.probers.process.shutil.which", return_value=None):
            assert await PingProcessProber().is_available() is False
        with patch("pingdisco.probers.process.shutil.which", return_value="/bin/ping"):
            assert await PingProcessProber().is_available() is True


class TestICMPSocketProber:
    """Tests for the native ICMP probe."""

    def test_name(self):
        assert ICMPSocketProber().name == "icmp"

    @pytest.mark.asyncio
    async def test_reply_is_reachable(self):
        prober = ICMPSocketProber(timeout=0.5)
        with patch("pingdisco.probers.icmp.ping3.ping", return_value=0.0042) as mock_ping:
            assert await prober.probe(ipaddress.IPv4Address("10.0.0.1")) is True

        mock_ping.assert_called_once_with("10.0.0.1", timeout=0.5)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [None, False])
    async def test_timeout_or_error_is_unreachable(self, reply):
        with patch("pingdisco.probers.icmp.ping3.ping", return_value=reply):
            assert await ICMPSocketProber().probe("10.0.0.2") is False

    @pytest.mark.asyncio
    async def test_permission_error_is_unreachable(self):
        with patch("pingdisco.probers.icmp.ping3.ping", side_effect=PermissionError("raw socket")):
            assert await ICMPSocketProber().probe("10.0.0.3") is False


class TestCreateProber:
    """Tests for configuration-driven probe selection."""

    def test_default_is_process(self):
        prober = create_prober()
        assert isinstance(prober, PingProcessProber)
        assert prober.timeout == 1.0

    def test_icmp(self):
        prober = create_prober("icmp", timeout=2.0)
        assert isinstance(prober, ICMPSocketProber)
        assert prober.timeout == 2.0

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            create_prober("carrier-pigeon")

    def test_all_variants_share_interface(self):
        for method in ("process", "icmp"):
            assert isinstance(create_prober(method), LivenessProber)
