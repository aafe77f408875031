"""
Sweep service - wires configuration, interfaces and the coordinator.

Runs one sweep per local interface (or per configured range) and prints
the report, or serves on-demand sweeps over a small HTTP API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from aiohttp import web

from ._types import NetworkInterface, NetworkRange, ScanResult
from .config import SweepConfig
from .coordinator import ScanCoordinator
from .interfaces import InterfaceEnumerationError, get_network_interfaces
from .probers import create_prober
from .report import BANNER, SCANNING_MESSAGE, format_devices, format_header, format_json
from .resolver import ReverseDNSResolver

logger = logging.getLogger(__name__)

SweepTarget = tuple[Optional[NetworkInterface], NetworkRange]


class SweepService:
    """
    Subnet sweep service.

    Resolves what to sweep, runs the coordinator over each target and
    keeps the most recent results in memory for the API.
    """

    def __init__(self, config: SweepConfig, coordinator: Optional[ScanCoordinator] = None):
        """
        Initialize sweep service.

        Args:
            config: Sweep configuration
            coordinator: Pre-built coordinator (built from config when None)
        """
        self.config = config
        self.coordinator = coordinator or ScanCoordinator(
            prober=create_prober(config.probe_method, config.probe_timeout_seconds),
            resolver=ReverseDNSResolver(),
            max_concurrency=config.max_concurrency,
            exclusion=config.exclusion_mode,
        )
        self._latest: list[ScanResult] = []
        self._running = False
        self._shutdown_event = asyncio.Event()

        self._api_app: Optional[web.Application] = None
        self._api_runner: Optional[web.AppRunner] = None

    @property
    def latest_results(self) -> list[ScanResult]:
        return list(self._latest)

    def sweep_targets(self) -> list[SweepTarget]:
        """
        Work out which networks to sweep.

        Configured ranges win; otherwise every usable local interface.

        Raises:
            InterfaceEnumerationError: If interfaces cannot be listed
            ValueError: If a configured range is malformed
        """
        if self.config.network_ranges:
            return [(None, r) for r in self.config.parsed_ranges()]

        interfaces = get_network_interfaces(self.config.interface)
        if not interfaces:
            logger.warning("No usable IPv4 interfaces found")
        return [(iface, iface.network_range) for iface in interfaces]

    async def run_sweeps(
        self,
        targets: Optional[list[SweepTarget]] = None,
    ) -> list[tuple[Optional[NetworkInterface], ScanResult]]:
        """Sweep each target in turn and remember the results."""
        if targets is None:
            targets = self.sweep_targets()

        results = []
        for iface, network_range in targets:
            if iface is not None:
                logger.info(f"Scanning {iface.name} ({iface.address}) on {network_range}")
            result = await self.coordinator.scan(network_range)
            results.append((iface, result))

        self._latest = [r for _, r in results]
        return results

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/scans", self._handle_trigger_scan)
        app.router.add_get("/api/scans/latest", self._handle_latest)
        app.router.add_get("/api/health", self._handle_health)
        return app

    async def start(self) -> None:
        """Start the API server and wait for shutdown."""
        logger.info("Starting sweep API server")
        self._running = True

        self._api_app = self.build_app()
        self._api_runner = web.AppRunner(self._api_app)
        await self._api_runner.setup()
        site = web.TCPSite(self._api_runner, self.config.api_host, self.config.api_port)
        await site.start()
        logger.info(f"API server started on {self.config.api_host}:{self.config.api_port}")

        await self._shutdown_event.wait()

    async def stop(self) -> None:
        """Stop the API server."""
        if not self._running:
            return
        logger.info("Stopping sweep API server")
        self._running = False
        self._shutdown_event.set()

        if self._api_runner:
            await self._api_runner.cleanup()
            self._api_runner = None

    async def _handle_trigger_scan(self, request: web.Request) -> web.Response:
        """Handle POST /api/scans."""
        try:
            data = await request.json() if request.body_exists else {}
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValueError("Request body must be a JSON object")
            ranges = data.get("ranges")

            if ranges:
                if isinstance(ranges, str):
                    ranges = [ranges]
                if not isinstance(ranges, list) or not all(isinstance(r, str) for r in ranges):
                    raise ValueError("'ranges' must be a CIDR string or a list of CIDR strings")
                targets = [(None, NetworkRange.from_cidr(r)) for r in ranges]
            else:
                targets = self.sweep_targets()

            results = await self.run_sweeps(targets)

            return web.json_response({
                "status": "completed",
                "scans": [r.to_dict() for _, r in results],
            })

        except ValueError as e:
            return web.json_response(
                {"status": "error", "message": str(e)},
                status=400,
            )
        except Exception as e:
            logger.error(f"On-demand sweep failed: {e}")
            return web.json_response(
                {"status": "error", "message": str(e)},
                status=500,
            )

    async def _handle_latest(self, request: web.Request) -> web.Response:
        """Handle GET /api/scans/latest."""
        if not self._latest:
            return web.json_response(
                {"status": "error", "message": "No sweep has run yet"},
                status=404,
            )
        return web.json_response({"scans": [r.to_dict() for r in self._latest]})

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Handle GET /api/health."""
        return web.json_response({
            "status": "ok",
            "service": "pingdisco",
            "probe_method": self.coordinator.prober.name,
            "max_concurrency": self.coordinator.max_concurrency,
            "last_devices_found": sum(r.count for r in self._latest),
        })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pingdisco",
        description="Discover reachable hosts on locally attached IPv4 subnets",
    )
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument("--interface", type=str, help="Only sweep this interface")
    parser.add_argument(
        "--range", dest="ranges", action="append", metavar="CIDR",
        help="Sweep this range instead of local interfaces (repeatable)",
    )
    parser.add_argument("--method", choices=["process", "icmp"], help="Liveness probe method")
    parser.add_argument("--timeout", type=float, help="Probe timeout in seconds")
    parser.add_argument("--concurrency", type=int, help="Max concurrent probes")
    parser.add_argument(
        "--full-host-range", action="store_true", default=None,
        help="Exclude network/broadcast by mask width instead of final octet",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    parser.add_argument("--host", type=str, help="API host")
    parser.add_argument("--port", type=int, help="API port")
    parser.add_argument("--log-level", type=str, help="Log level")
    return parser


def load_config(args: argparse.Namespace) -> SweepConfig:
    """Load configuration and apply command line overrides."""
    if args.config:
        config = SweepConfig.from_yaml(Path(args.config))
    else:
        config = SweepConfig.from_env()

    if args.ranges:
        config.network_ranges = args.ranges
    if args.interface:
        config.interface = args.interface
    if args.method:
        config.probe_method = args.method
    if args.timeout is not None:
        config.probe_timeout_seconds = args.timeout
    if args.concurrency is not None:
        config.max_concurrency = args.concurrency
    if args.full_host_range:
        config.full_host_range = True
    if args.host:
        config.api_host = args.host
    if args.port is not None:
        config.api_port = args.port
    if args.log_level:
        config.log_level = args.log_level

    return config


def _serve(service: SweepService) -> None:
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.ensure_future(service.stop())

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows event loops lack add_signal_handler
            pass

    try:
        loop.run_until_complete(service.start())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        loop.run_until_complete(service.stop())
        loop.close()


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the pingdisco command."""
    args = build_parser().parse_args(argv)
    config = load_config(args)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        return 1

    service = SweepService(config)

    if args.serve:
        _serve(service)
        return 0

    try:
        targets = service.sweep_targets()
    except InterfaceEnumerationError as e:
        print(f"Error getting network interfaces: {e}", file=sys.stderr)
        return 1

    if args.json:
        results = asyncio.run(service.run_sweeps(targets))
        print(format_json(r for _, r in results))
        return 0

    print(BANNER)
    asyncio.run(_print_sweeps(service, targets))

    return 0


async def _print_sweeps(service: SweepService, targets: list[SweepTarget]) -> None:
    """Sweep each target, printing its header before the sweep starts."""
    for iface, network_range in targets:
        print()
        print(format_header(network_range, iface))
        print(SCANNING_MESSAGE, flush=True)

        result = await service.coordinator.scan(network_range)
        print()
        print(format_devices(result))


if __name__ == "__main__":
    sys.exit(main())
