"""
Sweep configuration.

Settings come from defaults, a YAML file, or environment variables, and
can be overridden from the command line.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from ._types import ExclusionMode, NetworkRange, ProbeMethod
from .coordinator import DEFAULT_MAX_CONCURRENCY
from .probers import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class SweepConfig:
    """Subnet sweep configuration."""

    # Explicit CIDR ranges; empty means sweep every local interface
    network_ranges: list[str] = field(default_factory=list)
    interface: Optional[str] = None

    # Probing
    probe_method: str = ProbeMethod.PROCESS.value
    probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    # Skip all-zero/all-one host bits instead of x.x.x.0 and x.x.x.255
    full_host_range: bool = False

    # API server (for on-demand sweeps)
    api_host: str = "127.0.0.1"
    api_port: int = 8083

    # Logging
    log_level: str = "INFO"

    @property
    def exclusion_mode(self) -> ExclusionMode:
        if self.full_host_range:
            return ExclusionMode.HOST_BITS
        return ExclusionMode.FINAL_OCTET

    @classmethod
    def from_env(cls) -> "SweepConfig":
        """Load configuration from environment variables."""
        config = cls()

        ranges = os.getenv("PINGDISCO_RANGES", "")
        if ranges:
            config.network_ranges = [r.strip() for r in ranges.split(",") if r.strip()]

        config.interface = os.getenv("PINGDISCO_INTERFACE") or None
        config.probe_method = os.getenv("PINGDISCO_METHOD", config.probe_method).lower()
        config.probe_timeout_seconds = float(
            os.getenv("PINGDISCO_TIMEOUT", str(config.probe_timeout_seconds))
        )
        config.max_concurrency = int(
            os.getenv("PINGDISCO_CONCURRENCY", str(config.max_concurrency))
        )
        config.full_host_range = (
            os.getenv("PINGDISCO_FULL_HOST_RANGE", "false").lower() in _TRUE_VALUES
        )

        config.api_host = os.getenv("PINGDISCO_API_HOST", config.api_host)
        config.api_port = int(os.getenv("PINGDISCO_API_PORT", str(config.api_port)))

        config.log_level = os.getenv("LOG_LEVEL", "INFO")

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "SweepConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "network_ranges" in data:
            config.network_ranges = list(data["network_ranges"] or [])
        config.interface = data.get("interface")

        if "probe" in data:
            p = data["probe"] or {}
            config.probe_method = str(p.get("method", config.probe_method)).lower()
            config.probe_timeout_seconds = float(p.get("timeout", config.probe_timeout_seconds))
            config.max_concurrency = int(p.get("concurrency", config.max_concurrency))
            config.full_host_range = bool(p.get("full_host_range", False))

        if "api" in data:
            a = data["api"] or {}
            config.api_host = a.get("host", "127.0.0.1")
            config.api_port = a.get("port", 8083)

        config.log_level = data.get("log_level", "INFO")

        return config

    def parsed_ranges(self) -> list[NetworkRange]:
        """Configured ranges as NetworkRange values. Raises ValueError on bad CIDR."""
        return [NetworkRange.from_cidr(r) for r in self.network_ranges]

    def validate(self) -> list[str]:
        """Validate configuration, returning list of errors."""
        errors = []

        for cidr in self.network_ranges:
            try:
                NetworkRange.from_cidr(cidr)
            except ValueError as e:
                errors.append(f"Invalid network range {cidr!r}: {e}")

        try:
            ProbeMethod(self.probe_method)
        except ValueError:
            choices = ", ".join(m.value for m in ProbeMethod)
            errors.append(f"Unknown probe method {self.probe_method!r} (expected {choices})")

        if self.probe_timeout_seconds <= 0:
            errors.append(f"Probe timeout must be positive: {self.probe_timeout_seconds}")

        if self.max_concurrency < 1:
            errors.append(f"Concurrency must be at least 1: {self.max_concurrency}")

        if not 0 < int(self.api_port) < 65536:
            errors.append(f"Invalid API port: {self.api_port}")

        return errors


# Example pingdisco.yaml:
"""
network_ranges:
  - "192.168.1.0/24"

interface: null

probe:
  method: process      # process or icmp
  timeout: 1.0
  concurrency: 64
  full_host_range: false

api:
  host: "127.0.0.1"
  port: 8083

log_level: "INFO"
"""
