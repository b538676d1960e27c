"""
Controller configuration from environment variables.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from typing import Optional

# Host machine names -> registry architecture names
_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def host_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


@dataclass
class ControllerConfig:
    store_path: str
    registry_path: str
    arch: str
    provisioner: str
    namespace: str
    metrics_textfile: Optional[str]

    @staticmethod
    def from_env() -> "ControllerConfig":
        provisioner = os.getenv("NODECFG_PROVISIONER", "store").lower()
        if provisioner not in ("store", "kubernetes"):
            raise ValueError(f"NODECFG_PROVISIONER must be 'store' or 'kubernetes', got {provisioner!r}")
        return ControllerConfig(
            store_path=os.getenv("NODECFG_STORE_PATH", "/var/lib/nodecfg/device-events.log"),
            registry_path=os.getenv("NODECFG_REGISTRY_PATH", "/etc/nodecfg/registry.json"),
            arch=os.getenv("NODECFG_ARCH") or host_arch(),
            provisioner=provisioner,
            namespace=os.getenv("NODECFG_NAMESPACE", "default"),
            metrics_textfile=os.getenv("NODECFG_METRICS_TEXTFILE") or None,
        )
