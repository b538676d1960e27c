"""
Domain records read by the controller.

All records are immutable. Use with_config() to derive an updated device.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .configstate import ConfigState


@dataclass(frozen=True)
class DeviceRecord:
    """
    Registered node.

    Fields:
        id: Device id within its organization
        org: Organization the device is registered with
        token: Registration token presented to the registry
        name: Human readable name
        pattern: Pattern name within org (None = no pattern)
        config: Current configuration state
    """
    id: str
    org: str
    token: str
    name: str = ""
    pattern: Optional[str] = None
    config: ConfigState = field(default_factory=ConfigState)

    def qualified_id(self) -> str:
        """Requester id presented to the registry (org/id)."""
        return f"{self.org}/{self.id}"

    def with_config(self, config: ConfigState) -> "DeviceRecord":
        return replace(self, config=config)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "org": self.org,
            "token": self.token,
            "name": self.name,
            "pattern": self.pattern,
            "config": self.config.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DeviceRecord":
        return DeviceRecord(
            id=data["id"],
            org=data["org"],
            token=data.get("token", ""),
            name=data.get("name", ""),
            pattern=data.get("pattern") or None,
            config=ConfigState.from_dict(data.get("config", {})),
        )


@dataclass(frozen=True)
class WorkloadChoice:
    version: str


@dataclass(frozen=True)
class Workload:
    url: str
    org: str
    arch: str
    versions: List[WorkloadChoice] = field(default_factory=list)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Workload":
        return Workload(
            url=data["url"],
            org=data["org"],
            arch=data["arch"],
            versions=[WorkloadChoice(version=v["version"]) for v in data.get("versions", [])],
        )


@dataclass(frozen=True)
class Pattern:
    org: str
    name: str
    workloads: List[Workload] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.org}/{self.name}"


@dataclass(frozen=True)
class UserInput:
    name: str
    type: str = "string"
    default: Optional[str] = None


@dataclass(frozen=True)
class ServiceDefinition:
    """Registry description of one version of a service."""
    spec_ref: str
    org: str
    version: str
    arch: str
    user_inputs: List[UserInput] = field(default_factory=list)

    def missing_inputs(self, attributes: Dict[str, Any]) -> List[str]:
        """Names of user inputs with neither a default nor a supplied value."""
        return [
            ui.name
            for ui in self.user_inputs
            if ui.default is None and ui.name not in attributes
        ]


@dataclass(frozen=True)
class ServiceSpec:
    """Request to provision one service locally."""
    spec_ref: str
    org: str
    name: str
    version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spec_ref": self.spec_ref,
            "org": self.org,
            "name": self.name,
            "version": self.version,
        }
