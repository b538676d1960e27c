"""
Provisioning outcome variant and the provisioner contract.

A provisioner never signals an expected outcome by raising: it returns a
ProvisionOutcome whose kind the caller switches on exhaustively.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.events import Event
from ..core.models import ServiceSpec


class OutcomeKind(str, Enum):
    CREATED = "created"
    ALREADY_PRESENT = "already_present"
    NEEDS_MANUAL_CONFIG = "needs_manual_config"
    FATAL = "fatal"


@dataclass(frozen=True)
class ProvisionOutcome:
    """
    Result of one create_service call.

    Fields:
        kind: Classified outcome
        service: The service that was requested
        notification: PolicyCreated event (CREATED only)
        detail: Human readable explanation (non-CREATED outcomes)
    """
    kind: OutcomeKind
    service: ServiceSpec
    notification: Optional[Event] = None
    detail: str = ""

    @staticmethod
    def created(service: ServiceSpec, notification: Event) -> "ProvisionOutcome":
        return ProvisionOutcome(kind=OutcomeKind.CREATED, service=service, notification=notification)

    @staticmethod
    def already_present(service: ServiceSpec, detail: str = "") -> "ProvisionOutcome":
        return ProvisionOutcome(kind=OutcomeKind.ALREADY_PRESENT, service=service, detail=detail)

    @staticmethod
    def needs_manual_config(service: ServiceSpec, detail: str) -> "ProvisionOutcome":
        return ProvisionOutcome(kind=OutcomeKind.NEEDS_MANUAL_CONFIG, service=service, detail=detail)

    @staticmethod
    def fatal(service: ServiceSpec, detail: str) -> "ProvisionOutcome":
        return ProvisionOutcome(kind=OutcomeKind.FATAL, service=service, detail=detail)


class ServiceProvisioner(ABC):
    """Creates a local service for one resolved dependency."""

    @abstractmethod
    def create_service(self, service: ServiceSpec) -> ProvisionOutcome:
        ...
