"""
Service provisioner that records services in the device store.

A service is registered once per (spec_ref, org). Services declaring user
inputs that have no default and no supplied value cannot be configured
automatically.
"""

import time
from typing import Any, Callable, Dict, Optional

from ..core.errors import DeviceStoreError, RegistryError
from ..core.events import policy_created
from ..core.models import ServiceSpec
from ..logging_config import get_logger
from ..registry.client import Registry
from ..store.store import DeviceStore
from .outcome import ProvisionOutcome, ServiceProvisioner

logger = get_logger(__name__)


class StoreServiceProvisioner(ServiceProvisioner):
    """
    Registers services in the node's device store.

    Args:
        store: Device store recording provisioned services
        registry: Registry providing service definitions
        arch: Node hardware architecture
        attributes: Values the node user supplied for service user inputs
        clock: Time source for notification timestamps
    """

    def __init__(
        self,
        store: DeviceStore,
        registry: Registry,
        arch: str,
        attributes: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.registry = registry
        self.arch = arch
        self.attributes = dict(attributes or {})
        self.clock = clock

    def create_service(self, service: ServiceSpec) -> ProvisionOutcome:
        try:
            existing = self.store.find_service(service.spec_ref, service.org)
        except DeviceStoreError as ex:
            return ProvisionOutcome.fatal(service, f"unable to read provisioned services: {ex}")

        if existing is not None:
            return ProvisionOutcome.already_present(
                service, f"Duplicate registration for {service.spec_ref} {service.org} {existing.version}"
            )

        try:
            definition = self.registry.get_service_definition(
                service.spec_ref, service.org, service.version, self.arch
            )
        except RegistryError as ex:
            return ProvisionOutcome.fatal(service, f"unable to read service definition: {ex}")

        missing = definition.missing_inputs(self.attributes)
        if missing:
            return ProvisionOutcome.needs_manual_config(
                service, f"variables {', '.join(missing)} must be configured"
            )

        try:
            self.store.save_service(service)
        except DeviceStoreError as ex:
            return ProvisionOutcome.fatal(service, f"unable to record service: {ex}")

        logger.info(f"Registered service {service.name}")
        notification = policy_created(
            service.name, service.spec_ref, service.org, service.version, int(self.clock())
        )
        return ProvisionOutcome.created(service, notification)
