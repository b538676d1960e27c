"""
DeviceStore abstract interface.

Defines the persistence contract the controller depends on.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.models import DeviceRecord, ServiceSpec


class DeviceStore(ABC):
    """
    Abstract device storage interface.

    A node holds at most one device record. Implementations raise
    DeviceStoreError on any read or write failure.
    """

    @abstractmethod
    def find_device(self) -> Optional[DeviceRecord]:
        """
        Return the registered device, or None if registration is missing.

        Raises:
            DeviceStoreError: If the store cannot be read
        """
        ...

    @abstractmethod
    def save_device(self, device: DeviceRecord) -> DeviceRecord:
        """
        Record device registration (replaces any previous record).

        Raises:
            DeviceStoreError: If the write fails
        """
        ...

    @abstractmethod
    def set_config_state(self, device_id: str, state: str) -> DeviceRecord:
        """
        Persist a new configuration state for the device.

        Returns:
            Updated device record

        Raises:
            DeviceStoreError: If the device is unknown or the write fails
        """
        ...

    @abstractmethod
    def find_services(self) -> List[ServiceSpec]:
        """Return services provisioned on this node, in creation order."""
        ...

    @abstractmethod
    def save_service(self, service: ServiceSpec) -> ServiceSpec:
        """
        Record a provisioned service.

        Raises:
            DeviceStoreError: If the write fails
        """
        ...

    def find_service(self, spec_ref: str, org: str) -> Optional[ServiceSpec]:
        """Return the provisioned service for (spec_ref, org), if any."""
        for service in self.find_services():
            if service.spec_ref == spec_ref and service.org == org:
                return service
        return None
