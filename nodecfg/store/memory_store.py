"""
In-memory device store for embedding and tests.
"""

import time
from typing import Callable, List, Optional

from ..core.configstate import ConfigState
from ..core.errors import DeviceStoreError
from ..core.models import DeviceRecord, ServiceSpec
from .store import DeviceStore


class InMemoryDeviceStore(DeviceStore):
    """Holds one device and its services in process memory."""

    def __init__(self, device: Optional[DeviceRecord] = None, clock: Callable[[], float] = time.time) -> None:
        self._device = device
        self._services: List[ServiceSpec] = []
        self._clock = clock

    def find_device(self) -> Optional[DeviceRecord]:
        return self._device

    def save_device(self, device: DeviceRecord) -> DeviceRecord:
        self._device = device
        return device

    def set_config_state(self, device_id: str, state: str) -> DeviceRecord:
        if self._device is None or self._device.id != device_id:
            raise DeviceStoreError(f"device {device_id} is not registered")
        config = ConfigState(state=state, last_update_time=int(self._clock()))
        self._device = self._device.with_config(config)
        return self._device

    def find_services(self) -> List[ServiceSpec]:
        return list(self._services)

    def save_service(self, service: ServiceSpec) -> ServiceSpec:
        self._services.append(service)
        return service
