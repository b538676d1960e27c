"""
File-based device store using an append-only JSONL event log.

Each line is one canonical JSON event. The current device and its services
are rebuilt by replaying the log through the store reducer.
"""

import json
import os
import time
from typing import Callable, Iterator, List, Optional

from ..core.canonical import canonical_json_str
from ..core.errors import DeviceStoreError
from ..core.events import CONFIGSTATE_CHANGED, DEVICE_REGISTERED, SERVICE_REGISTERED, Event
from ..core.models import DeviceRecord, ServiceSpec
from .handlers import NodeState, build_reducer
from .store import DeviceStore

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FileDeviceStore(DeviceStore):
    """
    File-based append-only device store.

    Storage format: JSONL (newline-delimited JSON), one event per line.

    Guarantees:
    - Append-only (no mutations)
    - Exclusive lock and fsync on each append
    - Sequential seq numbers starting at 0
    """

    def __init__(self, path: str, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize file device store.

        Args:
            path: Path to JSONL file
            clock: Time source for event timestamps
        """
        self.path = path
        self.clock = clock
        self.reducer = build_reducer()

        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            if not os.path.exists(path):
                with open(path, "wb") as f:
                    f.write(b"")
        except OSError as ex:
            raise DeviceStoreError(f"cannot initialize device store at {path}: {ex}") from ex

    def _last_seq(self, f) -> int:
        last_seq = -1
        f.seek(0)
        for line in f:
            if not line.strip():
                continue
            last_seq = json.loads(line)["seq"]
        return last_seq

    def append(self, event: Event) -> Event:
        """
        Append event to log, assigning the next seq.

        Raises:
            DeviceStoreError: If append fails
        """
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    stored = Event(
                        type=event.type,
                        aggregate_id=event.aggregate_id,
                        ts=event.ts,
                        payload=event.payload,
                        meta=event.meta,
                        seq=self._last_seq(f) + 1,
                    )
                    line = canonical_json_str(stored.to_dict()) + "\n"
                    f.seek(0, os.SEEK_END)
                    f.write(line.encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return stored
        except (OSError, ValueError, KeyError) as ex:
            raise DeviceStoreError(f"failed to append {event.type}: {ex}") from ex

    def read(self) -> Iterator[Event]:
        """Yield events in sequence order."""
        try:
            with open(self.path, "rb") as f:
                for line in f:
                    if not line.strip():
                        continue
                    yield Event.from_dict(json.loads(line))
        except (OSError, ValueError, KeyError) as ex:
            raise DeviceStoreError(f"failed to read device log {self.path}: {ex}") from ex

    def _replay(self) -> NodeState:
        return self.reducer.fold(NodeState.initial(), self.read())

    def find_device(self) -> Optional[DeviceRecord]:
        state = self._replay()
        if state.device is None:
            return None
        return DeviceRecord.from_dict(state.device)

    def save_device(self, device: DeviceRecord) -> DeviceRecord:
        self.append(
            Event(
                type=DEVICE_REGISTERED,
                aggregate_id=device.id,
                ts=int(self.clock()),
                payload={"device": device.to_dict()},
                meta={"source": "device_store"},
            )
        )
        return device

    def set_config_state(self, device_id: str, state: str) -> DeviceRecord:
        device = self.find_device()
        if device is None or device.id != device_id:
            raise DeviceStoreError(f"device {device_id} is not registered")

        self.append(
            Event(
                type=CONFIGSTATE_CHANGED,
                aggregate_id=device_id,
                ts=int(self.clock()),
                payload={"state": state},
                meta={"source": "device_store"},
            )
        )
        updated = self.find_device()
        if updated is None:
            raise DeviceStoreError(f"device {device_id} vanished during update")
        return updated

    def find_services(self) -> List[ServiceSpec]:
        return [
            ServiceSpec(
                spec_ref=s["spec_ref"],
                org=s["org"],
                name=s["name"],
                version=s["version"],
            )
            for s in self._replay().services
        ]

    def save_service(self, service: ServiceSpec) -> ServiceSpec:
        self.append(
            Event(
                type=SERVICE_REGISTERED,
                aggregate_id=service.name,
                ts=int(self.clock()),
                payload={"service": service.to_dict()},
                meta={"source": "device_store"},
            )
        )
        return service
