"""
Event model for device store records and controller notifications.

Events are immutable records of state changes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEVICE_REGISTERED = "DeviceRegistered"
CONFIGSTATE_CHANGED = "ConfigStateChanged"
SERVICE_REGISTERED = "ServiceRegistered"
POLICY_CREATED = "PolicyCreated"


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        type: Event type (e.g., "DeviceRegistered", "PolicyCreated")
        aggregate_id: Target aggregate identifier
        ts: Unix timestamp in seconds
        payload: Event-specific data
        meta: Metadata (source, writer, etc.)
        seq: Sequence number (assigned by the file store)
    """
    type: str
    aggregate_id: str
    ts: int
    payload: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    seq: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "aggregate_id": self.aggregate_id,
            "ts": self.ts,
            "payload": self.payload,
            "meta": self.meta,
            "seq": self.seq,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Event":
        return Event(
            type=data["type"],
            aggregate_id=data["aggregate_id"],
            ts=data["ts"],
            payload=data.get("payload", {}),
            meta=data.get("meta", {}),
            seq=data.get("seq"),
        )


def policy_created(service_name: str, spec_ref: str, org: str, version: str, ts: int) -> Event:
    """Notification emitted when auto-provisioning creates a service."""
    return Event(
        type=POLICY_CREATED,
        aggregate_id=service_name,
        ts=ts,
        payload={"spec_ref": spec_ref, "org": org, "version": version},
        meta={"source": "provisioner"},
    )
