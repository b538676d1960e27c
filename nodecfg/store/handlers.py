"""
Reducer handlers rebuilding node state from the device event log.

All handlers are pure and deterministic.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.events import CONFIGSTATE_CHANGED, DEVICE_REGISTERED, SERVICE_REGISTERED, Event
from ..core.reducer import Reducer


@dataclass(frozen=True)
class NodeState:
    """
    Replayed node state.

    Fields:
        device: Device record dict (None until registered)
        services: Provisioned service dicts in creation order
    """
    device: Optional[Dict[str, Any]] = None
    services: List[Dict[str, Any]] = field(default_factory=list)

    @staticmethod
    def initial() -> "NodeState":
        return NodeState()


def register_handlers(reducer: Reducer) -> None:
    reducer.register(DEVICE_REGISTERED, on_device_registered)
    reducer.register(CONFIGSTATE_CHANGED, on_configstate_changed)
    reducer.register(SERVICE_REGISTERED, on_service_registered)


def build_reducer() -> Reducer:
    reducer = Reducer()
    register_handlers(reducer)
    return reducer


def on_device_registered(cur: NodeState, ev: Event) -> NodeState:
    device = dict(ev.payload.get("device") or {})
    return NodeState(device=device, services=cur.services)


def on_configstate_changed(cur: NodeState, ev: Event) -> NodeState:
    if cur.device is None or cur.device.get("id") != ev.aggregate_id:
        return cur

    device = dict(cur.device)
    device["config"] = {
        "state": ev.payload.get("state"),
        "last_update_time": ev.ts,
    }
    return NodeState(device=device, services=cur.services)


def on_service_registered(cur: NodeState, ev: Event) -> NodeState:
    services = list(cur.services)
    services.append(dict(ev.payload.get("service") or {}))
    return NodeState(device=cur.device, services=services)
