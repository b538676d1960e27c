"""
Configuration state model and transition predicates.

A node is either configuring (initial) or configured. The only supported
transition is configuring -> configured; asking for the current state is a
no-op. Predicates are pure and total over arbitrary strings.
"""

from dataclasses import dataclass
from typing import Any, Dict

CONFIGSTATE_CONFIGURING = "configuring"
CONFIGSTATE_CONFIGURED = "configured"

SUPPORTED_STATES = (CONFIGSTATE_CONFIGURING, CONFIGSTATE_CONFIGURED)


def is_supported_state(state: str) -> bool:
    return state in SUPPORTED_STATES


def is_noop(from_state: str, to_state: str) -> bool:
    return from_state == to_state


def is_valid_transition(from_state: str, to_state: str) -> bool:
    return from_state == CONFIGSTATE_CONFIGURING and to_state == CONFIGSTATE_CONFIGURED


@dataclass(frozen=True)
class ConfigState:
    """
    Configuration state view.

    Fields:
        state: "configuring" or "configured"
        last_update_time: Unix seconds of the last change (0 = never changed)
    """
    state: str = CONFIGSTATE_CONFIGURING
    last_update_time: int = 0

    @staticmethod
    def initial() -> "ConfigState":
        return ConfigState()

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "last_update_time": self.last_update_time}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ConfigState":
        data = data or {}
        return ConfigState(
            state=data.get("state", CONFIGSTATE_CONFIGURING),
            last_update_time=int(data.get("last_update_time", 0)),
        )
