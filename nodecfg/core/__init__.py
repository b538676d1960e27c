"""
Core controller primitives.

This module provides the pure building blocks of the controller:
- ConfigState and the transition predicates
- APISpec and the dependency list algebra
- Version ordering
- Domain records (DeviceRecord, Pattern, Workload, ...)
- Event and Reducer used by the device store
"""

from .configstate import (
    CONFIGSTATE_CONFIGURED,
    CONFIGSTATE_CONFIGURING,
    SUPPORTED_STATES,
    ConfigState,
    is_noop,
    is_supported_state,
    is_valid_transition,
)
from .apispec import APISpec, merge_without_duplicates, replace_higher_singleton, resolve_into
from .versions import compare_versions, version_key
from .models import DeviceRecord, Pattern, ServiceDefinition, ServiceSpec, UserInput, Workload, WorkloadChoice
from .events import Event
from .reducer import Reducer
from .errors import (
    DeviceStoreError,
    InvalidInputError,
    InvalidVersionError,
    NodeConfigError,
    NotFoundError,
    RegistryError,
    SystemicError,
)

__all__ = [
    "CONFIGSTATE_CONFIGURED",
    "CONFIGSTATE_CONFIGURING",
    "SUPPORTED_STATES",
    "ConfigState",
    "is_noop",
    "is_supported_state",
    "is_valid_transition",
    "APISpec",
    "merge_without_duplicates",
    "replace_higher_singleton",
    "resolve_into",
    "compare_versions",
    "version_key",
    "DeviceRecord",
    "Pattern",
    "ServiceDefinition",
    "ServiceSpec",
    "UserInput",
    "Workload",
    "WorkloadChoice",
    "Event",
    "Reducer",
    "DeviceStoreError",
    "InvalidInputError",
    "InvalidVersionError",
    "NodeConfigError",
    "NotFoundError",
    "RegistryError",
    "SystemicError",
]
