"""
Configuration-state controller.

Sequences one configstate request:
    load device -> validate transition -> (configured + pattern)
    resolve pattern -> auto-provision -> persist state -> respond

Faults are raised as NotFoundError, InvalidInputError or SystemicError and
stop the workflow at the point of detection. Nothing is retried here.
"""

from dataclasses import dataclass, field
from typing import List

from .core.configstate import (
    CONFIGSTATE_CONFIGURED,
    SUPPORTED_STATES,
    ConfigState,
    is_noop,
    is_supported_state,
    is_valid_transition,
)
from .core.errors import DeviceStoreError, InvalidInputError, NotFoundError, SystemicError
from .core.events import Event
from .core.models import DeviceRecord
from .logging_config import get_logger
from .metrics import track_transition
from .provision.outcome import ServiceProvisioner
from .provision.provisioner import AutoProvisioner
from .registry.client import Registry
from .resolve.resolver import PatternResolver
from .store.store import DeviceStore


@dataclass(frozen=True)
class ConfigStateResult:
    """
    Response of a configstate update.

    Fields:
        config: Configuration state after the request
        notifications: PolicyCreated events, one per newly provisioned service
    """
    config: ConfigState
    notifications: List[Event] = field(default_factory=list)


def find_configstate_for_output(store: DeviceStore) -> ConfigState:
    """
    Current configuration state of the node.

    An unregistered node is implicitly configuring.

    Raises:
        SystemicError: If the device store cannot be read
    """
    try:
        device = store.find_device()
    except DeviceStoreError as ex:
        raise SystemicError(f"unable to read device object, error {ex}") from ex

    if device is None:
        return ConfigState.initial()
    return device.config


def _load_device(store: DeviceStore) -> DeviceRecord:
    try:
        device = store.find_device()
    except DeviceStoreError as ex:
        raise SystemicError(f"Unable to read device object, error {ex}") from ex

    if device is None:
        raise NotFoundError(
            "Device registration not recorded. Register the device with its organization "
            "before changing the configuration state."
        )
    return device


def update_configstate(
    requested_state: str,
    store: DeviceStore,
    registry: Registry,
    provisioner: ServiceProvisioner,
    arch: str,
) -> ConfigStateResult:
    """
    Validate and apply a configuration state change.

    Args:
        requested_state: Target state ("configuring" or "configured")
        store: Device store holding the node's registration
        registry: Registry used to resolve the device pattern
        provisioner: Creates services for resolved dependencies
        arch: Node hardware architecture

    Returns:
        ConfigStateResult with the resulting state and PolicyCreated notifications

    Raises:
        NotFoundError: Device is not registered
        InvalidInputError: Unsupported state or transition, or a dependency
            that needs manual configuration
        SystemicError: Store, registry or provisioning failure
    """
    try:
        device = _load_device(store)
    except NotFoundError:
        track_transition("none", requested_state, "not_found")
        raise

    logger = get_logger(__name__, trace_id=device.qualified_id())
    current_state = device.config.state
    logger.info(f"Update configstate: {current_state} -> {requested_state}")

    try:
        result = _transition(device, requested_state, store, registry, provisioner, arch, logger)
    except InvalidInputError:
        track_transition(current_state, requested_state, "invalid_input")
        raise
    except SystemicError:
        track_transition(current_state, requested_state, "systemic")
        raise

    outcome = "noop" if is_noop(current_state, requested_state) else "ok"
    track_transition(current_state, requested_state, outcome)
    return result


def _transition(device, requested_state, store, registry, provisioner, arch, logger) -> ConfigStateResult:
    current_state = device.config.state

    if not is_supported_state(requested_state):
        raise InvalidInputError(
            f"Supported state values are '{SUPPORTED_STATES[0]}' and '{SUPPORTED_STATES[1]}'.",
            "configstate.state",
        )
    if is_noop(current_state, requested_state):
        return ConfigStateResult(config=device.config)
    if not is_valid_transition(current_state, requested_state):
        raise InvalidInputError(
            f"Transition from '{current_state}' to '{requested_state}' is not supported.",
            "configstate.state",
        )

    notifications: List[Event] = []
    if device.pattern and requested_state == CONFIGSTATE_CONFIGURED:
        logger.info(f"Configstate autoconfig of services starting for pattern {device.org}/{device.pattern}")

        resolver = PatternResolver(registry, arch)
        api_specs = resolver.resolve(device.org, device.pattern, device.qualified_id(), device.token)

        auto = AutoProvisioner(provisioner, trace_id=device.qualified_id())
        notifications = auto.provision(api_specs)

        logger.info(f"Configstate autoconfig of services complete, {len(notifications)} created")

    try:
        updated = store.set_config_state(device.id, requested_state)
    except DeviceStoreError as ex:
        raise SystemicError(f"error persisting new config state: {ex}") from ex

    logger.debug(f"Update configstate: updated device {updated.id} to {updated.config.state}")
    return ConfigStateResult(config=updated.config, notifications=notifications)
