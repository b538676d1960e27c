"""
End-to-end configstate requests against in-memory collaborators.
"""

import pytest

from nodecfg.controller import find_configstate_for_output, update_configstate
from nodecfg.core.configstate import CONFIGSTATE_CONFIGURED, CONFIGSTATE_CONFIGURING
from nodecfg.core.errors import DeviceStoreError, InvalidInputError, NotFoundError, SystemicError
from nodecfg.core.models import Pattern
from nodecfg.provision.outcome import OutcomeKind
from nodecfg.tests.fakes import ARCH, ORG, CountingStore, FakeRegistry, ScriptedProvisioner, device, spec, workload


def _registry_for(*specs):
    wl = workload("netspeed", ["1.0.0"])
    return FakeRegistry(
        patterns={f"{ORG}/netspeed": Pattern(org=ORG, name="netspeed", workloads=[wl])},
        workloads={(wl.url, "1.0.0"): list(specs)},
    )


def test_scenario_a_unregistered_device_is_not_found():
    store = CountingStore()

    for target in (CONFIGSTATE_CONFIGURED, CONFIGSTATE_CONFIGURING, "bogus"):
        with pytest.raises(NotFoundError):
            update_configstate(target, store, FakeRegistry(), ScriptedProvisioner(), ARCH)

    assert store.state_updates == 0


def test_scenario_b_no_pattern_configures_without_notifications():
    store = CountingStore(device())
    provisioner = ScriptedProvisioner()

    result = update_configstate(CONFIGSTATE_CONFIGURED, store, FakeRegistry(), provisioner, ARCH)

    assert result.config.state == CONFIGSTATE_CONFIGURED
    assert result.config.last_update_time == 1700000000
    assert result.notifications == []
    assert store.state_updates == 1
    assert provisioner.calls == []


def test_scenario_c_already_present_dependency_is_tolerated():
    x, y = spec("x"), spec("y")
    store = CountingStore(device(pattern="netspeed"))
    provisioner = ScriptedProvisioner({x.spec_ref: OutcomeKind.ALREADY_PRESENT})

    result = update_configstate(CONFIGSTATE_CONFIGURED, store, _registry_for(x, y), provisioner, ARCH)

    assert result.config.state == CONFIGSTATE_CONFIGURED
    assert len(result.notifications) == 1
    assert result.notifications[0].payload["spec_ref"] == y.spec_ref
    assert store.state_updates == 1


def test_scenario_d_manual_config_leaves_state_configuring():
    z = spec("z")
    store = CountingStore(device(pattern="netspeed"))
    provisioner = ScriptedProvisioner({z.spec_ref: OutcomeKind.NEEDS_MANUAL_CONFIG})

    with pytest.raises(InvalidInputError) as exc:
        update_configstate(CONFIGSTATE_CONFIGURED, store, _registry_for(z), provisioner, ARCH)

    assert z.spec_ref in str(exc.value)
    assert store.state_updates == 0
    assert store.find_device().config.state == CONFIGSTATE_CONFIGURING


def test_scenario_e_reverse_transition_is_rejected():
    store = CountingStore(device(state=CONFIGSTATE_CONFIGURED))

    with pytest.raises(InvalidInputError) as exc:
        update_configstate(CONFIGSTATE_CONFIGURING, store, FakeRegistry(), ScriptedProvisioner(), ARCH)

    assert str(exc.value) == "Transition from 'configured' to 'configuring' is not supported."
    assert exc.value.input_name == "configstate.state"
    assert store.state_updates == 0


def test_noop_returns_current_state_without_side_effects():
    store = CountingStore(device(pattern="netspeed", state=CONFIGSTATE_CONFIGURED))
    registry = _registry_for(spec("x"))
    provisioner = ScriptedProvisioner()

    result = update_configstate(CONFIGSTATE_CONFIGURED, store, registry, provisioner, ARCH)

    assert result.config.state == CONFIGSTATE_CONFIGURED
    assert result.notifications == []
    assert store.state_updates == 0
    assert registry.resolve_calls == []
    assert provisioner.calls == []


def test_unsupported_state_is_rejected_before_noop_check():
    store = CountingStore(device())

    with pytest.raises(InvalidInputError, match="Supported state values are 'configuring' and 'configured'"):
        update_configstate("registered", store, FakeRegistry(), ScriptedProvisioner(), ARCH)


def test_fatal_provisioning_keeps_earlier_services_and_skips_persist():
    a, b, c = spec("a"), spec("b"), spec("c")
    store = CountingStore(device(pattern="netspeed"))
    provisioner = ScriptedProvisioner({b.spec_ref: OutcomeKind.FATAL})

    with pytest.raises(SystemicError):
        update_configstate(CONFIGSTATE_CONFIGURED, store, _registry_for(a, b, c), provisioner, ARCH)

    assert [s.spec_ref for s in provisioner.calls] == [a.spec_ref, b.spec_ref]
    assert store.state_updates == 0


def test_registry_failure_is_systemic():
    wl = workload("netspeed", ["1.0.0"])
    registry = FakeRegistry(
        patterns={f"{ORG}/netspeed": Pattern(org=ORG, name="netspeed", workloads=[wl])},
        fail_on=((wl.url, "1.0.0"),),
    )
    store = CountingStore(device(pattern="netspeed"))

    with pytest.raises(SystemicError):
        update_configstate(CONFIGSTATE_CONFIGURED, store, registry, ScriptedProvisioner(), ARCH)

    assert store.state_updates == 0


def test_store_failures_are_systemic():
    class BrokenStore(CountingStore):
        def set_config_state(self, device_id, state):
            raise DeviceStoreError("read-only filesystem")

    with pytest.raises(SystemicError, match="error persisting new config state"):
        update_configstate(
            CONFIGSTATE_CONFIGURED, BrokenStore(device()), FakeRegistry(), ScriptedProvisioner(), ARCH
        )

    class UnreadableStore(CountingStore):
        def find_device(self):
            raise DeviceStoreError("corrupt log")

    with pytest.raises(SystemicError, match="corrupt log"):
        update_configstate(
            CONFIGSTATE_CONFIGURED, UnreadableStore(), FakeRegistry(), ScriptedProvisioner(), ARCH
        )


def test_retry_after_partial_failure_sees_already_present():
    """Services created before a failure are reported as already present on retry."""
    a, b = spec("a"), spec("b")
    store = CountingStore(device(pattern="netspeed"))
    registry = _registry_for(a, b)

    failing = ScriptedProvisioner({b.spec_ref: OutcomeKind.NEEDS_MANUAL_CONFIG})
    with pytest.raises(InvalidInputError):
        update_configstate(CONFIGSTATE_CONFIGURED, store, registry, failing, ARCH)

    retry = ScriptedProvisioner({a.spec_ref: OutcomeKind.ALREADY_PRESENT})
    result = update_configstate(CONFIGSTATE_CONFIGURED, store, registry, retry, ARCH)

    assert [n.payload["spec_ref"] for n in result.notifications] == [b.spec_ref]
    assert result.config.state == CONFIGSTATE_CONFIGURED


def test_find_configstate_defaults_to_configuring():
    assert find_configstate_for_output(CountingStore()).state == CONFIGSTATE_CONFIGURING
    assert (
        find_configstate_for_output(CountingStore(device(state=CONFIGSTATE_CONFIGURED))).state
        == CONFIGSTATE_CONFIGURED
    )
