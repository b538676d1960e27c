"""
Tests for the JSONL device store.

Goal: state survives reopening, seq numbers are gapless, and a config state
change for an unknown device never writes.
"""

import json
import os
import tempfile

import pytest

from nodecfg.core.configstate import CONFIGSTATE_CONFIGURED, CONFIGSTATE_CONFIGURING
from nodecfg.core.errors import DeviceStoreError
from nodecfg.core.events import CONFIGSTATE_CHANGED, DEVICE_REGISTERED, SERVICE_REGISTERED, Event
from nodecfg.core.models import ServiceSpec
from nodecfg.store.file_store import FileDeviceStore
from nodecfg.tests.fakes import device


def _read_records(path: str):
    with open(path, "r") as f:
        return [json.loads(line) for line in f if line.strip()]


def _service(name: str) -> ServiceSpec:
    return ServiceSpec(
        spec_ref=f"https://bluehorizon.network/services/{name}",
        org="e2edev",
        name=f"bluehorizon.network-services-{name}_e2edev_1.0.0",
        version="1.0.0",
    )


def test_empty_store_has_no_device():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileDeviceStore(os.path.join(tmpdir, "nested", "device.log"))

        assert store.find_device() is None
        assert store.find_services() == []


def test_device_round_trips_through_reopen():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = os.path.join(tmpdir, "device.log")
        FileDeviceStore(log_path).save_device(device(pattern="netspeed"))

        reopened = FileDeviceStore(log_path).find_device()

        assert reopened == device(pattern="netspeed")


def test_config_state_change_is_persisted_with_timestamp():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = os.path.join(tmpdir, "device.log")
        store = FileDeviceStore(log_path, clock=lambda: 1700000123.9)
        store.save_device(device())

        updated = store.set_config_state("node-1", CONFIGSTATE_CONFIGURED)

        assert updated.config.state == CONFIGSTATE_CONFIGURED
        assert updated.config.last_update_time == 1700000123
        assert FileDeviceStore(log_path).find_device().config.state == CONFIGSTATE_CONFIGURED


def test_seq_numbers_are_sequential():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = os.path.join(tmpdir, "device.log")
        store = FileDeviceStore(log_path)
        store.save_device(device())
        store.save_service(_service("gps"))
        store.set_config_state("node-1", CONFIGSTATE_CONFIGURED)

        records = _read_records(log_path)

        assert [r["seq"] for r in records] == [0, 1, 2]
        assert [r["type"] for r in records] == [DEVICE_REGISTERED, SERVICE_REGISTERED, CONFIGSTATE_CHANGED]


def test_unknown_device_state_change_does_not_write():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = os.path.join(tmpdir, "device.log")
        store = FileDeviceStore(log_path)

        with pytest.raises(DeviceStoreError):
            store.set_config_state("node-1", CONFIGSTATE_CONFIGURED)

        store.save_device(device())
        with pytest.raises(DeviceStoreError):
            store.set_config_state("someone-else", CONFIGSTATE_CONFIGURED)

        assert len(_read_records(log_path)) == 1


def test_services_are_found_by_ref_and_org():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileDeviceStore(os.path.join(tmpdir, "device.log"))
        store.save_service(_service("gps"))
        store.save_service(_service("cpu"))

        assert store.find_services() == [_service("gps"), _service("cpu")]
        assert store.find_service(_service("cpu").spec_ref, "e2edev") == _service("cpu")
        assert store.find_service(_service("cpu").spec_ref, "other") is None


def test_reregistration_keeps_services_and_resets_state():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileDeviceStore(os.path.join(tmpdir, "device.log"))
        store.save_device(device())
        store.save_service(_service("gps"))
        store.set_config_state("node-1", CONFIGSTATE_CONFIGURED)

        store.save_device(device(pattern="netspeed"))

        assert store.find_device().config.state == CONFIGSTATE_CONFIGURING
        assert store.find_device().pattern == "netspeed"
        assert store.find_services() == [_service("gps")]


def test_corrupt_log_raises_store_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = os.path.join(tmpdir, "device.log")
        with open(log_path, "w") as f:
            f.write("{not json\n")

        with pytest.raises(DeviceStoreError):
            FileDeviceStore(log_path).find_device()


def test_unknown_event_type_raises_store_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileDeviceStore(os.path.join(tmpdir, "device.log"))
        store.append(Event(type="Mystery", aggregate_id="node-1", ts=1))

        with pytest.raises(DeviceStoreError):
            store.find_device()
