"""
CLI tests: register a device, then drive configstate through the store
provisioner against a registry document on disk.
"""

import json
import os
import tempfile

from typer.testing import CliRunner

from cli.main import app
from nodecfg.tests.fakes import registry_document

runner = CliRunner()


def _env(tmpdir: str) -> dict:
    registry_path = os.path.join(tmpdir, "registry.json")
    with open(registry_path, "w") as f:
        json.dump(registry_document(), f)
    return {
        "NODECFG_STORE_PATH": os.path.join(tmpdir, "device.log"),
        "NODECFG_REGISTRY_PATH": registry_path,
        "NODECFG_ARCH": "amd64",
        "NODECFG_PROVISIONER": "store",
        "NODECFG_LOG_LEVEL": "ERROR",
    }


def _register(env: dict, *extra: str):
    args = ["device", "register", "--id", "node-1", "--org", "e2edev", "--token", "s3cret", *extra]
    result = runner.invoke(app, args, env=env)
    assert result.exit_code == 0, result.output
    return result


def test_show_before_registration_is_configuring():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = runner.invoke(app, ["configstate", "show", "--json"], env=_env(tmpdir))

        assert result.exit_code == 0
        assert json.loads(result.stdout)["state"] == "configuring"


def test_set_without_registration_exits_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = runner.invoke(app, ["configstate", "set", "configured", "--json"], env=_env(tmpdir))

        assert result.exit_code == 4
        assert json.loads(result.stdout)["type"] == "NotFoundError"


def test_configured_without_pattern():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        _register(env)

        result = runner.invoke(app, ["configstate", "set", "configured", "--json"], env=env)

        assert result.exit_code == 0
        out = json.loads(result.stdout)
        assert out["configstate"]["state"] == "configured"
        assert out["policies_created"] == []


def test_pattern_needing_user_input_exits_invalid_input():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        _register(env, "--pattern", "netspeed")

        result = runner.invoke(app, ["configstate", "set", "configured", "--json"], env=env)

        assert result.exit_code == 2
        err = json.loads(result.stdout)
        assert err["type"] == "InvalidInputError"
        assert "HZN_LAT" in err["error"]

        shown = runner.invoke(app, ["configstate", "show", "--json"], env=env)
        assert json.loads(shown.stdout)["state"] == "configuring"


def test_retry_with_attributes_provisions_remaining_services():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        _register(env, "--pattern", "netspeed")
        first = runner.invoke(app, ["configstate", "set", "configured", "--json"], env=env)
        assert first.exit_code == 2

        result = runner.invoke(
            app, ["configstate", "set", "configured", "--attr", "HZN_LAT=52.1", "--json"], env=env
        )

        assert result.exit_code == 0
        out = json.loads(result.stdout)
        assert out["configstate"]["state"] == "configured"
        # gps was registered by the first attempt
        assert [p["aggregate_id"] for p in out["policies_created"]] == [
            "bluehorizon.network-services-location_e2edev_1.0.0"
        ]


def test_reverse_transition_exits_invalid_input():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        _register(env)
        runner.invoke(app, ["configstate", "set", "configured"], env=env)

        result = runner.invoke(app, ["configstate", "set", "configuring", "--json"], env=env)

        assert result.exit_code == 2
        assert "not supported" in json.loads(result.stdout)["error"]


def test_missing_registry_document_exits_systemic():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        env["NODECFG_REGISTRY_PATH"] = os.path.join(tmpdir, "missing.json")
        _register(env)

        result = runner.invoke(app, ["configstate", "set", "configured", "--json"], env=env)

        assert result.exit_code == 1
        assert json.loads(result.stdout)["type"] == "SystemicError"


def test_device_show_hides_token():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        _register(env, "--pattern", "netspeed")

        result = runner.invoke(app, ["device", "show", "--json"], env=env)

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert "token" not in data
        assert data["pattern"] == "netspeed"
        assert data["name"] == "node-1"


def test_device_show_unregistered_exits_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = runner.invoke(app, ["device", "show", "--json"], env=_env(tmpdir))

        assert result.exit_code == 4


def test_metrics_textfile_is_written():
    with tempfile.TemporaryDirectory() as tmpdir:
        env = _env(tmpdir)
        prom = os.path.join(tmpdir, "nodecfg.prom")
        env["NODECFG_METRICS_TEXTFILE"] = prom
        _register(env)

        result = runner.invoke(app, ["configstate", "set", "configured"], env=env)

        assert result.exit_code == 0
        with open(prom) as f:
            assert "nodecfg_configstate_transitions_total" in f.read()
