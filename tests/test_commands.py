# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for the command implementations against simulated devices."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from ratbagcmd.commands import buttons as buttons_module
from ratbagcmd.const import ExitCode
from ratbagcmd.context import Context
from ratbagcmd.device import ActionType
from ratbagcmd.errors import DeviceError
from ratbagcmd.simulator import SimulatedDevice


def _read(path) -> dict:
    return json.loads(Path(path).read_text())


def _button_action(path, profile=0, button=0):
    return _read(path)["profiles"][profile]["buttons"][button]["action"]


# ============================================================================
# Info and List
# ============================================================================

class TestInfoCommand:
    """Tests for the info command."""

    def test_header(self, run_command, device_path):
        result = run_command(f"info {device_path}")
        assert result.success
        lines = result.message.splitlines()
        assert lines[:4] == [
            "Device 'Test Mouse'",
            "Capabilities: res profile btn-key btn-macros",
            "Number of buttons: 4",
            "Profiles supported: 2",
        ]

    def test_profiles_resolutions_and_buttons(self, run_command, device_path):
        lines = run_command(f"info {device_path}").message.splitlines()
        assert "  Profile 0 (active) (default)" in lines
        assert "  Profile 1" in lines
        assert "      0: 800dpi @ 1000Hz (default)" in lines
        assert "      1: 1600dpi @ 1000Hz (active)" in lines
        assert "      2: 3200dpi @ 1000Hz" in lines
        assert "    Button: 2 type middle is mapped to 'button 3'" in lines
        assert lines.count("    Resolutions:") == 2

    def test_capabilities_subset(self, run_command, make_device):
        path = make_device(capabilities=("button-key",))
        lines = run_command(f"info {path}").message.splitlines()
        assert lines[1] == "Capabilities: btn-key"

    def test_disabled_and_separate_resolutions(self, run_command, make_device, device_data):
        data = device_data(num_profiles=1)
        data["profiles"][0]["resolutions"][0]["dpi"] = 0
        data["profiles"][0]["resolutions"][2].update({"separate_xy": True, "dpi_y": 400})
        path = make_device(data=data)

        lines = run_command(f"info {path}").message.splitlines()
        assert "      0: <disabled>" in lines
        assert "      2: 3200x400dpi @ 1000Hz" in lines

    def test_key_and_macro_mappings(self, run_command, make_device, device_data):
        data = device_data(num_profiles=1)
        data["profiles"][0]["buttons"][0]["action"] = {"type": "key", "key": 30}
        data["profiles"][0]["buttons"][1]["action"] = {
            "type": "macro", "name": "copy", "events": [["pressed", 46], ["released", 46]],
        }
        data["profiles"][0]["buttons"][2]["action"] = {"type": "none"}
        path = make_device(data=data)

        lines = run_command(f"info {path}").message.splitlines()
        assert "    Button: 0 type left is mapped to 'key KEY_A'" in lines
        assert "    Button: 1 type right is mapped to 'macro copy'" in lines
        assert "    Button: 2 type middle is mapped to 'none'" in lines

    def test_data(self, run_command, device_path):
        result = run_command(f"info {device_path}")
        assert result.data["profiles"] == 2
        assert result.data["buttons"] == 4


class TestListCommand:
    """Tests for the list command."""

    @pytest.fixture
    def device_dir(self, tmp_path):
        directory = tmp_path / "input"
        directory.mkdir()
        return directory

    def test_lists_supported_event_nodes(self, run_command, device_dir):
        (device_dir / "event1").write_text("garbage")
        (device_dir / "event0").write_text('{"name": "Mouse A", "profiles": []}')
        (device_dir / "event2").write_text('{"name": "Mouse B", "profiles": []}')
        (device_dir / "mouse1").write_text('{"name": "Mouse C", "profiles": []}')

        result = run_command("list", device_dir=device_dir)
        assert result.success
        assert result.message.splitlines() == [
            f"{device_dir / 'event0'}:\tMouse A",
            f"{device_dir / 'event2'}:\tMouse B",
        ]

    def test_no_devices(self, run_command, device_dir):
        (device_dir / "event0").write_text("garbage")
        result = run_command("list", device_dir=device_dir)
        assert result.success
        assert result.message == "No supported devices found"

    def test_missing_directory(self, run_command, tmp_path):
        result = run_command("list", device_dir=tmp_path / "missing")
        assert result.success
        assert result.message == ""

    def test_extra_argument(self, run_command, device_dir):
        result = run_command("list extra", device_dir=device_dir)
        assert result.code == ExitCode.USAGE

    def test_binary_event_node_skipped(self, run_command, device_dir):
        (device_dir / "event0").write_bytes(b"\xff\xfe\x00\x81binary")
        (device_dir / "event1").write_text('{"name": "Mouse B", "profiles": []}')

        result = run_command("list", device_dir=device_dir)
        assert result.success
        assert result.message == f"{device_dir / 'event1'}:\tMouse B"


# ============================================================================
# Button Mapping
# ============================================================================

class TestChangeButtonCommand:
    """Tests for change-button."""

    def test_map_key(self, run_command, device_path):
        result = run_command(f"change-button 1 key KEY_B {device_path}")
        assert result.success
        assert _button_action(device_path, button=1) == {"type": "key", "key": 48}

    def test_map_button(self, run_command, device_path):
        assert run_command(f"change-button 0 button 5 {device_path}").success
        assert _button_action(device_path) == {"type": "button", "button": 5}

    def test_map_special(self, run_command, device_path):
        assert run_command(f"change-button 3 special doubleclick {device_path}").success
        assert _button_action(device_path, button=3) == {
            "type": "special", "special": "doubleclick",
        }

    def test_map_macro(self, run_command, device_path):
        assert run_command(f"change-button 2 macro copy:KEY_LEFTCTRL,KEY_C {device_path}").success
        assert _button_action(device_path, button=2) == {
            "type": "macro",
            "name": "copy",
            "events": [["pressed", 29], ["released", 29], ["pressed", 46], ["released", 46]],
        }

    def test_action_kind_is_case_insensitive(self, run_command, device_path):
        assert run_command(f"change-button 1 KEY key_b {device_path}").success
        assert _button_action(device_path, button=1)["key"] == 48

    @pytest.mark.parametrize("args", [
        "1 key KEY_NOPE",
        "1 special fly",
        "1 macro nokeys",
        "1 macro copy:KEY_NOPE",
        "1 button x",
        "1 launch rocket",
        "x button 1",
        "1 key",
        "1 key KEY_A extra",
    ])
    def test_usage_errors_do_not_write(self, run_command, device_path, args):
        before = Path(device_path).read_bytes()
        result = run_command(f"change-button {args} {device_path}")
        assert result.code == ExitCode.USAGE
        assert Path(device_path).read_bytes() == before

    def test_no_programmable_buttons(self, run_command, make_device):
        path = make_device(capabilities=("switchable-profile",))
        result = run_command(f"change-button 1 key KEY_A {path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert "has no programmable buttons" in result.message

    def test_macros_need_capability(self, run_command, make_device):
        path = make_device(capabilities=("button-key",))
        result = run_command(f"change-button 1 macro m:KEY_A {path}")
        assert result.code == ExitCode.UNSUPPORTED

    def test_invalid_button_index(self, run_command, device_path):
        result = run_command(f"change-button 9 key KEY_A {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "Invalid button number 9"

    def test_rejected_mapping(self, run_command, device_path):
        result = run_command(f"change-button 0 button 0 {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "Unable to perform button 0 mapping button 0"

    def test_commit_failure(self, run_command, device_path, monkeypatch):
        def fail(self):
            raise DeviceError("disk full")

        monkeypatch.setattr(SimulatedDevice, "commit", fail)
        result = run_command(f"change-button 1 key KEY_A {device_path}")
        assert result.code == ExitCode.DEVICE
        assert result.message == "Unable to apply the current profile: disk full"

    def test_unhandled_action_type_is_fatal(self, handler, device_path, service, monkeypatch):
        monkeypatch.setattr(
            buttons_module, "parse_action", lambda kind, value: (ActionType.UNKNOWN, None)
        )
        with Context(service) as ctx, pytest.raises(AssertionError):
            handler.execute(ctx, ["change-button", "1", "key", "KEY_A", device_path])


class TestButtonCommands:
    """Tests for the button router and its subcommands."""

    def test_get(self, run_command, device_path):
        result = run_command(f"button 2 get {device_path}")
        assert result.message == "Button: 2 type middle is mapped to 'button 3'"

    def test_get_needs_index(self, run_command, device_path):
        result = run_command(f"button get {device_path}")
        assert result.code == ExitCode.USAGE
        assert result.message == "Missing button number"

    def test_get_out_of_range(self, run_command, device_path):
        assert run_command(f"button 4 get {device_path}").code == ExitCode.UNSUPPORTED

    def test_set(self, run_command, device_path):
        assert run_command(f"button 3 set key KEY_C {device_path}").success
        assert _button_action(device_path, button=3) == {"type": "key", "key": 46}

    def test_disable(self, run_command, device_path):
        result = run_command(f"button 1 disable {device_path}")
        assert result.message == "Button 1 disabled"
        assert _button_action(device_path, button=1) == {"type": "none"}

    def test_profile_button(self, run_command, device_path):
        """Mapping through an explicit profile changes that profile."""
        assert run_command(f"profile 1 button 0 set key KEY_A {device_path}").success
        assert _button_action(device_path, profile=1) == {"type": "key", "key": 30}
        assert _button_action(device_path, profile=0) == {"type": "button", "button": 1}


class TestSwitchEtekcityCommand:
    """Tests for switch-etekcity."""

    @pytest.fixture
    def etekcity(self, make_device, device_data):
        """Factory for an eight-button device with the given button 6 and 7 actions."""

        def _make(action_6, action_7):
            data = device_data(num_buttons=8)
            data["profiles"][0]["buttons"][6]["action"] = action_6
            data["profiles"][0]["buttons"][7]["action"] = action_7
            return make_device(data=data)

        return _make

    def test_enables_volume_keys(self, run_command, etekcity):
        path = etekcity({"type": "none"}, {"type": "none"})
        result = run_command(f"switch-etekcity {path}")
        assert result.message == "Switched the current profile of 'Test Mouse' to report the volume keys"
        assert _button_action(path, button=6) == {"type": "key", "key": 115}
        assert _button_action(path, button=7) == {"type": "key", "key": 114}

    def test_disables_volume_keys(self, run_command, etekcity):
        path = etekcity(
            {"type": "key", "key": 115}, {"type": "key", "key": 114}
        )
        result = run_command(f"switch-etekcity {path}")
        assert result.message == (
            "Switched the current profile of 'Test Mouse' to not report the volume keys"
        )
        assert _button_action(path, button=6) == {"type": "none"}

    def test_other_mappings_left_alone(self, run_command, etekcity):
        path = etekcity(
            {"type": "button", "button": 7}, {"type": "button", "button": 8}
        )
        before = Path(path).read_bytes()
        assert run_command(f"switch-etekcity {path}").success
        assert Path(path).read_bytes() == before

    def test_needs_profile_capability(self, run_command, make_device):
        path = make_device(capabilities=("button-key",), num_buttons=8)
        assert run_command(f"switch-etekcity {path}").code == ExitCode.UNSUPPORTED

    def test_needs_eight_buttons(self, run_command, device_path):
        result = run_command(f"switch-etekcity {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "Invalid button number 6"


# ============================================================================
# Profiles
# ============================================================================

class TestProfileCommands:
    """Tests for profile active get/set."""

    def test_active_get(self, run_command, make_device):
        path = make_device(active_profile=1)
        assert run_command(f"profile active get {path}").message == "1"

    def test_active_get_without_switchable_profiles(self, run_command, make_device):
        path = make_device(capabilities=("button-key",), active_profile=1)
        assert run_command(f"profile active get {path}").message == "0"

    def test_active_set(self, run_command, device_path):
        result = run_command(f"profile active set 1 {device_path}")
        assert result.message == "Switched 'Test Mouse' to profile '1'"
        profiles = _read(device_path)["profiles"]
        assert [p["active"] for p in profiles] == [False, True]

    def test_active_set_already_active(self, run_command, device_path):
        result = run_command(f"profile active set 0 {device_path}")
        assert result.message == "'Test Mouse' is already in profile '0'"

    def test_active_set_out_of_range(self, run_command, device_path):
        result = run_command(f"profile active set 2 {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "'2' is not a valid profile"

    def test_active_set_without_capability(self, run_command, make_device):
        path = make_device(capabilities=())
        result = run_command(f"profile active set 1 {path}")
        assert result.code == ExitCode.UNSUPPORTED

    @pytest.mark.parametrize("arg", ["one", "-1", ""])
    def test_active_set_bad_argument(self, run_command, device_path, arg):
        result = run_command(f"profile active set {arg} {device_path}")
        assert result.code == ExitCode.USAGE

    def test_unknown_profile(self, run_command, device_path):
        result = run_command(f"profile 5 active get {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "Unable to find profile 5"


# ============================================================================
# Resolutions and DPI
# ============================================================================

class TestResolutionCommands:
    """Tests for resolution active get/set and dpi."""

    def test_active_get(self, run_command, device_path):
        assert run_command(f"resolution active get {device_path}").message == "1"

    def test_active_set(self, run_command, device_path):
        result = run_command(f"resolution active set 2 {device_path}")
        assert result.message == "Switched profile '0' to resolution '2'"
        resolutions = _read(device_path)["profiles"][0]["resolutions"]
        assert [r["active"] for r in resolutions] == [False, False, True]

    def test_active_set_out_of_range(self, run_command, device_path):
        result = run_command(f"resolution active set 3 {device_path}")
        assert result.code == ExitCode.UNSUPPORTED

    def test_unknown_resolution(self, run_command, device_path):
        result = run_command(f"resolution 7 dpi get {device_path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert result.message == "Unable to retrieve resolution 7"

    def test_dpi_get(self, run_command, device_path):
        assert run_command(f"dpi get {device_path}").message == "1600"

    def test_dpi_get_explicit_resolution(self, run_command, device_path):
        assert run_command(f"resolution 0 dpi get {device_path}").message == "800"

    def test_dpi_set(self, run_command, device_path):
        result = run_command(f"dpi set 900 {device_path}")
        assert result.success
        assert result.data == {"dpi": 900}
        assert _read(device_path)["profiles"][0]["resolutions"][1]["dpi"] == 900

    def test_dpi_set_through_profile_and_resolution(self, run_command, device_path):
        assert run_command(f"profile 1 resolution 2 dpi set 1200 {device_path}").success
        assert _read(device_path)["profiles"][1]["resolutions"][2]["dpi"] == 1200

    @pytest.mark.parametrize("args", ["0", "fast", "", "900 1000"])
    def test_dpi_set_usage(self, run_command, device_path, args):
        assert run_command(f"dpi set {args} {device_path}").code == ExitCode.USAGE

    def test_dpi_set_without_capability(self, run_command, make_device):
        path = make_device(capabilities=("button-key",))
        before = Path(path).read_bytes()
        result = run_command(f"resolution dpi set 900 {path}")
        assert result.code == ExitCode.UNSUPPORTED
        assert Path(path).read_bytes() == before

    def test_dpi_set_rejected(self, run_command, device_path):
        result = run_command(f"dpi set 99999 {device_path}")
        assert result.code == ExitCode.DEVICE
        assert result.message.startswith("Failed to change the dpi: ")
