"""
Tests for the diagnostic CLI.
"""
import json
import logging

import pytest
from click.testing import CliRunner

from mobilerobot.cli.main import cli
from mobilerobot.config_manager.config_manager import CONFIG_ENV_VAR
from mobilerobot.models import AndroidDevice, DeviceType, ScreenElement, ScreenElementRect
from mobilerobot.tools import ActionableError, AndroidDeviceManager, AndroidRobot


@pytest.fixture(autouse=True)
def restore_logger(monkeypatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger("mobilerobot")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers, logger.level, logger.propagate = saved


@pytest.fixture
def runner():
    return CliRunner()


def fake_devices(*devices):
    async def list_devices(self):
        return list(devices)

    return list_devices


def test_devices(runner, monkeypatch):
    monkeypatch.setattr(
        AndroidDeviceManager,
        "list_devices",
        fake_devices(AndroidDevice(device_id="emulator-5554", device_type=DeviceType.MOBILE)),
    )

    result = runner.invoke(cli, ["devices"])

    assert result.exit_code == 0
    assert "emulator-5554" in result.output
    assert "mobile" in result.output


def test_no_devices(runner, monkeypatch):
    monkeypatch.setattr(AndroidDeviceManager, "list_devices", fake_devices())

    result = runner.invoke(cli, ["devices"])

    assert result.exit_code == 0
    assert "No devices connected" in result.output


def test_commands_without_a_device_fail_cleanly(runner, monkeypatch):
    monkeypatch.setattr(AndroidDeviceManager, "list_devices", fake_devices())

    result = runner.invoke(cli, ["tap", "1", "2"])

    assert result.exit_code == 1
    assert "No devices connected" in result.output


def test_tap_uses_given_device(runner, monkeypatch):
    taps = []

    async def tap(self, x, y):
        taps.append((self.device_id, x, y))

    monkeypatch.setattr(AndroidRobot, "tap", tap)

    result = runner.invoke(cli, ["--device", "R58M12345", "tap", "10", "20"])

    assert result.exit_code == 0, result.output
    assert taps == [("R58M12345", 10, 20)]


def test_actionable_errors_exit_with_status_one(runner, monkeypatch):
    async def send_keys(self, text):
        raise ActionableError("Non-ASCII text is not supported on Android")

    monkeypatch.setattr(AndroidRobot, "send_keys", send_keys)

    result = runner.invoke(cli, ["-d", "emulator-5554", "type", "héllo"])

    assert result.exit_code == 1
    assert "Non-ASCII text is not supported" in result.output


def test_elements_are_printed_as_json(runner, monkeypatch):
    async def elements(self):
        return [
            ScreenElement(
                type="android.widget.Button",
                text="OK",
                label="",
                rect=ScreenElementRect(x=1, y=2, width=3, height=4),
            )
        ]

    monkeypatch.setattr(AndroidRobot, "get_elements_on_screen", elements)

    result = runner.invoke(cli, ["-d", "emulator-5554", "elements"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"type": "android.widget.Button", "text": "OK", "label": "", "rect": {"x": 1, "y": 2, "width": 3, "height": 4}}
    ]


def test_unknown_button_is_rejected_by_click(runner):
    result = runner.invoke(cli, ["-d", "emulator-5554", "press", "POWER"])
    assert result.exit_code == 2


def test_serial_from_config_file(runner, monkeypatch, tmp_path):
    config = tmp_path / "robot.yaml"
    config.write_text("device:\n  serial: from-config\n")
    seen = []

    async def press_button(self, button):
        seen.append(self.device_id)

    monkeypatch.setattr(AndroidRobot, "press_button", press_button)

    result = runner.invoke(cli, ["-c", str(config), "press", "HOME"])

    assert result.exit_code == 0, result.output
    assert seen == ["from-config"]
