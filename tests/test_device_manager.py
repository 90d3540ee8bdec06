"""
Tests for device discovery and TV detection.
"""
import asyncio

import pytest

from mobilerobot.models import DeviceType
from mobilerobot.tools.android.device_manager import (
    AndroidDeviceManager,
    classify_device_type,
    parse_device_ids,
    parse_features,
)

FEATURES = ("shell", "pm", "list", "features")


@pytest.mark.parametrize(
    "features,expected",
    [
        (["android.software.leanback", "android.hardware.wifi"], DeviceType.TV),
        (["android.hardware.type.television"], DeviceType.TV),
        (["android.hardware.telephony", "android.hardware.touchscreen"], DeviceType.MOBILE),
        ([], DeviceType.MOBILE),
    ],
)
def test_classify_device_type(features, expected):
    assert classify_device_type(features) is expected


def test_parse_features():
    output = "feature:android.hardware.wifi\nfeature:android.software.leanback\n\n"
    assert parse_features(output) == ["android.hardware.wifi", "android.software.leanback"]


def test_parse_device_ids_skips_banner_and_blank_lines():
    output = "List of devices attached\nemulator-5554\tdevice\n\nR58M12345\tunauthorized\n\n"
    assert parse_device_ids(output) == ["emulator-5554", "R58M12345"]


def test_list_devices_classifies_each_device(adb, make_adb):
    per_device = {
        "emulator-5554": make_adb().on(*FEATURES, returns="feature:android.hardware.touchscreen\n"),
        "192.168.1.20:5555": make_adb().on(*FEATURES, returns="feature:android.software.leanback\n"),
    }
    adb.on("devices", returns="List of devices attached\nemulator-5554\tdevice\n192.168.1.20:5555\tdevice\n")
    manager = AndroidDeviceManager(executor=adb, device_executor_factory=per_device.__getitem__)

    devices = asyncio.run(manager.list_devices())

    assert [(d.device_id, d.device_type) for d in devices] == [
        ("emulator-5554", DeviceType.MOBILE),
        ("192.168.1.20:5555", DeviceType.TV),
    ]


def test_no_devices(adb):
    adb.on("devices", returns="List of devices attached\n\n")

    assert asyncio.run(AndroidDeviceManager(executor=adb).list_devices()) == []


def test_unusable_adb_means_no_devices(adb, caplog):
    adb.fail("devices", message="Failed to run adb: No such file or directory")

    with caplog.at_level("ERROR", logger="mobilerobot"):
        assert asyncio.run(AndroidDeviceManager(executor=adb).list_devices()) == []

    assert "maybe ANDROID_HOME is not set" in caplog.text
