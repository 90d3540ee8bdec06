"""Discovery of attached Android devices."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from mobilerobot.config_manager.config_manager import ExecutorConfig
from mobilerobot.models import AndroidDevice, DeviceType
from mobilerobot.tools.android.executor import (
    AdbExecutor,
    CommandError,
    CommandExecutor,
)

logger = logging.getLogger("mobilerobot")

DEVICES_BANNER = "List of devices attached"
TV_FEATURES = ("android.software.leanback", "android.hardware.type.television")


def parse_features(output: str) -> List[str]:
    """Extract feature names from ``pm list features`` output."""
    return [
        line[len("feature:"):]
        for line in (raw.strip() for raw in output.split("\n"))
        if line.startswith("feature:")
    ]


def parse_device_ids(output: str) -> List[str]:
    """Extract serials from ``adb devices`` output."""
    return [
        line.split("\t")[0]
        for line in (raw.strip() for raw in output.split("\n"))
        if line and not line.startswith(DEVICES_BANNER)
    ]


def classify_device_type(features: Iterable[str]) -> DeviceType:
    features = set(features)
    if any(feature in features for feature in TV_FEATURES):
        return DeviceType.TV
    return DeviceType.MOBILE


async def get_system_features(adb: CommandExecutor) -> List[str]:
    output = await adb.execute(["shell", "pm", "list", "features"])
    return parse_features(output.decode("utf-8", errors="replace"))


class AndroidDeviceManager:
    """Lists devices known to the adb server and tells TVs from handhelds."""

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        executor: Optional[CommandExecutor] = None,
        device_executor_factory: Optional[Callable[[str], CommandExecutor]] = None,
    ) -> None:
        self.config = config or ExecutorConfig()
        self.executor = executor or CommandExecutor(self.config)
        self._device_executor_factory = device_executor_factory or (
            lambda serial: AdbExecutor(serial, self.config)
        )

    async def get_device_type(self, device_id: str) -> DeviceType:
        features = await get_system_features(
            self._device_executor_factory(device_id)
        )
        return classify_device_type(features)

    async def list_devices(self) -> List[AndroidDevice]:
        """Return attached devices; an unusable adb means no devices."""
        try:
            output = await self.executor.execute(["devices"])
            device_ids = parse_device_ids(output.decode("utf-8", errors="replace"))

            devices = []
            for device_id in device_ids:
                devices.append(
                    AndroidDevice(
                        device_id=device_id,
                        device_type=await self.get_device_type(device_id),
                    )
                )
            return devices
        except CommandError as e:
            logger.error(
                f"Could not execute adb command, maybe ANDROID_HOME is not set? ({e})"
            )
            return []
