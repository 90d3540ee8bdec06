"""AndroidRobot - ADB-based robot.

Composes the executor, geometry, display resolution, UI extraction and text
input strategies into the public ``Robot`` surface.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from mobilerobot.config_manager.config_manager import RobotConfig
from mobilerobot.models import (
    Button,
    DeviceHardwareInfo,
    InstalledApp,
    Orientation,
    ScreenElement,
    ScreenSize,
    SwipeDirection,
)
from mobilerobot.tools.android.device_manager import get_system_features
from mobilerobot.tools.android.display import DisplayResolver
from mobilerobot.tools.android.executor import AdbExecutor, CommandError, CommandExecutor
from mobilerobot.tools.android.text_input import TextInputStrategy, escape_shell_text
from mobilerobot.tools.driver.base import ActionableError, Robot
from mobilerobot.tools.helpers.geometry import compute_swipe_endpoints, parse_direction
from mobilerobot.tools.ui.provider import AndroidElementProvider

logger = logging.getLogger("mobilerobot")

BUTTON_MAP = {
    Button.BACK: "KEYCODE_BACK",
    Button.HOME: "KEYCODE_HOME",
    Button.VOLUME_UP: "KEYCODE_VOLUME_UP",
    Button.VOLUME_DOWN: "KEYCODE_VOLUME_DOWN",
    Button.ENTER: "KEYCODE_ENTER",
    Button.DPAD_CENTER: "KEYCODE_DPAD_CENTER",
    Button.DPAD_UP: "KEYCODE_DPAD_UP",
    Button.DPAD_DOWN: "KEYCODE_DPAD_DOWN",
    Button.DPAD_LEFT: "KEYCODE_DPAD_LEFT",
    Button.DPAD_RIGHT: "KEYCODE_DPAD_RIGHT",
}

HARDWARE_PROPERTIES = {
    "manufacturer": "ro.product.manufacturer",
    "model": "ro.product.model",
    "brand": "ro.product.brand",
    "device": "ro.product.device",
    "android_version": "ro.build.version.release",
    "sdk_version": "ro.build.version.sdk",
    "cpu_abi": "ro.product.cpu.abi",
    "build_id": "ro.build.id",
}


def _output_of(error: CommandError) -> str:
    return error.output or str(error)


class AndroidRobot(Robot):
    """Controls one Android device through ``adb -s <device_id>``."""

    supported = {
        "get_screen_size",
        "get_screenshot",
        "get_elements_on_screen",
        "get_orientation",
        "set_orientation",
        "tap",
        "double_tap",
        "long_press",
        "swipe",
        "swipe_from_coordinate",
        "send_keys",
        "press_button",
        "list_apps",
        "launch_app",
        "terminate_app",
        "install_app",
        "uninstall_app",
        "open_url",
    }

    def __init__(
        self,
        device_id: str,
        config: Optional[RobotConfig] = None,
        executor: Optional[CommandExecutor] = None,
    ) -> None:
        self.device_id = device_id
        self.config = config or RobotConfig()
        self.adb = executor or AdbExecutor(device_id, self.config.executor)

        self.display_resolver = DisplayResolver(self.adb)
        self.element_provider = AndroidElementProvider(self.config.retries)
        self.text_input = TextInputStrategy(self.adb, self.config.helper)

    async def _shell(self, *args: str) -> str:
        output = await self.adb.execute(["shell", *args])
        return output.decode("utf-8", errors="replace")

    # -- device info ---------------------------------------------------------

    async def get_system_features(self) -> List[str]:
        return await get_system_features(self.adb)

    async def get_screen_size(self) -> ScreenSize:
        # "Physical size: 1080x2400", possibly followed by "Override size: ..."
        output = (await self._shell("wm", "size")).split()
        if not output:
            raise RuntimeError("Failed to get screen size")
        try:
            width, height = (int(v) for v in output[-1].split("x"))
        except ValueError as e:
            raise RuntimeError(f"Failed to get screen size: {output[-1]}") from e
        return ScreenSize(width=width, height=height, scale=1)

    async def get_device_hardware_info(self) -> DeviceHardwareInfo:
        values = {}
        for name, prop in HARDWARE_PROPERTIES.items():
            values[name] = (await self._shell("getprop", prop)).strip()
        return DeviceHardwareInfo(**values)

    # -- app management ------------------------------------------------------

    async def list_apps(self) -> List[InstalledApp]:
        """Apps with a launcher activity."""
        output = await self._shell(
            "cmd",
            "package",
            "query-activities",
            "-a",
            "android.intent.action.MAIN",
            "-c",
            "android.intent.category.LAUNCHER",
        )
        packages = [
            line[len("packageName="):]
            for line in (raw.strip() for raw in output.split("\n"))
            if line.startswith("packageName=")
        ]
        return [
            InstalledApp(package_name=package, app_name=package)
            for package in dict.fromkeys(packages)
        ]

    async def list_packages(self) -> List[str]:
        return await self.text_input.list_packages()

    async def launch_app(self, package_name: str) -> None:
        try:
            await self.adb.execute(
                [
                    "shell",
                    "monkey",
                    "-p",
                    escape_shell_text(package_name),
                    "-c",
                    "android.intent.category.LAUNCHER",
                    "1",
                ],
                silent=True,
            )
        except CommandError as e:
            logger.debug(f"monkey failed for {package_name}: {e}")
            raise ActionableError(
                f'Failed launching app with package name "{package_name}", '
                "please make sure it exists"
            ) from e

    async def list_running_processes(self) -> List[str]:
        output = await self._shell("ps", "-e")
        processes = []
        for line in (raw.strip() for raw in output.split("\n")):
            # app processes run as u0_aNNN
            if not line.startswith("u"):
                continue
            columns = line.split()
            if len(columns) > 8:
                processes.append(columns[8])
        return processes

    async def terminate_app(self, package_name: str) -> None:
        await self._shell("am", "force-stop", escape_shell_text(package_name))

    async def install_app(self, path: str) -> None:
        try:
            await self.adb.execute(["install", "-r", path])
        except CommandError as e:
            raise ActionableError(_output_of(e)) from e

    async def uninstall_app(self, package_name: str) -> None:
        try:
            await self.adb.execute(["uninstall", package_name])
        except CommandError as e:
            raise ActionableError(_output_of(e)) from e

    async def open_url(self, url: str) -> None:
        # adb shell joins its arguments into one device command line
        await self._shell(
            "am", "start", "-a", "android.intent.action.VIEW", "-d", escape_shell_text(url)
        )

    # -- gestures ------------------------------------------------------------

    async def _input_swipe(self, x0: int, y0: int, x1: int, y1: int, duration_ms: int) -> None:
        await self._shell("input", "swipe", str(x0), str(y0), str(x1), str(y1), str(duration_ms))

    async def swipe(self, direction: SwipeDirection | str) -> None:
        direction = parse_direction(direction)
        screen_size = await self.get_screen_size()
        x0, y0, x1, y1 = compute_swipe_endpoints(screen_size, direction)
        await self._input_swipe(x0, y0, x1, y1, self.config.gestures.swipe_duration_ms)

    async def swipe_from_coordinate(
        self,
        x: int,
        y: int,
        direction: SwipeDirection | str,
        distance: int | None = None,
    ) -> None:
        direction = parse_direction(direction)
        screen_size = await self.get_screen_size()
        x0, y0, x1, y1 = compute_swipe_endpoints(
            screen_size, direction, origin=(x, y), distance=distance
        )
        await self._input_swipe(x0, y0, x1, y1, self.config.gestures.swipe_duration_ms)

    async def tap(self, x: int, y: int) -> None:
        await self._shell("input", "tap", str(x), str(y))

    async def long_press(self, x: int, y: int) -> None:
        # a swipe that goes nowhere, held long enough
        await self._input_swipe(x, y, x, y, self.config.gestures.long_press_duration_ms)

    async def double_tap(self, x: int, y: int) -> None:
        await self.tap(x, y)
        await asyncio.sleep(self.config.gestures.double_tap_pause_ms / 1000)
        await self.tap(x, y)

    async def press_button(self, button: Button | str) -> None:
        try:
            keycode = BUTTON_MAP[Button(button)]
        except ValueError:
            raise ActionableError(f'Button "{button}" is not supported')
        await self._shell("input", "keyevent", keycode)

    # -- text ----------------------------------------------------------------

    async def send_keys(self, text: str) -> None:
        await self.text_input.send_text(text)

    async def set_clipboard(self, text: str) -> None:
        await self.text_input.set_clipboard(text)

    async def get_clipboard(self) -> str:
        return await self.text_input.get_clipboard()

    async def paste_from_clipboard(self) -> None:
        await self.text_input.paste_from_clipboard()

    async def clear_text_field(self) -> None:
        await self.text_input.clear_text_field()

    # -- state / observation -------------------------------------------------

    async def get_screenshot(self) -> bytes:
        if await self.display_resolver.get_display_count() <= 1:
            # single display, or too old for multi-display commands
            return await self.adb.execute(["exec-out", "screencap", "-p"])

        display_id = await self.display_resolver.resolve_capture_display()
        if display_id is None:
            logger.warning(
                "Several displays reported but none resolved, using screencap default"
            )
            return await self.adb.execute(["exec-out", "screencap", "-p"])

        return await self.adb.execute(["exec-out", "screencap", "-p", "-d", display_id])

    async def get_elements_on_screen(self) -> List[ScreenElement]:
        return await self.element_provider.get_elements(self.adb)

    async def set_orientation(self, orientation: Orientation | str) -> None:
        try:
            orientation = Orientation(orientation)
        except ValueError:
            raise ActionableError(f'Orientation "{orientation}" is not supported')
        value = 0 if orientation is Orientation.PORTRAIT else 1

        # auto-rotation would override user_rotation
        await self._shell("settings", "put", "system", "accelerometer_rotation", "0")
        await self._shell(
            "content",
            "insert",
            "--uri",
            "content://settings/system",
            "--bind",
            "name:s:user_rotation",
            "--bind",
            f"value:i:{value}",
        )

    async def get_orientation(self) -> Orientation:
        rotation = (await self._shell("settings", "get", "system", "user_rotation")).strip()
        return Orientation.PORTRAIT if rotation == "0" else Orientation.LANDSCAPE
