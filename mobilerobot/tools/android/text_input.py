"""TextInputStrategy - delivers text and clipboard content to the device.

``adb shell input text`` only handles ASCII and goes through the device
shell, so its argument must be escaped. When the DeviceKit helper app is
installed, text travels base64 encoded through its clipboard broadcast
receiver and is pasted instead, which works for any script.
"""

from __future__ import annotations

import base64
import logging
import re
from typing import List, Optional

from mobilerobot.config_manager.config_manager import HelperAppConfig
from mobilerobot.tools.android.executor import CommandExecutor
from mobilerobot.tools.driver.base import ActionableError

logger = logging.getLogger("mobilerobot")

# \ ' " ` space tab newline CR | & ; ( ) < > { } [ ] $ * ?
SHELL_SPECIAL_CHARS = re.compile(r"([\\'\"` \t\n\r|&;()<>{}\[\]$*?])")

KEYCODE_PASTE = "KEYCODE_PASTE"


def is_ascii(text: str) -> bool:
    return text.isascii()


def escape_shell_text(text: str) -> str:
    """Backslash-escape every character the device shell would interpret."""
    return SHELL_SPECIAL_CHARS.sub(r"\\\1", text)


def parse_packages(output: str) -> List[str]:
    """Extract package names from ``pm list packages`` output."""
    return [
        line[len("package:"):]
        for line in (raw.strip() for raw in output.split("\n"))
        if line.startswith("package:")
    ]


class TextInputStrategy:
    """Chooses between the clipboard helper and plain ``input text``."""

    def __init__(
        self, adb: CommandExecutor, helper: Optional[HelperAppConfig] = None
    ) -> None:
        self.adb = adb
        self.helper = helper or HelperAppConfig()

    def _non_ascii_error(self) -> ActionableError:
        return ActionableError(
            "Non-ASCII text is not supported on Android, please install mobilenext "
            f"devicekit, see {self.helper.install_url}"
        )

    async def list_packages(self) -> List[str]:
        output = await self.adb.execute(["shell", "pm", "list", "packages"])
        return parse_packages(output.decode("utf-8", errors="replace"))

    async def is_helper_installed(self) -> bool:
        # not cached: the helper can be installed or removed between calls
        return self.helper.package in await self.list_packages()

    # -- helper broadcasts ---------------------------------------------------

    async def _broadcast_set_clipboard(self, text: str) -> None:
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        await self.adb.execute(
            [
                "shell",
                "am",
                "broadcast",
                "-a",
                self.helper.set_action,
                "-e",
                "encoding",
                "base64",
                "-e",
                "text",
                encoded,
                "-n",
                self.helper.component,
            ]
        )

    async def _broadcast_clear_clipboard(self) -> None:
        await self.adb.execute(
            [
                "shell",
                "am",
                "broadcast",
                "-a",
                self.helper.clear_action,
                "-n",
                self.helper.component,
            ]
        )

    # -- operations ----------------------------------------------------------

    async def send_text(self, text: str) -> None:
        """Type *text* into the focused field.

        Raises:
            ActionableError: non-ASCII text without the helper app
        """
        if text == "":
            # nothing to type, e.g. a bare "submit"
            return

        if await self.is_helper_installed():
            logger.debug(f"Sending {len(text)} characters through the clipboard helper")
            await self._broadcast_set_clipboard(text)
            await self.adb.execute(["shell", "input", "keyevent", KEYCODE_PASTE])
            await self._broadcast_clear_clipboard()
        elif is_ascii(text):
            await self.adb.execute(["shell", "input", "text", escape_shell_text(text)])
        else:
            raise self._non_ascii_error()

    async def set_clipboard(self, text: str) -> None:
        if await self.is_helper_installed():
            await self._broadcast_set_clipboard(text)
            return

        logger.debug("DeviceKit not installed, falling back to cmd clipboard")
        if not is_ascii(text):
            raise self._non_ascii_error()
        await self.adb.execute(
            ["shell", "cmd", "clipboard", "set-text", escape_shell_text(text)]
        )

    async def get_clipboard(self) -> str:
        # Android 10+
        output = await self.adb.execute(["shell", "cmd", "clipboard", "get-text"])
        return output.decode("utf-8", errors="replace").strip()

    async def paste_from_clipboard(self) -> None:
        # 279 is KEYCODE_PASTE
        await self.adb.execute(["shell", "input", "keyevent", "279"])

    async def clear_text_field(self) -> None:
        # select all, then delete
        await self.adb.execute(["shell", "input", "keycombination", "113", "29"])
        await self.adb.execute(["shell", "input", "keyevent", "67"])
