"""ElementProvider - fetches the UI dump and turns it into screen elements.

Two retry layers are involved. ``uiautomator`` sometimes answers with a
"null root node" message instead of a dump, which is retried straight away.
During screen transitions the dump can parse fine yet hold no usable element;
that is retried after a short pause and finally accepted as an empty screen.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional

from mobilerobot.config_manager.config_manager import RetriesConfig
from mobilerobot.models import ScreenElement
from mobilerobot.tools.driver.base import ActionableError
from mobilerobot.tools.parsers.uiautomator_parser import (
    extract_xml,
    flatten_elements,
    parse_hierarchy,
)

if TYPE_CHECKING:
    from mobilerobot.tools.android.executor import CommandExecutor

logger = logging.getLogger("mobilerobot")

NULL_ROOT_NODE = "null root node returned by UiTestAutomationBridge"


class ElementProvider:
    """Base class - subclass to support different platforms."""

    async def get_elements(self, adb: "CommandExecutor") -> List[ScreenElement]:
        raise NotImplementedError


class AndroidElementProvider(ElementProvider):
    """Reads elements through ``uiautomator dump``."""

    def __init__(self, retries: Optional[RetriesConfig] = None) -> None:
        self.retries = retries or RetriesConfig()

    async def get_ui_dump(self, adb: "CommandExecutor") -> str:
        """Return the dump XML, retrying while uiautomator has no root node."""
        policy = self.retries.ui_dump
        for attempt in range(policy.max_attempts):
            output = await adb.execute(["exec-out", "uiautomator", "dump", "/dev/tty"])
            dump = output.decode("utf-8", errors="replace")
            if NULL_ROOT_NODE not in dump:
                return extract_xml(dump)

            logger.debug(
                f"uiautomator returned no root node "
                f"(attempt {attempt + 1}/{policy.max_attempts})"
            )
            if policy.backoff_ms and attempt < policy.max_attempts - 1:
                await asyncio.sleep(policy.backoff_seconds)

        raise ActionableError("Failed to get UIAutomator XML")

    async def get_elements(self, adb: "CommandExecutor") -> List[ScreenElement]:
        policy = self.retries.elements
        for attempt in range(policy.max_attempts):
            dump = await self.get_ui_dump(adb)
            elements = flatten_elements(parse_hierarchy(dump))
            if elements:
                return elements

            logger.debug(
                f"No elements on screen (attempt {attempt + 1}/{policy.max_attempts})"
            )
            if attempt < policy.max_attempts - 1:
                await asyncio.sleep(policy.backoff_seconds)

        # may be a genuinely empty screen
        return []
