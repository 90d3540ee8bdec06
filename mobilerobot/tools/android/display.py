"""DisplayResolver - picks the display to capture on multi-display devices.

Resolution runs an ordered list of probes; the first one returning an id
wins. A probe whose command is unavailable on the device is skipped.
"""

from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable, Dict, List, Optional

from mobilerobot.tools.android.executor import CommandError, CommandExecutor

logger = logging.getLogger("mobilerobot")

LOCAL_PREFIX = "local:"

GET_DISPLAYS_UNIQUE_ID = re.compile(r'uniqueId "([^"]+)"')
INTERNAL_VIEWPORT = re.compile(
    r"DisplayViewport\{type=INTERNAL[^}]*isActive=true[^}]*uniqueId='([^']+)'"
)
DISPLAY_STATE_ON = re.compile(r"Display Id=(\d+)[\s\S]*?Display State=ON")


def strip_local_prefix(display_id: str) -> str:
    if display_id.startswith(LOCAL_PREFIX):
        return display_id[len(LOCAL_PREFIX):]
    return display_id


def parse_get_displays(output: str) -> Optional[str]:
    """First turned-on display with a unique id in ``cmd display get-displays``."""
    displays = [
        line
        for line in output.split("\n")
        if line.startswith("Display id ")
        and ", state ON," in line
        and ", uniqueId " in line
    ]
    if not displays:
        return None
    match = GET_DISPLAYS_UNIQUE_ID.search(displays[0])
    if match is None:
        return None
    return strip_local_prefix(match.group(1))


def parse_internal_viewport(dumpsys: str) -> Optional[str]:
    """Active internal viewport in ``dumpsys display``."""
    match = INTERNAL_VIEWPORT.search(dumpsys)
    if match is None:
        return None
    return strip_local_prefix(match.group(1))


def parse_display_state_on(dumpsys: str) -> Optional[str]:
    """Numeric id of a display reported ON in ``dumpsys display``."""
    match = DISPLAY_STATE_ON.search(dumpsys)
    if match is None:
        return None
    return match.group(1)


Probe = Callable[[Dict[str, Optional[str]]], Awaitable[Optional[str]]]


class DisplayResolver:
    """Finds the active display of a device through layered fallbacks."""

    def __init__(self, adb: CommandExecutor) -> None:
        self.adb = adb
        self.probes: List[Probe] = [
            self.probe_get_displays,
            self.probe_internal_viewport,
            self.probe_display_state_on,
        ]

    async def _shell(self, *args: str) -> str:
        output = await self.adb.execute(["shell", *args])
        return output.decode("utf-8", errors="replace")

    async def get_display_count(self) -> int:
        output = await self._shell("dumpsys", "SurfaceFlinger", "--display-id")
        return len([line for line in output.split("\n") if line.startswith("Display ")])

    async def _dumpsys_display(self, cache: Dict[str, Optional[str]]) -> str:
        # fetched once per resolution, a failure included
        if "dumpsys" not in cache:
            cache["dumpsys"] = None
            cache["dumpsys"] = await self._shell("dumpsys", "display")
        if cache["dumpsys"] is None:
            raise CommandError("dumpsys display is unavailable")
        return cache["dumpsys"]

    # -- probes --------------------------------------------------------------

    async def probe_get_displays(self, cache: Dict[str, Optional[str]]) -> Optional[str]:
        # Android 11+
        return parse_get_displays(await self._shell("cmd", "display", "get-displays"))

    async def probe_internal_viewport(self, cache: Dict[str, Optional[str]]) -> Optional[str]:
        return parse_internal_viewport(await self._dumpsys_display(cache))

    async def probe_display_state_on(self, cache: Dict[str, Optional[str]]) -> Optional[str]:
        return parse_display_state_on(await self._dumpsys_display(cache))

    async def resolve_capture_display(self) -> Optional[str]:
        """Return the display id to capture, or None for the tool's default."""
        cache: Dict[str, Optional[str]] = {}
        for probe in self.probes:
            try:
                display_id = await probe(cache)
            except CommandError as e:
                logger.debug(f"Display probe {probe.__name__} failed: {e}")
                continue
            if display_id is not None:
                logger.debug(f"Display probe {probe.__name__} chose {display_id}")
                return display_id
        return None
