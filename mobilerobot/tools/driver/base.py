"""Robot - device control interface.

Subclasses implement the actual communication (ADB today; simulators and
other transports fit the same surface). Unsupported methods are detected via
the ``supported`` set, not introspection.
"""

from __future__ import annotations

from typing import List

from mobilerobot.models import (
    Button,
    InstalledApp,
    Orientation,
    ScreenElement,
    ScreenSize,
    SwipeDirection,
)


class ActionableError(Exception):
    """A failure the operator can fix; the message is shown verbatim."""


class Robot:
    """Base class for all robots.

    Every method raises ``NotImplementedError`` by default.
    Concrete robots override the methods they support and declare them
    in the ``supported`` class-level set.
    """

    supported: set[str] = set()

    # -- screen --------------------------------------------------------------

    async def get_screen_size(self) -> ScreenSize:
        """Return the current screen dimensions."""
        raise NotImplementedError

    async def get_screenshot(self) -> bytes:
        """Capture the current screen as raw PNG bytes."""
        raise NotImplementedError

    async def get_elements_on_screen(self) -> List[ScreenElement]:
        """Return the visible elements carrying text, a label or a hint."""
        raise NotImplementedError

    async def get_orientation(self) -> Orientation:
        raise NotImplementedError

    async def set_orientation(self, orientation: Orientation) -> None:
        raise NotImplementedError

    # -- input actions -------------------------------------------------------

    async def tap(self, x: int, y: int) -> None:
        """Tap at absolute pixel coordinates."""
        raise NotImplementedError

    async def double_tap(self, x: int, y: int) -> None:
        raise NotImplementedError

    async def long_press(self, x: int, y: int) -> None:
        raise NotImplementedError

    async def swipe(self, direction: SwipeDirection | str) -> None:
        """Swipe across the whole screen."""
        raise NotImplementedError

    async def swipe_from_coordinate(
        self,
        x: int,
        y: int,
        direction: SwipeDirection | str,
        distance: int | None = None,
    ) -> None:
        """Swipe starting at (x, y)."""
        raise NotImplementedError

    async def send_keys(self, text: str) -> None:
        """Type *text* into the currently focused field."""
        raise NotImplementedError

    async def press_button(self, button: Button | str) -> None:
        raise NotImplementedError

    # -- app management ------------------------------------------------------

    async def list_apps(self) -> List[InstalledApp]:
        raise NotImplementedError

    async def launch_app(self, package_name: str) -> None:
        raise NotImplementedError

    async def terminate_app(self, package_name: str) -> None:
        raise NotImplementedError

    async def install_app(self, path: str) -> None:
        raise NotImplementedError

    async def uninstall_app(self, package_name: str) -> None:
        raise NotImplementedError

    async def open_url(self, url: str) -> None:
        raise NotImplementedError
