"""
Pydantic models shared by every robot.

These describe what a robot hands back to its caller: screen geometry, UI
elements, installed apps and attached devices.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enumerations
# =============================================================================


class SwipeDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Orientation(str, Enum):
    """Two-way orientation derived from the device's rotation setting.

    Rotation 0 is portrait; every other rotation collapses into landscape.
    """

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class Button(str, Enum):
    BACK = "BACK"
    HOME = "HOME"
    VOLUME_UP = "VOLUME_UP"
    VOLUME_DOWN = "VOLUME_DOWN"
    ENTER = "ENTER"
    DPAD_CENTER = "DPAD_CENTER"
    DPAD_UP = "DPAD_UP"
    DPAD_DOWN = "DPAD_DOWN"
    DPAD_LEFT = "DPAD_LEFT"
    DPAD_RIGHT = "DPAD_RIGHT"


class DeviceType(str, Enum):
    TV = "tv"
    MOBILE = "mobile"


# =============================================================================
# Screen models
# =============================================================================


class ScreenSize(BaseModel):
    """Screen dimensions in device pixels."""

    width: int
    height: int
    scale: float = 1


class ScreenElementRect(BaseModel):
    """Bounding rectangle of an on-screen element, in device pixels."""

    x: int
    y: int
    width: int
    height: int


class ScreenElement(BaseModel):
    """An element worth showing to an agent: it has text, a label or a hint."""

    type: str
    text: Optional[str] = None
    label: str = ""
    rect: ScreenElementRect
    focused: Optional[bool] = Field(
        default=None, description="Only set when the element is focused"
    )
    identifier: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, leaving out fields the device did not report."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# Device / app models
# =============================================================================


class InstalledApp(BaseModel):
    """A launchable app.

    ``app_name`` is the package name: no human readable label is resolved.
    """

    package_name: str
    app_name: str


class AndroidDevice(BaseModel):
    device_id: str
    device_type: DeviceType


class DeviceHardwareInfo(BaseModel):
    manufacturer: str
    model: str
    brand: str
    device: str
    android_version: str
    sdk_version: str
    cpu_abi: str
    build_id: str
