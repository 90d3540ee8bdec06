"""
mobilerobot - drive Android devices from automation agents.
"""

__version__ = "0.1.0"

from mobilerobot.tools import (
    ActionableError,
    AndroidDeviceManager,
    AndroidRobot,
    CommandError,
    CommandTimeoutError,
    Robot,
)
from mobilerobot.config_manager import RobotConfig, load_config
from mobilerobot.models import (
    AndroidDevice,
    Button,
    DeviceType,
    InstalledApp,
    Orientation,
    ScreenElement,
    ScreenElementRect,
    ScreenSize,
    SwipeDirection,
)

__all__ = [
    # Robots
    "Robot",
    "AndroidRobot",
    "AndroidDeviceManager",
    # Errors
    "ActionableError",
    "CommandError",
    "CommandTimeoutError",
    # Configuration
    "RobotConfig",
    "load_config",
    # Models
    "AndroidDevice",
    "Button",
    "DeviceType",
    "InstalledApp",
    "Orientation",
    "ScreenElement",
    "ScreenElementRect",
    "ScreenSize",
    "SwipeDirection",
]
