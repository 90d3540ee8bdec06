"""
mobilerobot tools - device control for Android.
"""

from mobilerobot.tools.driver import ActionableError, AndroidRobot, Robot
from mobilerobot.tools.android import (
    AndroidDeviceManager,
    CommandError,
    CommandTimeoutError,
)

__all__ = [
    "ActionableError",
    "AndroidDeviceManager",
    "AndroidRobot",
    "CommandError",
    "CommandTimeoutError",
    "Robot",
]
