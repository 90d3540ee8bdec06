"""Robot abstractions for mobilerobot."""

from mobilerobot.tools.driver.base import ActionableError, Robot
from mobilerobot.tools.driver.android import BUTTON_MAP, AndroidRobot

__all__ = [
    "ActionableError",
    "Robot",
    "AndroidRobot",
    "BUTTON_MAP",
]
