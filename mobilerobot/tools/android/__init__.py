"""ADB plumbing: process execution, discovery, displays and text input."""

from mobilerobot.tools.android.device_manager import (
    AndroidDeviceManager,
    classify_device_type,
)
from mobilerobot.tools.android.display import DisplayResolver
from mobilerobot.tools.android.executor import (
    AdbExecutor,
    CommandError,
    CommandExecutor,
    CommandTimeoutError,
)
from mobilerobot.tools.android.text_input import TextInputStrategy, escape_shell_text

__all__ = [
    "AdbExecutor",
    "AndroidDeviceManager",
    "CommandError",
    "CommandExecutor",
    "CommandTimeoutError",
    "DisplayResolver",
    "TextInputStrategy",
    "classify_device_type",
    "escape_shell_text",
]
