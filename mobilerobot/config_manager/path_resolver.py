"""
Path resolution for mobilerobot.

Two concerns live here: locating configuration files (working directory
first, then project directory) and locating the ``adb`` executable from the
Android SDK environment.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional, Union


class PathResolver:
    """
    Path resolver for mobilerobot file operations.

    Resolution order:
    1. Absolute paths → use as-is
    2. Relative paths → check working dir first, then project dir
    """

    @staticmethod
    def get_project_root() -> Path:
        """
        Get the project root directory (where config.yaml lives).

        mobilerobot/config_manager/path_resolver.py -> project root
        """
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def resolve(
        path: Union[str, Path],
        must_exist: bool = False,
    ) -> Path:
        """
        Resolve a file path.

        Args:
            path: Path to resolve (str or Path object)
            must_exist: If True, raise FileNotFoundError if path doesn't exist

        Returns:
            Resolved Path object

        Raises:
            FileNotFoundError: If must_exist=True and path not found in any location
        """
        path = Path(path).expanduser()

        if path.is_absolute():
            if must_exist and not path.exists():
                raise FileNotFoundError(f"Path not found: {path}")
            return path

        cwd_path = Path.cwd() / path
        project_path = PathResolver.get_project_root() / path

        if cwd_path.exists():
            return cwd_path
        if project_path.exists():
            return project_path

        if must_exist:
            raise FileNotFoundError(
                f"Path not found in:\n"
                f"  - Working dir: {cwd_path}\n"
                f"  - Project dir: {project_path}"
            )

        return cwd_path


def resolve_adb_path(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    exists: Callable[[str], bool] = os.path.exists,
) -> str:
    """Locate the adb executable.

    1. ``$ANDROID_HOME/platform-tools/adb`` (trusted without checking)
    2. Windows: ``%LOCALAPPDATA%/Android/Sdk/platform-tools/adb.exe``
    3. macOS: ``~/Library/Android/sdk/platform-tools/adb``
    4. bare executable name, left to the search path

    ``environ``, ``platform`` and ``exists`` default to the real process
    environment and exist so callers can pin them.
    """
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform
    exe_name = "adb.exe" if platform == "win32" else "adb"

    android_home = environ.get("ANDROID_HOME")
    if android_home:
        return os.path.join(android_home, "platform-tools", exe_name)

    local_appdata = environ.get("LOCALAPPDATA")
    if platform == "win32" and local_appdata:
        windows_adb = os.path.join(
            local_appdata, "Android", "Sdk", "platform-tools", "adb.exe"
        )
        if exists(windows_adb):
            return windows_adb

    home = environ.get("HOME")
    if platform == "darwin" and home:
        mac_adb = os.path.join(
            home, "Library", "Android", "sdk", "platform-tools", "adb"
        )
        if exists(mac_adb):
            return mac_adb

    return exe_name
