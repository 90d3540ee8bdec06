from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import yaml

from mobilerobot.config_manager.path_resolver import PathResolver

logger = logging.getLogger("mobilerobot")

CONFIG_ENV_VAR = "MOBILEROBOT_CONFIG"


# ---------- Config Schema ----------
@dataclass
class ExecutorConfig:
    """How the adb binary is located and invoked."""

    adb_path: Optional[str] = None
    timeout: float = 30.0
    max_buffer_size: int = 4 * 1024 * 1024


@dataclass
class RetryConfig:
    """Attempt count and pause between attempts for one retry site."""

    max_attempts: int = 3
    backoff_ms: int = 500

    @property
    def backoff_seconds(self) -> float:
        return self.backoff_ms / 1000


@dataclass
class RetriesConfig:
    """Retry sites of the UI tree extractor."""

    # "null root node" from uiautomator, retried back to back
    ui_dump: RetryConfig = field(
        default_factory=lambda: RetryConfig(max_attempts=10, backoff_ms=0)
    )
    # empty element list while the screen is transitioning
    elements: RetryConfig = field(
        default_factory=lambda: RetryConfig(max_attempts=3, backoff_ms=500)
    )


@dataclass
class GestureConfig:
    """Timings of synthesized gestures."""

    swipe_duration_ms: int = 1000
    long_press_duration_ms: int = 500
    double_tap_pause_ms: int = 100


@dataclass
class HelperAppConfig:
    """Optional on-device clipboard helper (mobilenext DeviceKit)."""

    package: str = "com.mobilenext.devicekit"
    receiver: str = ".ClipboardBroadcastReceiver"
    set_action: str = "devicekit.clipboard.set"
    clear_action: str = "devicekit.clipboard.clear"
    install_url: str = "https://github.com/mobile-next/devicekit-android"

    @property
    def component(self) -> str:
        return f"{self.package}/{self.receiver}"


@dataclass
class DeviceConfig:
    """Device-related configuration."""

    serial: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    debug: bool = False


@dataclass
class RobotConfig:
    """Complete mobilerobot configuration schema."""

    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    retries: RetriesConfig = field(default_factory=RetriesConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    helper: HelperAppConfig = field(default_factory=HelperAppConfig)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RobotConfig":
        """Create config from dictionary."""
        retries_data = data.get("retries", {}) or {}
        defaults = RetriesConfig()

        ui_dump_data = retries_data.get("ui_dump", {})
        ui_dump_config = (
            RetryConfig(**{**asdict(defaults.ui_dump), **ui_dump_data})
            if ui_dump_data
            else defaults.ui_dump
        )

        elements_data = retries_data.get("elements", {})
        elements_config = (
            RetryConfig(**{**asdict(defaults.elements), **elements_data})
            if elements_data
            else defaults.elements
        )

        return cls(
            executor=ExecutorConfig(**data.get("executor", {})),
            retries=RetriesConfig(ui_dump=ui_dump_config, elements=elements_config),
            gestures=GestureConfig(**data.get("gestures", {})),
            helper=HelperAppConfig(**data.get("helper", {})),
            device=DeviceConfig(**data.get("device", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "RobotConfig":
        """
        Create config from YAML file.

        Args:
            path: Path to YAML config file (can be relative or absolute)

        Returns:
            RobotConfig instance

        Raises:
            FileNotFoundError: If the YAML file doesn't exist
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.warning(f"Malformed YAML in {path}, using defaults: {e}")
                return cls()
            if data:
                try:
                    return cls.from_dict(data)
                except Exception as e:
                    logger.warning(
                        f"Failed to parse config from {path}, using defaults: {e}"
                    )
                    return cls()
            else:
                logger.warning(f"Empty config file at {path}, using defaults")
                return cls()


def load_config(path: Optional[str] = None) -> RobotConfig:
    """Load configuration.

    Resolution order:
    1) Explicit path arg (must exist)
    2) MOBILEROBOT_CONFIG env var (must exist)
    3) Default "config.yaml" (working dir, then project dir); defaults if absent
    """
    if path:
        return RobotConfig.from_yaml(str(PathResolver.resolve(path, must_exist=True)))

    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return RobotConfig.from_yaml(str(PathResolver.resolve(env, must_exist=True)))

    default_path = PathResolver.resolve("config.yaml")
    if default_path.exists():
        return RobotConfig.from_yaml(str(default_path))

    logger.debug("No config.yaml found, using defaults")
    return RobotConfig()
