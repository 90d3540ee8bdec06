from mobilerobot.config_manager.config_manager import (
    DeviceConfig,
    ExecutorConfig,
    GestureConfig,
    HelperAppConfig,
    LoggingConfig,
    RetriesConfig,
    RetryConfig,
    RobotConfig,
    load_config,
)
from mobilerobot.config_manager.path_resolver import PathResolver, resolve_adb_path

__all__ = [
    "RobotConfig",
    "ExecutorConfig",
    "RetryConfig",
    "RetriesConfig",
    "GestureConfig",
    "HelperAppConfig",
    "DeviceConfig",
    "LoggingConfig",
    "load_config",
    "PathResolver",
    "resolve_adb_path",
]
