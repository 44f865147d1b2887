"""Logging setup for the simulation runner.

Loads a YAML logging configuration (or built-in defaults), rotates the log
from the previous run and attaches console and file handlers to the root
logger. Domain modules only ever call ``logging.getLogger(__name__)``; this
module decides where their records end up.

Platform-specific log locations:
    - macOS: ~/Library/Logs/TowerSim/towersim.log
    - Linux: ~/.towersim/logs/towersim.log
    - Windows: %AppData%/TowerSim/Logs/towersim.log

Each run rotates logs, keeping the last 5.

Typical usage example:
    from towersim.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("towersim.runner")
    log.info("Loaded save from %s", save_dir)
"""

import logging
import logging.handlers
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

# Global configuration
_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False

LOG_FILENAME = "towersim.log"


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get the platform-specific log directory.

    Returns:
        - macOS: ~/Library/Logs/TowerSim
        - Linux: ~/.towersim/logs
        - Windows: %AppData%/TowerSim/Logs
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "TowerSim"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "TowerSim" / "Logs"
    else:
        return Path.home() / ".towersim" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = LOG_FILENAME, keep_count: int = 5) -> None:
    """Rotate logs on startup, keeping the last ``keep_count`` runs.

    The current log becomes ``<name>.1``, older logs shift up by one and the
    log beyond ``keep_count`` is deleted.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.

    Examples:
        >>> rotate_logs(Path("logs"), "towersim.log", 5)
        # towersim.log -> towersim.log.1
        # towersim.log.1 -> towersim.log.2
        # towersim.log.5 -> deleted
    """
    log_file = log_dir / log_filename

    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None, use_platform_dir: bool = True
) -> None:
    """Initialize logging from a YAML configuration.

    Call once at startup, before the simulation runs.

    Args:
        config_path: Logging configuration YAML file. Defaults are used if None.
        use_platform_dir: Write logs to the platform log directory instead of
            the ``log_dir`` given in the configuration.

    Raises:
        LoggingError: If the configuration file is missing or unreadable.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e

        _logging_config = _get_default_config()
        _logging_config.update(loaded)
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    log_dir = Path(_logging_config.get("log_dir", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    file_config = _logging_config.get("file_log", {})
    rotate_logs(
        log_dir,
        file_config.get("filename", LOG_FILENAME),
        file_config.get("backup_count", 5),
    )

    _configure_root_logger()
    _loggers_cache.clear()

    _initialized = True

    # Module loggers inherit from these, so configure them up front
    for name in _logging_config.get("components", {}):
        get_logger(name)


def _get_default_config() -> dict[str, Any]:
    return {
        "version": 1,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "file_log": {
            "enabled": True,
            "filename": LOG_FILENAME,
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def _configure_root_logger() -> None:
    """Replace the root logger's handlers with the configured ones."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Filtering happens in the handlers
    root_logger.handlers.clear()

    console_config = _logging_config.get("console", {})
    if console_config.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_config.get("level", "WARNING")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    file_config = _logging_config.get("file_log", {})
    if file_config.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        # Rotation already happened on startup, so start a fresh file
        file_handler = logging.FileHandler(
            log_dir / file_config.get("filename", LOG_FILENAME),
            mode="w",
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds to timestamps with a dot separator."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    fmt = _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    datefmt = _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    return MillisecondFormatter(fmt, datefmt)


def get_logger(name: str) -> logging.Logger:
    """Get a logger, applying any per-component settings.

    Loggers are cached. A component may be given its own level, or be
    disabled, under the ``components`` section of the logging YAML:

        components:
          towersim.control:
            level: DEBUG
          towersim.persistence:
            enabled: false

    Args:
        name: Logger name, usually a dotted module path.

    Returns:
        Configured logger instance.
    """
    if not _initialized:
        initialize_logging()

    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)
    component_config = _logging_config.get("components", {}).get(name, {})

    if component_config.get("enabled", True):
        logger.disabled = False
        if "level" in component_config:
            logger.setLevel(getattr(logging, component_config["level"]))
    else:
        logger.disabled = True

    _loggers_cache[name] = logger
    return logger


def shutdown_logging() -> None:
    """Flush and close every handler, then forget cached loggers."""
    global _initialized

    logging.shutdown()
    _loggers_cache.clear()
    _initialized = False
