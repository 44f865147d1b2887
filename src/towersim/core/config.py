"""Simulation configuration loaded from YAML files.

``ConfigLoader`` gives dotted-key access to a YAML document. ``SimulationConfig``
is the typed view the runner uses: where saves live, what the four save
streams are called and how many ticks to run.

Typical usage example:
    from towersim.core.config import SimulationConfig

    config = SimulationConfig.from_file("config/towersim.yaml")
    print(config.stream_path("aircraft"))  # saves/aircraft.txt
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Save stream names, in the order the world is rebuilt from them
STREAMS = ("tick", "aircraft", "terminals", "queues")

DEFAULT_CONFIG: dict[str, Any] = {
    "save": {
        "directory": "saves",
        "files": {
            "tick": "tick.txt",
            "aircraft": "aircraft.txt",
            "terminals": "terminalsWithGates.txt",
            "queues": "queues.txt",
        },
    },
    "simulation": {"ticks_per_run": 1},
    "logging": {"config": None},
}


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Dotted-key access over a YAML configuration document.

    Examples:
        >>> config = ConfigLoader.load("config/towersim.yaml")
        >>> config.get("save.files.tick", default="tick.txt")
        'tick.txt'
    """

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader holding the document.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation, e.g. ``"simulation.ticks_per_run"``.

        Args:
            key: Configuration key.
            default: Value returned when any part of the key is missing.

        Returns:
            Configuration value or default.
        """
        value: Any = self._data

        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation, creating sections as needed.

        Examples:
            >>> config.set("save.directory", "/tmp/airport")
        """
        parts = key.split(".")
        data = self._data

        for part in parts[:-1]:
            data = data.setdefault(part, {})

        data[parts[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            ConfigError: If the section is missing or is not a mapping.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def save(self, path: str | Path) -> None:
        """Write the configuration to a YAML file.

        Raises:
            ConfigError: If the file cannot be written.
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

        logger.info("Saved configuration to: %s", path)

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; ``other`` wins on conflicts."""
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the configuration dictionary."""
        return self._data.copy()


@dataclass
class SimulationConfig:
    """Settings for running the simulation from a save directory.

    Attributes:
        save_directory: Directory holding the four save stream files
        stream_files: File name for each save stream, keyed by stream name
        ticks_per_run: Ticks to advance each time the runner is invoked
        logging_config: Optional path to a logging YAML file

    Examples:
        >>> config = SimulationConfig.default()
        >>> config.stream_files["terminals"]
        'terminalsWithGates.txt'
    """

    save_directory: Path = Path("saves")
    stream_files: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CONFIG["save"]["files"])
    )
    ticks_per_run: int = 1
    logging_config: Path | None = None

    @classmethod
    def default(cls) -> "SimulationConfig":
        """Build the configuration from built-in defaults only."""
        return cls.from_loader(ConfigLoader(cls._defaults()))

    @classmethod
    def from_file(cls, path: str | Path) -> "SimulationConfig":
        """Load a YAML file and lay it over the built-in defaults.

        Raises:
            ConfigError: If the file cannot be loaded or holds invalid values
        """
        loader = ConfigLoader(cls._defaults())
        loader.merge(ConfigLoader.load(path))
        return cls.from_loader(loader)

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "SimulationConfig":
        """Build the typed configuration from a loaded document.

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        files = loader.get_section("save.files")
        missing = [stream for stream in STREAMS if not files.get(stream)]
        if missing:
            raise ConfigError(f"No file name configured for streams: {', '.join(missing)}")

        ticks = loader.get("simulation.ticks_per_run", 1)
        if not isinstance(ticks, int) or isinstance(ticks, bool) or ticks < 0:
            raise ConfigError(f"simulation.ticks_per_run must be a non-negative integer: {ticks!r}")

        logging_config = loader.get("logging.config")

        return cls(
            save_directory=Path(loader.get("save.directory", "saves")),
            stream_files={stream: str(files[stream]) for stream in STREAMS},
            ticks_per_run=ticks,
            logging_config=Path(logging_config) if logging_config else None,
        )

    @staticmethod
    def _defaults() -> dict[str, Any]:
        # Deep enough copy that merging never touches DEFAULT_CONFIG
        return yaml.safe_load(yaml.safe_dump(DEFAULT_CONFIG))

    def stream_path(self, stream: str, directory: str | Path | None = None) -> Path:
        """Return the path of a save stream file.

        Args:
            stream: One of ``tick``, ``aircraft``, ``terminals``, ``queues``
            directory: Directory to use instead of ``save_directory``

        Raises:
            KeyError: If the stream name is unknown
        """
        base = Path(directory) if directory is not None else self.save_directory
        return base / self.stream_files[stream]
