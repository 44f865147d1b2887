"""Reading and writing save states on disk.

A save state is a directory holding one file per save stream. File names come
from ``SimulationConfig``.

Typical usage:
    from towersim.core.config import SimulationConfig
    from towersim.persistence.save_state import SaveState

    save_state = SaveState(SimulationConfig.default())
    tower = save_state.load("saves/default")
    tower.tick()
    save_state.save(tower, "saves/next")
"""

import logging
from pathlib import Path

from towersim.control.control_tower import ControlTower
from towersim.core.config import STREAMS, SimulationConfig
from towersim.persistence.codec import (
    MalformedSaveError,
    create_control_tower,
    encode_aircraft_list,
    encode_queues,
    encode_terminals,
    encode_tick,
)

logger = logging.getLogger(__name__)

_ENCODERS = {
    "tick": encode_tick,
    "aircraft": encode_aircraft_list,
    "terminals": encode_terminals,
    "queues": encode_queues,
}


class SaveState:
    """Loads and saves a control tower as a directory of stream files.

    Examples:
        >>> save_state = SaveState(SimulationConfig.default())
        >>> save_state.paths("saves/demo")["tick"]
        PosixPath('saves/demo/tick.txt')
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig.default()

    def paths(self, directory: str | Path | None = None) -> dict[str, Path]:
        """Return the file path of every save stream, keyed by stream name.

        Args:
            directory: Save directory; the configured one if None
        """
        return {stream: self.config.stream_path(stream, directory) for stream in STREAMS}

    def load(self, directory: str | Path | None = None) -> ControlTower:
        """Load a control tower from a save directory.

        Args:
            directory: Save directory; the configured one if None

        Returns:
            The restored control tower

        Raises:
            MalformedSaveError: If a stream file is missing or malformed
            OSError: If a stream file exists but cannot be read
        """
        texts = {}
        for stream, path in self.paths(directory).items():
            try:
                texts[stream] = path.read_text(encoding="utf-8")
            except FileNotFoundError as e:
                raise MalformedSaveError(f"Missing {stream} save file: {path}") from e

        tower = create_control_tower(
            texts["tick"], texts["aircraft"], texts["terminals"], texts["queues"]
        )
        logger.info("Loaded save state from %s", directory or self.config.save_directory)
        return tower

    def save(self, tower: ControlTower, directory: str | Path | None = None) -> dict[str, Path]:
        """Write a control tower to a save directory, creating it if needed.

        Args:
            tower: Control tower to save
            directory: Save directory; the configured one if None

        Returns:
            The path written for each stream
        """
        paths = self.paths(directory)
        for stream, path in paths.items():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_ENCODERS[stream](tower) + "\n", encoding="utf-8")

        logger.info("Saved state at tick %d to %s", tower.ticks_elapsed, paths["tick"].parent)
        return paths
