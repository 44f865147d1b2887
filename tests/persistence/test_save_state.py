"""Tests for save states on disk."""

from pathlib import Path

import pytest

from towersim.core.config import SimulationConfig
from towersim.persistence.codec import MalformedSaveError
from towersim.persistence.save_state import SaveState

STREAMS = {
    "tick.txt": "3\n",
    "aircraft.txt": (
        "2\n"
        "QFA481:AIRBUS_A320:AWAY,LAND,LOAD@60,TAKEOFF:27200.00:false:0\n"
        "UTD302:BOEING_787:LOAD@100,TAKEOFF,AWAY,LAND:126206.00:false:0\n"
    ),
    "terminalsWithGates.txt": "1\nAirplaneTerminal:1:false:2\n1:UTD302\n2:empty\n",
    "queues.txt": "TakeoffQueue:0\nLandingQueue:0\nLoadingAircraft:1\nUTD302:1\n",
}


@pytest.fixture
def save_dir(tmp_path: Path) -> Path:
    """A save directory holding a small airport."""
    directory = tmp_path / "save"
    directory.mkdir()
    for name, content in STREAMS.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


class TestSaveState:
    """Test loading and saving stream files."""

    def test_paths(self) -> None:
        """Test one path per stream under the given directory."""
        paths = SaveState().paths("airport")
        assert paths == {
            "tick": Path("airport/tick.txt"),
            "aircraft": Path("airport/aircraft.txt"),
            "terminals": Path("airport/terminalsWithGates.txt"),
            "queues": Path("airport/queues.txt"),
        }

    def test_load(self, save_dir: Path) -> None:
        """Test a save directory is restored into a control tower."""
        tower = SaveState().load(save_dir)
        assert tower.ticks_elapsed == 3
        assert len(tower.aircraft) == 2
        assert tower.find_gate_of_aircraft(tower.aircraft[1]).gate_number == 1

    def test_save_writes_identical_files(self, save_dir: Path, tmp_path: Path) -> None:
        """Test saving an untouched tower reproduces every file."""
        save_state = SaveState()
        tower = save_state.load(save_dir)

        written = save_state.save(tower, tmp_path / "copy")

        for stream, path in written.items():
            assert path.read_text(encoding="utf-8") == STREAMS[path.name], stream

    def test_save_after_tick(self, save_dir: Path, tmp_path: Path) -> None:
        """Test a ticked tower is saved and loads back at the new tick."""
        save_state = SaveState()
        tower = save_state.load(save_dir)
        tower.tick()
        save_state.save(tower, tmp_path / "next")

        restored = save_state.load(tmp_path / "next")
        assert restored.ticks_elapsed == 4
        assert [a.callsign for a in restored.takeoff_queue.aircraft_in_order()] == ["UTD302"]
        assert restored.loading_aircraft == {}

    def test_configured_file_names(self, save_dir: Path, tmp_path: Path) -> None:
        """Test file names come from the configuration."""
        config = SimulationConfig.default()
        config.stream_files["terminals"] = "terminals.txt"
        config.save_directory = tmp_path / "configured"

        save_state = SaveState(config)
        save_state.save(SaveState().load(save_dir))

        assert (tmp_path / "configured" / "terminals.txt").exists()
        assert not (tmp_path / "configured" / "terminalsWithGates.txt").exists()

    def test_bundled_save(self) -> None:
        """Test the save shipped with the project loads and runs."""
        repo_root = Path(__file__).resolve().parents[2]
        config = SimulationConfig.from_file(repo_root / "config" / "towersim.yaml")

        tower = SaveState(config).load(repo_root / config.save_directory)
        assert str(tower) == (
            "ControlTower: 2 terminals, 6 total aircraft (2 LAND, 1 TAKEOFF, 0 LOAD)"
        )
        assert [a.callsign for a in tower.landing_queue.aircraft_in_order()] == [
            "ABC002",
            "VH-BFK",
        ]

        tower.tick()
        assert tower.ticks_elapsed == 1

    def test_missing_file(self, save_dir: Path) -> None:
        """Test a missing stream file is reported as a malformed save."""
        (save_dir / "queues.txt").unlink()
        with pytest.raises(MalformedSaveError, match="queues"):
            SaveState().load(save_dir)

    def test_malformed_file(self, save_dir: Path) -> None:
        """Test a malformed stream file fails the load."""
        (save_dir / "tick.txt").write_text("-3\n", encoding="utf-8")
        with pytest.raises(MalformedSaveError):
            SaveState().load(save_dir)
