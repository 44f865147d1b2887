"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from towersim.core.config import DEFAULT_CONFIG, ConfigError, ConfigLoader, SimulationConfig


def _write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestConfigLoader:
    """Test dotted-key access over YAML documents."""

    def test_load_and_get(self, tmp_path: Path) -> None:
        """Test values are reached with dot notation."""
        path = _write_yaml(tmp_path / "config.yaml", {"save": {"directory": "airport"}})
        config = ConfigLoader.load(path)
        assert config.get("save.directory") == "airport"
        assert config.get("save.files.tick", default="tick.txt") == "tick.txt"
        assert config.get("missing") is None

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(tmp_path / "nope.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Test unparsable YAML raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("save: {directory: [", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to load"):
            ConfigLoader.load(path)

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        """Test a document that is not a mapping is rejected."""
        path = _write_yaml(tmp_path / "config.yaml", ["a", "b"])
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader.load(path)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file loads as an empty document."""
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigLoader.load(path).to_dict() == {}

    def test_set_creates_sections(self) -> None:
        """Test setting a nested key creates missing sections."""
        config = ConfigLoader({})
        config.set("simulation.ticks_per_run", 3)
        assert config.get_section("simulation") == {"ticks_per_run": 3}

    def test_get_section_errors(self) -> None:
        """Test missing sections and scalar values are not sections."""
        config = ConfigLoader({"simulation": {"ticks_per_run": 1}})
        with pytest.raises(ConfigError, match="not found"):
            config.get_section("save")
        with pytest.raises(ConfigError, match="not a section"):
            config.get_section("simulation.ticks_per_run")

    def test_merge_overrides_nested_values(self) -> None:
        """Test merging keeps untouched keys and replaces overridden ones."""
        base = ConfigLoader({"save": {"directory": "saves", "files": {"tick": "tick.txt"}}})
        base.merge(ConfigLoader({"save": {"directory": "airport"}}))
        assert base.get("save.directory") == "airport"
        assert base.get("save.files.tick") == "tick.txt"

    def test_save_round_trip(self, tmp_path: Path) -> None:
        """Test a saved document loads back unchanged."""
        config = ConfigLoader({"save": {"directory": "airport"}})
        path = tmp_path / "nested" / "config.yaml"
        config.save(path)
        assert ConfigLoader.load(path).to_dict() == {"save": {"directory": "airport"}}


class TestSimulationConfig:
    """Test the typed simulation configuration."""

    def test_default(self) -> None:
        """Test built-in defaults."""
        config = SimulationConfig.default()
        assert config.save_directory == Path("saves")
        assert config.stream_files == {
            "tick": "tick.txt",
            "aircraft": "aircraft.txt",
            "terminals": "terminalsWithGates.txt",
            "queues": "queues.txt",
        }
        assert config.ticks_per_run == 1
        assert config.logging_config is None

    def test_from_file_overlays_defaults(self, tmp_path: Path) -> None:
        """Test a partial file only changes what it names."""
        path = _write_yaml(
            tmp_path / "towersim.yaml",
            {
                "save": {"directory": "airport", "files": {"queues": "q.txt"}},
                "simulation": {"ticks_per_run": 4},
                "logging": {"config": "config/logging.yaml"},
            },
        )
        config = SimulationConfig.from_file(path)

        assert config.save_directory == Path("airport")
        assert config.stream_files["queues"] == "q.txt"
        assert config.stream_files["tick"] == "tick.txt"
        assert config.ticks_per_run == 4
        assert config.logging_config == Path("config/logging.yaml")

    def test_from_file_leaves_defaults_untouched(self, tmp_path: Path) -> None:
        """Test loading a file never changes the module defaults."""
        path = _write_yaml(tmp_path / "towersim.yaml", {"save": {"files": {"tick": "t.txt"}}})
        SimulationConfig.from_file(path)
        assert DEFAULT_CONFIG["save"]["files"]["tick"] == "tick.txt"

    @pytest.mark.parametrize("ticks", [-1, "three", 1.5, True])
    def test_invalid_ticks_per_run(self, tmp_path: Path, ticks) -> None:
        """Test ticks_per_run must be a non-negative integer."""
        path = _write_yaml(tmp_path / "towersim.yaml", {"simulation": {"ticks_per_run": ticks}})
        with pytest.raises(ConfigError, match="ticks_per_run"):
            SimulationConfig.from_file(path)

    def test_empty_stream_file_name(self, tmp_path: Path) -> None:
        """Test every stream needs a file name."""
        path = _write_yaml(tmp_path / "towersim.yaml", {"save": {"files": {"aircraft": ""}}})
        with pytest.raises(ConfigError, match="aircraft"):
            SimulationConfig.from_file(path)

    def test_stream_path(self) -> None:
        """Test stream paths use the save directory unless another is given."""
        config = SimulationConfig.default()
        assert config.stream_path("terminals") == Path("saves") / "terminalsWithGates.txt"
        assert config.stream_path("tick", "other") == Path("other") / "tick.txt"
        with pytest.raises(KeyError):
            config.stream_path("weather")
