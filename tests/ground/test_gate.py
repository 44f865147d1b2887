"""Tests for gates."""

import pytest

from towersim.ground.gate import Gate, NoSpaceError


class TestGate:
    """Test parking and leaving a gate."""

    def test_new_gate_is_empty(self) -> None:
        """Test a new gate holds no aircraft."""
        gate = Gate(15)
        assert not gate.is_occupied()
        assert gate.aircraft_at_gate is None

    def test_park_aircraft(self, make_aircraft) -> None:
        """Test parking occupies the gate."""
        gate = Gate(15)
        aircraft = make_aircraft("QFA481")
        gate.park_aircraft(aircraft)
        assert gate.is_occupied()
        assert gate.aircraft_at_gate is aircraft

    def test_park_at_occupied_gate_raises(self, make_aircraft) -> None:
        """Test a second aircraft cannot park at an occupied gate."""
        gate = Gate(15)
        gate.park_aircraft(make_aircraft("QFA481"))
        with pytest.raises(NoSpaceError, match="Gate 15"):
            gate.park_aircraft(make_aircraft("VOZ1"))

    def test_aircraft_leaves(self, make_aircraft) -> None:
        """Test leaving frees the gate, and leaving an empty gate is harmless."""
        gate = Gate(15)
        gate.park_aircraft(make_aircraft("QFA481"))
        gate.aircraft_leaves()
        assert not gate.is_occupied()
        gate.aircraft_leaves()
        assert not gate.is_occupied()

    def test_equality_by_number(self) -> None:
        """Test gates are identified by their number."""
        assert Gate(3) == Gate(3)
        assert Gate(3) != Gate(4)
        assert len({Gate(3), Gate(3)}) == 1

    def test_representations(self, make_aircraft) -> None:
        """Test string and encoded forms, empty and occupied."""
        gate = Gate(24)
        assert str(gate) == "Gate 24 [empty]"
        assert gate.encode() == "24:empty"

        gate.park_aircraft(make_aircraft("ABC123"))
        assert str(gate) == "Gate 24 [ABC123]"
        assert gate.encode() == "24:ABC123"
