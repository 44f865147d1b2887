"""Airport terminals holding a fixed number of gates.

Each terminal serves one category of aircraft. A terminal in a state of
emergency is skipped when the tower looks for a free gate.

Typical usage:
    from towersim.ground.gate import Gate
    from towersim.ground.terminal import Terminal, TerminalKind

    terminal = Terminal(TerminalKind.AIRPLANE_TERMINAL, 1)
    terminal.add_gate(Gate(1))
    gate = terminal.find_unoccupied_gate()
"""

import logging
from enum import Enum

from towersim.aircraft.characteristics import AircraftType
from towersim.core.rounding import round_half_up
from towersim.ground.gate import Gate, NoSpaceError

logger = logging.getLogger(__name__)

# Maximum number of gates a single terminal may hold
MAX_NUM_GATES = 6


class NoSuitableGateError(Exception):
    """Raised when no unoccupied gate is available for an aircraft."""


class TerminalKind(Enum):
    """Kind of terminal, named as it appears in save files."""

    AIRPLANE_TERMINAL = "AirplaneTerminal"
    HELICOPTER_TERMINAL = "HelicopterTerminal"

    @property
    def aircraft_type(self) -> AircraftType:
        """Category of aircraft this kind of terminal serves."""
        if self == TerminalKind.AIRPLANE_TERMINAL:
            return AircraftType.AIRPLANE
        return AircraftType.HELICOPTER

    @classmethod
    def for_aircraft_type(cls, aircraft_type: AircraftType) -> "TerminalKind":
        """Return the terminal kind serving the given aircraft category."""
        for kind in cls:
            if kind.aircraft_type == aircraft_type:
                return kind
        raise ValueError(f"No terminal kind serves {aircraft_type}")

    def __str__(self) -> str:
        return self.value


class Terminal:
    """A group of gates serving one category of aircraft.

    Identity is the terminal kind together with the terminal number.

    Attributes:
        kind: Category of terminal
        terminal_number: Number identifying the terminal within its kind

    Examples:
        >>> terminal = Terminal(TerminalKind.HELICOPTER_TERMINAL, 2)
        >>> terminal.add_gate(Gate(7))
        >>> terminal.occupancy_level
        0
        >>> str(terminal)
        'HelicopterTerminal 2, 1 gates'
    """

    def __init__(self, kind: TerminalKind, terminal_number: int, emergency: bool = False) -> None:
        self.kind = kind
        self.terminal_number = terminal_number
        self._gates: list[Gate] = []
        self._emergency = emergency

    @property
    def aircraft_type(self) -> AircraftType:
        """Category of aircraft served by this terminal."""
        return self.kind.aircraft_type

    @property
    def gates(self) -> list[Gate]:
        """Gates in insertion order (a copy; gates themselves are shared)."""
        return list(self._gates)

    @property
    def has_emergency(self) -> bool:
        """Whether the terminal is in a state of emergency."""
        return self._emergency

    @property
    def occupancy_level(self) -> int:
        """Percentage of gates occupied, rounded to a whole number.

        Returns 0 for a terminal with no gates.
        """
        if not self._gates:
            return 0
        occupied = sum(1 for gate in self._gates if gate.is_occupied())
        return round_half_up(100 * occupied / len(self._gates))

    def add_gate(self, gate: Gate) -> None:
        """Append a gate to this terminal.

        Args:
            gate: Gate to add

        Raises:
            NoSpaceError: If the terminal already holds the maximum number of gates
        """
        if len(self._gates) >= MAX_NUM_GATES:
            raise NoSpaceError(
                f"{self.kind} {self.terminal_number} cannot hold more than {MAX_NUM_GATES} gates"
            )
        self._gates.append(gate)

    def find_unoccupied_gate(self) -> Gate:
        """Return the first unoccupied gate in insertion order.

        Raises:
            NoSuitableGateError: If every gate is occupied
        """
        for gate in self._gates:
            if not gate.is_occupied():
                return gate
        raise NoSuitableGateError(f"No unoccupied gate in {self.kind} {self.terminal_number}")

    def declare_emergency(self) -> None:
        """Put the terminal into a state of emergency."""
        self._emergency = True
        logger.warning("%s %d declared an emergency", self.kind, self.terminal_number)

    def clear_emergency(self) -> None:
        """Clear any state of emergency."""
        self._emergency = False

    def encode(self) -> str:
        """Return the terminal header line followed by one line per gate."""
        header = ":".join(
            [
                self.kind.value,
                str(self.terminal_number),
                "true" if self._emergency else "false",
                str(len(self._gates)),
            ]
        )
        return "\n".join([header] + [gate.encode() for gate in self._gates])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Terminal):
            return NotImplemented
        return self.kind == other.kind and self.terminal_number == other.terminal_number

    def __hash__(self) -> int:
        return hash((self.kind, self.terminal_number))

    def __str__(self) -> str:
        suffix = " (EMERGENCY)" if self._emergency else ""
        return f"{self.kind} {self.terminal_number}, {len(self._gates)} gates{suffix}"

    def __repr__(self) -> str:
        return f"Terminal({self.kind.name}, {self.terminal_number})"
