"""Airport gates at which aircraft park.

Typical usage:
    from towersim.ground.gate import Gate

    gate = Gate(15)
    gate.park_aircraft(aircraft)
    gate.aircraft_leaves()
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from towersim.aircraft.aircraft import Aircraft

logger = logging.getLogger(__name__)


class NoSpaceError(Exception):
    """Raised when there is no room for an aircraft or gate."""


class Gate:
    """A single parking spot for one aircraft.

    The gate only references the aircraft parked at it; it does not own it.

    Attributes:
        gate_number: Airport-wide unique gate number

    Examples:
        >>> gate = Gate(24)
        >>> str(gate)
        'Gate 24 [empty]'
        >>> gate.is_occupied()
        False
    """

    def __init__(self, gate_number: int) -> None:
        self.gate_number = gate_number
        self._aircraft: "Aircraft | None" = None

    @property
    def aircraft_at_gate(self) -> "Aircraft | None":
        """Aircraft currently parked here, or None."""
        return self._aircraft

    def is_occupied(self) -> bool:
        """Check whether an aircraft is parked at this gate.

        Returns:
            True if occupied
        """
        return self._aircraft is not None

    def park_aircraft(self, aircraft: "Aircraft") -> None:
        """Park an aircraft at this gate.

        Args:
            aircraft: Aircraft to park

        Raises:
            NoSpaceError: If the gate is already occupied
        """
        if self._aircraft is not None:
            raise NoSpaceError(
                f"Gate {self.gate_number} is occupied by {self._aircraft.callsign}"
            )

        self._aircraft = aircraft
        logger.info("%s parked at gate %d", aircraft.callsign, self.gate_number)

    def aircraft_leaves(self) -> None:
        """Clear the gate. Does nothing if it is already empty."""
        if self._aircraft is not None:
            logger.info("%s left gate %d", self._aircraft.callsign, self.gate_number)
        self._aircraft = None

    def encode(self) -> str:
        """Return ``number:callsign`` or ``number:empty``."""
        occupant = self._aircraft.callsign if self._aircraft is not None else "empty"
        return f"{self.gate_number}:{occupant}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gate):
            return NotImplemented
        return self.gate_number == other.gate_number

    def __hash__(self) -> int:
        return hash(self.gate_number)

    def __str__(self) -> str:
        occupant = self._aircraft.callsign if self._aircraft is not None else "empty"
        return f"Gate {self.gate_number} [{occupant}]"

    def __repr__(self) -> str:
        return f"Gate({self.gate_number})"
