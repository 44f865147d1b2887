"""Queues of aircraft waiting for the runway.

Two ordering policies share one interface: the landing queue ranks aircraft
by priority rules each time it is read, and the takeoff queue is strict FIFO.

Typical usage:
    from towersim.control.queues import LandingQueue, TakeoffQueue

    landing = LandingQueue()
    landing.add(aircraft)
    next_to_land = landing.peek()
"""

import logging
from abc import ABC, abstractmethod
from collections import deque

from towersim.aircraft.aircraft import Aircraft, CargoKind

logger = logging.getLogger(__name__)

# Fuel level (percent of capacity) at or below which an aircraft has priority to land
CRITICAL_FUEL_PERCENT = 20


class AircraftQueue(ABC):
    """Ordered collection of aircraft waiting for the runway.

    An aircraft appears at most once. Membership is by aircraft identity
    (callsign and model), never by position.
    """

    @abstractmethod
    def add(self, aircraft: Aircraft) -> None:
        """Add an aircraft to the queue. Adding a queued aircraft again does nothing."""

    @abstractmethod
    def remove(self) -> Aircraft | None:
        """Remove and return the aircraft at the front, or None if empty."""

    @abstractmethod
    def peek(self) -> Aircraft | None:
        """Return the aircraft at the front without removing it, or None if empty."""

    @abstractmethod
    def aircraft_in_order(self) -> list[Aircraft]:
        """Return a snapshot of every queued aircraft, front first."""

    @abstractmethod
    def contains(self, aircraft: Aircraft) -> bool:
        """Check whether the aircraft is in the queue."""

    @property
    def name(self) -> str:
        """Queue kind as written in save files."""
        return type(self).__name__

    def __len__(self) -> int:
        return len(self.aircraft_in_order())

    def __contains__(self, aircraft: object) -> bool:
        return isinstance(aircraft, Aircraft) and self.contains(aircraft)

    def encode(self) -> str:
        """Return ``Kind:count`` followed, when non-empty, by a line of callsigns.

        Callsigns are comma-separated in the order given by ``aircraft_in_order``.
        """
        ordered = self.aircraft_in_order()
        header = f"{self.name}:{len(ordered)}"
        if not ordered:
            return header
        return header + "\n" + ",".join(aircraft.callsign for aircraft in ordered)

    def __str__(self) -> str:
        callsigns = ", ".join(aircraft.callsign for aircraft in self.aircraft_in_order())
        return f"{self.name} [{callsigns}]"


class LandingQueue(AircraftQueue):
    """Landing queue ranked by priority rules, re-evaluated on every read.

    The front of the queue is the first aircraft, in order of arrival, that
    matches the highest applicable rule:

    1. The aircraft has declared an emergency.
    2. The aircraft has critical fuel (20% of capacity or less).
    3. The aircraft carries passengers.
    4. Otherwise, the aircraft that has waited longest.

    Examples:
        >>> queue = LandingQueue()
        >>> queue.add(freighter)
        >>> queue.add(airliner)
        >>> queue.peek() is airliner
        True
    """

    def __init__(self) -> None:
        self._aircraft: list[Aircraft] = []

    def add(self, aircraft: Aircraft) -> None:
        if aircraft in self._aircraft:
            return
        self._aircraft.append(aircraft)
        logger.debug("%s joined the landing queue", aircraft.callsign)

    def peek(self) -> Aircraft | None:
        return self._select(self._aircraft)

    def remove(self) -> Aircraft | None:
        aircraft = self.peek()
        if aircraft is not None:
            self._aircraft.remove(aircraft)
        return aircraft

    def aircraft_in_order(self) -> list[Aircraft]:
        remaining = list(self._aircraft)
        ordered = []
        while remaining:
            aircraft = self._select(remaining)
            remaining.remove(aircraft)
            ordered.append(aircraft)
        return ordered

    def contains(self, aircraft: Aircraft) -> bool:
        return aircraft in self._aircraft

    @staticmethod
    def _select(candidates: list[Aircraft]) -> Aircraft | None:
        """Apply the priority rules to the candidates, in arrival order."""
        if not candidates:
            return None

        for aircraft in candidates:
            if aircraft.has_emergency:
                return aircraft

        for aircraft in candidates:
            if aircraft.fuel_percent_remaining <= CRITICAL_FUEL_PERCENT:
                return aircraft

        for aircraft in candidates:
            if aircraft.cargo_kind == CargoKind.PASSENGERS:
                return aircraft

        return candidates[0]


class TakeoffQueue(AircraftQueue):
    """First-in, first-out takeoff queue.

    Examples:
        >>> queue = TakeoffQueue()
        >>> queue.add(first)
        >>> queue.add(second)
        >>> queue.remove() is first
        True
    """

    def __init__(self) -> None:
        self._aircraft: deque[Aircraft] = deque()

    def add(self, aircraft: Aircraft) -> None:
        if aircraft in self._aircraft:
            return
        self._aircraft.append(aircraft)
        logger.debug("%s joined the takeoff queue", aircraft.callsign)

    def peek(self) -> Aircraft | None:
        return self._aircraft[0] if self._aircraft else None

    def remove(self) -> Aircraft | None:
        return self._aircraft.popleft() if self._aircraft else None

    def aircraft_in_order(self) -> list[Aircraft]:
        return list(self._aircraft)

    def contains(self, aircraft: Aircraft) -> bool:
        return aircraft in self._aircraft
