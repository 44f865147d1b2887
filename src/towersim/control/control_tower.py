"""Control tower orchestrating aircraft, runway queues and gates.

The tower owns every aircraft it manages, the terminals and their gates, the
landing and takeoff queues and the map of aircraft currently loading. Calling
``tick`` advances the whole airport by one discrete step.

Typical usage:
    from towersim.control.control_tower import ControlTower

    tower = ControlTower()
    tower.add_terminal(terminal)
    tower.add_aircraft(aircraft)
    for _ in range(10):
        tower.tick()
    print(tower)
"""

import logging

from towersim.aircraft.aircraft import Aircraft
from towersim.control.queues import LandingQueue, TakeoffQueue
from towersim.ground.gate import Gate
from towersim.ground.terminal import NoSuitableGateError, Terminal
from towersim.tasks.task import TaskType

logger = logging.getLogger(__name__)

# Task types that move on to the next task on every tick without any trigger
AUTO_ADVANCING_TASKS = frozenset({TaskType.AWAY, TaskType.WAIT})


class ControlTower:
    """Airport control tower.

    Each tick performs, in order:

    1. Increment the tick counters.
    2. Tick every aircraft, then advance those whose task is AWAY or WAIT.
    3. Count down the loading map; aircraft that finish loading leave their
       gate and move on to their next task.
    4. Use the runway: on even ticks try to land an aircraft and, failing
       that, let one take off; on odd ticks only try a takeoff.
    5. File every aircraft into the queue or map matching its current task.

    Runway parity counts calls to ``tick`` on this instance, so a tower
    restored from a save starts a fresh alternation.

    Attributes:
        ticks_elapsed: Ticks elapsed since the simulation began
        landing_queue: Aircraft waiting to land
        takeoff_queue: Aircraft waiting to take off
    """

    def __init__(
        self,
        ticks_elapsed: int = 0,
        aircraft: list[Aircraft] | None = None,
        landing_queue: LandingQueue | None = None,
        takeoff_queue: TakeoffQueue | None = None,
        loading_aircraft: dict[Aircraft, int] | None = None,
    ) -> None:
        """Initialize the control tower.

        Args:
            ticks_elapsed: Ticks already elapsed (restored from a save)
            aircraft: Aircraft already managed, in order
            landing_queue: Landing queue (a new empty one if omitted)
            takeoff_queue: Takeoff queue (a new empty one if omitted)
            loading_aircraft: Loading aircraft mapped to remaining ticks
        """
        self.ticks_elapsed = ticks_elapsed
        self._aircraft: list[Aircraft] = list(aircraft) if aircraft else []
        self.landing_queue = landing_queue if landing_queue is not None else LandingQueue()
        self.takeoff_queue = takeoff_queue if takeoff_queue is not None else TakeoffQueue()
        self._loading: dict[Aircraft, int] = dict(loading_aircraft) if loading_aircraft else {}
        self._terminals: list[Terminal] = []
        self._ticks_this_run = 0

    @property
    def aircraft(self) -> list[Aircraft]:
        """Managed aircraft in the order they were added (a copy)."""
        return list(self._aircraft)

    @property
    def terminals(self) -> list[Terminal]:
        """Terminals in the order they were added (a copy)."""
        return list(self._terminals)

    @property
    def loading_aircraft(self) -> dict[Aircraft, int]:
        """Loading aircraft and their remaining ticks, ordered by callsign (a copy)."""
        return {
            aircraft: self._loading[aircraft]
            for aircraft in sorted(self._loading, key=lambda a: a.callsign)
        }

    def add_terminal(self, terminal: Terminal) -> None:
        """Add a terminal to the airport."""
        self._terminals.append(terminal)
        logger.debug("Added %s", terminal)

    def add_aircraft(self, aircraft: Aircraft) -> None:
        """Start managing an aircraft.

        Aircraft whose current task is WAIT or LOAD are on the ground, so they
        are parked at the first suitable unoccupied gate before being filed.

        Args:
            aircraft: Aircraft to manage

        Raises:
            NoSuitableGateError: If the aircraft needs a gate and none is free
        """
        if aircraft.current_task_type in (TaskType.WAIT, TaskType.LOAD):
            self.find_unoccupied_gate(aircraft).park_aircraft(aircraft)

        self._aircraft.append(aircraft)
        self.place_aircraft_in_queues(aircraft)
        logger.info("Now managing %s", aircraft)

    def find_unoccupied_gate(self, aircraft: Aircraft) -> Gate:
        """Find the first unoccupied gate able to take the aircraft.

        Terminals are searched in insertion order, skipping those in a state
        of emergency and those serving a different aircraft category.

        Args:
            aircraft: Aircraft looking for a gate

        Returns:
            A free gate

        Raises:
            NoSuitableGateError: If no suitable gate is free
        """
        aircraft_type = aircraft.characteristics.type
        for terminal in self._terminals:
            if terminal.has_emergency or terminal.aircraft_type != aircraft_type:
                continue
            try:
                return terminal.find_unoccupied_gate()
            except NoSuitableGateError:
                logger.debug("%s has no free gate for %s", terminal, aircraft.callsign)

        raise NoSuitableGateError(f"No gate available for {aircraft.callsign}")

    def find_gate_of_aircraft(self, aircraft: Aircraft) -> Gate | None:
        """Return the gate the aircraft is parked at, or None."""
        for terminal in self._terminals:
            for gate in terminal.gates:
                if gate.aircraft_at_gate == aircraft:
                    return gate
        return None

    def try_land_aircraft(self) -> bool:
        """Try to land the aircraft at the front of the landing queue.

        The aircraft is only removed from the queue once a gate is found. On
        landing it is parked, unloaded and moved on to its next task.

        Returns:
            True if an aircraft landed
        """
        aircraft = self.landing_queue.peek()
        if aircraft is None:
            return False

        try:
            gate = self.find_unoccupied_gate(aircraft)
        except NoSuitableGateError:
            logger.warning("%s cannot land: no suitable gate", aircraft.callsign)
            return False

        self.landing_queue.remove()
        gate.park_aircraft(aircraft)
        aircraft.unload()
        aircraft.task_list.advance()
        logger.info("%s landed at gate %d", aircraft.callsign, gate.gate_number)
        return True

    def try_takeoff_aircraft(self) -> None:
        """Let the aircraft at the front of the takeoff queue take off, if any."""
        aircraft = self.takeoff_queue.remove()
        if aircraft is None:
            return

        aircraft.task_list.advance()
        logger.info("%s took off", aircraft.callsign)

    def load_aircraft(self) -> None:
        """Count down every loading aircraft by one tick.

        Aircraft reaching zero leave their gate, move on to their next task
        and are dropped from the loading map once the scan completes.
        """
        finished = []
        for aircraft in sorted(self._loading, key=lambda a: a.callsign):
            self._loading[aircraft] -= 1
            if self._loading[aircraft] == 0:
                finished.append(aircraft)

        for aircraft in finished:
            del self._loading[aircraft]
            gate = self.find_gate_of_aircraft(aircraft)
            if gate is not None:
                gate.aircraft_leaves()
            aircraft.task_list.advance()
            logger.info("%s finished loading", aircraft.callsign)

    def place_aircraft_in_queues(self, aircraft: Aircraft) -> None:
        """File an aircraft according to its current task.

        LAND goes to the landing queue, TAKEOFF to the takeoff queue and LOAD
        into the loading map with its loading time. Aircraft already filed are
        left alone.
        """
        task_type = aircraft.current_task_type
        if task_type == TaskType.LAND and not self.landing_queue.contains(aircraft):
            self.landing_queue.add(aircraft)
        elif task_type == TaskType.TAKEOFF and not self.takeoff_queue.contains(aircraft):
            self.takeoff_queue.add(aircraft)
        elif task_type == TaskType.LOAD and aircraft not in self._loading:
            self._loading[aircraft] = aircraft.loading_time
            logger.debug(
                "%s loading for %d ticks", aircraft.callsign, self._loading[aircraft]
            )

    def place_all_aircraft_in_queues(self) -> None:
        """File every managed aircraft, in order."""
        for aircraft in self._aircraft:
            self.place_aircraft_in_queues(aircraft)

    def tick(self) -> None:
        """Advance the airport by one tick."""
        self._ticks_this_run += 1
        self.ticks_elapsed += 1

        for aircraft in self._aircraft:
            aircraft.tick()
            if aircraft.current_task_type in AUTO_ADVANCING_TASKS:
                aircraft.task_list.advance()

        self.load_aircraft()

        if self._ticks_this_run % 2 == 0:
            if not self.try_land_aircraft():
                self.try_takeoff_aircraft()
        else:
            self.try_takeoff_aircraft()

        self.place_all_aircraft_in_queues()
        logger.debug("Tick %d complete: %s", self.ticks_elapsed, self)

    def __str__(self) -> str:
        return (
            f"ControlTower: {len(self._terminals)} terminals, "
            f"{len(self._aircraft)} total aircraft "
            f"({len(self.landing_queue)} LAND, {len(self.takeoff_queue)} TAKEOFF, "
            f"{len(self._loading)} LOAD)"
        )
