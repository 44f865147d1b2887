"""Aircraft managed by the control tower.

An aircraft carries either passengers or freight, decided by its model's
characteristics. The cargo variant is held as a tag plus a single amount, and
the behavior that differs between variants branches on the tag.

Typical usage:
    from towersim.aircraft import Aircraft, AircraftCharacteristics
    from towersim.tasks import Task, TaskList, TaskType

    tasks = TaskList([Task(TaskType.AWAY), Task(TaskType.LAND),
                      Task(TaskType.LOAD, 60), Task(TaskType.TAKEOFF)])
    aircraft = Aircraft("QFA481", AircraftCharacteristics.AIRBUS_A320, tasks,
                        fuel_amount=10000.0, cargo_amount=132)
    aircraft.tick()
"""

import logging
import math
from enum import Enum

from towersim.aircraft.characteristics import AircraftCharacteristics
from towersim.core.rounding import round_half_up
from towersim.tasks.task import TaskType
from towersim.tasks.task_list import TaskList

logger = logging.getLogger(__name__)

# Weight of a litre of aviation fuel (kg)
LITRE_OF_FUEL_WEIGHT = 0.8

# Average weight of a single passenger including baggage (kg)
AVG_PASSENGER_WEIGHT = 90

# Fuel burned per AWAY tick, as a fraction of capacity
AWAY_FUEL_BURN_FRACTION = 0.1

# Freight loading bands (kg)
LARGE_FREIGHT_LOAD = 50000
SMALL_FREIGHT_LOAD = 1000


class CargoKind(Enum):
    """What an aircraft carries."""

    PASSENGERS = "passengers"
    FREIGHT = "freight"


class Aircraft:
    """An aircraft whose movements are managed by the control tower.

    Identity is the callsign together with the model characteristics.

    Attributes:
        callsign: Unique callsign
        characteristics: Static model data
        task_list: Circular schedule of tasks
        fuel_amount: Fuel onboard (litres), 0 to capacity
        cargo_kind: Whether cargo is counted in passengers or kg of freight
        cargo_amount: Passengers or kg of freight onboard, 0 to capacity

    Examples:
        >>> aircraft = Aircraft("VH-BFK", AircraftCharacteristics.ROBINSON_R44,
        ...                     tasks, fuel_amount=40.0, cargo_amount=4)
        >>> aircraft.cargo_kind
        <CargoKind.PASSENGERS: 'passengers'>
        >>> aircraft.fuel_percent_remaining
        21
    """

    def __init__(
        self,
        callsign: str,
        characteristics: AircraftCharacteristics,
        task_list: TaskList,
        fuel_amount: float,
        cargo_amount: int = 0,
        emergency: bool = False,
    ) -> None:
        """Initialize aircraft.

        Args:
            callsign: Unique callsign
            characteristics: Model characteristics
            task_list: Task list to follow
            fuel_amount: Fuel onboard (litres)
            cargo_amount: Passengers or kg of freight onboard
            emergency: Whether the aircraft starts in a state of emergency

        Raises:
            ValueError: If fuel or cargo lies outside 0..capacity
        """
        if fuel_amount < 0:
            raise ValueError("Amount of fuel onboard cannot be negative")
        if fuel_amount > characteristics.fuel_capacity:
            raise ValueError("Amount of fuel onboard cannot exceed capacity")

        self.callsign = callsign
        self.characteristics = characteristics
        self.task_list = task_list
        self.fuel_amount = float(fuel_amount)
        self.cargo_kind = (
            CargoKind.PASSENGERS if characteristics.carries_passengers else CargoKind.FREIGHT
        )

        if cargo_amount < 0:
            raise ValueError(f"Amount of {self.cargo_kind.value} onboard cannot be negative")
        if cargo_amount > self.cargo_capacity:
            raise ValueError(f"Amount of {self.cargo_kind.value} onboard cannot exceed capacity")

        self.cargo_amount = cargo_amount
        self._emergency = emergency

    @property
    def cargo_capacity(self) -> int:
        """Maximum passengers or kg of freight for this aircraft's model."""
        if self.cargo_kind == CargoKind.PASSENGERS:
            return self.characteristics.passenger_capacity
        return self.characteristics.freight_capacity

    @property
    def current_task_type(self) -> TaskType:
        """Type of the task currently at the head of the task list."""
        return self.task_list.current_task.type

    @property
    def fuel_percent_remaining(self) -> int:
        """Fuel onboard as a whole percentage of capacity, 0 to 100."""
        return round_half_up(100 * self.fuel_amount / self.characteristics.fuel_capacity)

    @property
    def occupancy_level(self) -> int:
        """Cargo onboard as a whole percentage of cargo capacity, 0 to 100."""
        if self.cargo_capacity == 0:
            return 0
        return round_half_up(100 * self.cargo_amount / self.cargo_capacity)

    @property
    def total_weight(self) -> float:
        """Current weight including fuel and cargo (kg)."""
        weight = self.characteristics.empty_weight + self.fuel_amount * LITRE_OF_FUEL_WEIGHT
        if self.cargo_kind == CargoKind.PASSENGERS:
            return weight + self.cargo_amount * AVG_PASSENGER_WEIGHT
        return weight + self.cargo_amount

    @property
    def cargo_to_load(self) -> int:
        """Cargo the current LOAD task asks for, from its percentage of capacity."""
        load_percent = self.task_list.current_task.load_percent
        return round_half_up(load_percent / 100 * self.cargo_capacity)

    @property
    def loading_time(self) -> int:
        """Ticks needed to complete the current LOAD task, at least 1.

        Passenger aircraft take log10 of the passengers to board, rounded.
        Freight aircraft use fixed bands on the freight to load.
        """
        to_load = self.cargo_to_load
        if self.cargo_kind == CargoKind.PASSENGERS:
            if to_load == 0:
                return 1
            return max(1, round_half_up(math.log10(to_load)))

        if to_load > LARGE_FREIGHT_LOAD:
            return 3
        if to_load >= SMALL_FREIGHT_LOAD:
            return 2
        return 1

    @property
    def has_emergency(self) -> bool:
        """Whether the aircraft has declared an emergency."""
        return self._emergency

    def declare_emergency(self) -> None:
        """Put the aircraft into a state of emergency."""
        self._emergency = True
        logger.info("%s declared an emergency", self.callsign)

    def clear_emergency(self) -> None:
        """Clear any state of emergency."""
        self._emergency = False

    def unload(self) -> None:
        """Remove all passengers or freight instantly."""
        self.cargo_amount = 0

    def tick(self) -> None:
        """Update fuel and cargo for one simulation tick.

        AWAY burns a tenth of fuel capacity, never dropping below empty.
        LOAD refuels by ``capacity / loading_time`` and boards cargo by
        ``cargo_to_load / loading_time``, both capped at capacity. Other task
        types leave the aircraft unchanged. The task list is never advanced here.
        """
        task_type = self.current_task_type
        capacity = self.characteristics.fuel_capacity

        if task_type == TaskType.AWAY:
            self.fuel_amount = max(0.0, self.fuel_amount - capacity * AWAY_FUEL_BURN_FRACTION)
            logger.debug("%s burned fuel, %.2f remaining", self.callsign, self.fuel_amount)

        elif task_type == TaskType.LOAD:
            loading_time = self.loading_time
            self.fuel_amount = min(capacity, self.fuel_amount + capacity / loading_time)
            per_tick = round_half_up(self.cargo_to_load / loading_time)
            self.cargo_amount = min(self.cargo_capacity, self.cargo_amount + per_tick)
            logger.debug(
                "%s loading: fuel %.2f, %s %d",
                self.callsign,
                self.fuel_amount,
                self.cargo_kind.value,
                self.cargo_amount,
            )

    def encode(self) -> str:
        """Return the machine-readable form of this aircraft.

        Format: ``callsign:model:tasks:fuel:emergency:cargo`` with fuel to two
        decimal places and the emergency flag as ``true``/``false``.
        """
        return ":".join(
            [
                self.callsign,
                self.characteristics.name,
                self.task_list.encode(),
                f"{self.fuel_amount:.2f}",
                "true" if self._emergency else "false",
                str(self.cargo_amount),
            ]
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Aircraft):
            return NotImplemented
        return self.callsign == other.callsign and self.characteristics == other.characteristics

    def __hash__(self) -> int:
        return hash((self.callsign, self.characteristics))

    def __str__(self) -> str:
        suffix = " (EMERGENCY)" if self._emergency else ""
        return (
            f"{self.characteristics.type} {self.callsign} {self.characteristics.name} "
            f"{self.current_task_type}{suffix}"
        )

    def __repr__(self) -> str:
        return f"Aircraft(callsign='{self.callsign}', model={self.characteristics.name})"
