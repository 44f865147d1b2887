"""Aircraft lifecycle tasks.

This module defines the stages an aircraft moves through while under the
control of the tower, and the legal ordering between those stages.

Typical usage:
    from towersim.tasks.task import Task, TaskType

    away = Task(TaskType.AWAY)
    load = Task(TaskType.LOAD, load_percent=60)
    print(load)  # LOAD at 60%
"""

from dataclasses import dataclass
from enum import Enum


class TaskType(Enum):
    """Lifecycle stage of an aircraft.

    Attributes:
        AWAY: Flying, away from the airport
        LAND: Waiting in the air to land
        WAIT: Parked at a gate, idle
        LOAD: Parked at a gate, loading cargo and fuel
        TAKEOFF: Waiting on the ground to take off
    """

    AWAY = "AWAY"
    LAND = "LAND"
    WAIT = "WAIT"
    LOAD = "LOAD"
    TAKEOFF = "TAKEOFF"

    def __str__(self) -> str:
        return self.value


# Legal successors for each task type. The cycle is closed: TAKEOFF leads back to AWAY.
LEGAL_SUCCESSORS: dict[TaskType, frozenset[TaskType]] = {
    TaskType.AWAY: frozenset({TaskType.AWAY, TaskType.LAND}),
    TaskType.LAND: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.WAIT: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.LOAD: frozenset({TaskType.TAKEOFF}),
    TaskType.TAKEOFF: frozenset({TaskType.AWAY}),
}


def can_follow(previous: TaskType, following: TaskType) -> bool:
    """Check whether one task type may directly follow another.

    Args:
        previous: Task type of the earlier task
        following: Task type of the task immediately after it

    Returns:
        True if the transition is allowed

    Examples:
        >>> can_follow(TaskType.AWAY, TaskType.LAND)
        True
        >>> can_follow(TaskType.LAND, TaskType.TAKEOFF)
        False
    """
    return following in LEGAL_SUCCESSORS[previous]


@dataclass(frozen=True)
class Task:
    """A single stage of an aircraft's lifecycle.

    Attributes:
        type: Task type
        load_percent: Percentage of maximum capacity to load (LOAD tasks only)

    Examples:
        >>> Task(TaskType.LOAD, 50).encode()
        'LOAD@50'
        >>> Task(TaskType.WAIT).encode()
        'WAIT'
    """

    type: TaskType
    load_percent: int = 0

    def __post_init__(self) -> None:
        if self.load_percent < 0:
            raise ValueError(f"Load percentage cannot be negative: {self.load_percent}")

    def encode(self) -> str:
        """Return the machine-readable form of this task.

        Returns:
            ``LOAD@percent`` for LOAD tasks, the task type name otherwise
        """
        if self.type == TaskType.LOAD:
            return f"{self.type.value}@{self.load_percent}"
        return self.type.value

    def __str__(self) -> str:
        if self.type == TaskType.LOAD:
            return f"{self.type.value} at {self.load_percent}%"
        return self.type.value
