"""Pytest configuration and fixtures for all tests."""

import logging
from collections.abc import Callable

import pytest

from towersim.aircraft.aircraft import Aircraft
from towersim.aircraft.characteristics import AircraftCharacteristics
from towersim.ground.gate import Gate
from towersim.ground.terminal import Terminal, TerminalKind
from towersim.tasks.task import Task, TaskType
from towersim.tasks.task_list import TaskList


def _build_task_list(encoded: str) -> TaskList:
    tasks = []
    for token in encoded.split(","):
        name, _, percent = token.partition("@")
        tasks.append(Task(TaskType[name], int(percent) if percent else 0))
    return TaskList(tasks)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop any handlers a test attached to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    yield

    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def make_tasks() -> Callable[[str], TaskList]:
    """Build a task list from its comma-separated form, e.g. ``"AWAY,LAND,LOAD@60,TAKEOFF"``."""
    return _build_task_list


@pytest.fixture
def make_aircraft() -> Callable[..., Aircraft]:
    """Factory for aircraft with sensible defaults.

    Fuel defaults to a full tank. Tasks default to a plain away/land/load cycle.
    """

    def factory(
        callsign: str,
        characteristics: AircraftCharacteristics = AircraftCharacteristics.AIRBUS_A320,
        tasks: str = "AWAY,LAND,LOAD@60,TAKEOFF",
        fuel: float | None = None,
        cargo: int = 0,
        emergency: bool = False,
    ) -> Aircraft:
        if fuel is None:
            fuel = characteristics.fuel_capacity
        return Aircraft(
            callsign,
            characteristics,
            _build_task_list(tasks),
            fuel,
            cargo,
            emergency=emergency,
        )

    return factory


@pytest.fixture
def make_terminal() -> Callable[..., Terminal]:
    """Factory for terminals holding consecutively numbered gates."""

    def factory(
        kind: TerminalKind = TerminalKind.AIRPLANE_TERMINAL,
        number: int = 1,
        first_gate: int = 1,
        gate_count: int = 2,
    ) -> Terminal:
        terminal = Terminal(kind, number)
        for gate_number in range(first_gate, first_gate + gate_count):
            terminal.add_gate(Gate(gate_number))
        return terminal

    return factory
