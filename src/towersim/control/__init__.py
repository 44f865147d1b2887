"""Runway queues and the control tower that drives the simulation.

Typical usage:
    from towersim.control import ControlTower

    tower = ControlTower()
    tower.tick()
"""

from towersim.control.control_tower import ControlTower
from towersim.control.queues import AircraftQueue, LandingQueue, TakeoffQueue

__all__ = [
    "AircraftQueue",
    "ControlTower",
    "LandingQueue",
    "TakeoffQueue",
]
