"""Aircraft and static aircraft model data.

Typical usage:
    from towersim.aircraft import Aircraft, AircraftCharacteristics

    aircraft = Aircraft("UPS119", AircraftCharacteristics.BOEING_747_8F, tasks, 4000.0)
"""

from towersim.aircraft.aircraft import (
    AVG_PASSENGER_WEIGHT,
    LITRE_OF_FUEL_WEIGHT,
    Aircraft,
    CargoKind,
)
from towersim.aircraft.characteristics import AircraftCharacteristics, AircraftType

__all__ = [
    "AVG_PASSENGER_WEIGHT",
    "LITRE_OF_FUEL_WEIGHT",
    "Aircraft",
    "AircraftCharacteristics",
    "AircraftType",
    "CargoKind",
]
