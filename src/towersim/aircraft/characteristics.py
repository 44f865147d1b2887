"""Static aircraft model data.

Each supported aircraft model has a fixed set of physical characteristics.
The table is read-only and consulted by aircraft and by the save-state codec.

Typical usage:
    from towersim.aircraft.characteristics import AircraftCharacteristics

    a320 = AircraftCharacteristics.AIRBUS_A320
    print(a320.fuel_capacity)  # 27200.0
"""

from enum import Enum


class AircraftType(Enum):
    """Broad category of aircraft, used to match aircraft to terminals."""

    AIRPLANE = "AIRPLANE"
    HELICOPTER = "HELICOPTER"

    def __str__(self) -> str:
        return self.value


class AircraftCharacteristics(Enum):
    """Characteristics of each supported aircraft model.

    Attributes:
        type: Aircraft category (airplane or helicopter)
        empty_weight: Weight with no fuel or cargo onboard (kg)
        fuel_capacity: Maximum fuel onboard (litres)
        passenger_capacity: Maximum passengers (0 for freight models)
        freight_capacity: Maximum freight (kg, 0 for passenger models)

    Examples:
        >>> AircraftCharacteristics.BOEING_747_8F.freight_capacity
        137756
        >>> AircraftCharacteristics["ROBINSON_R44"].type
        <AircraftType.HELICOPTER: 'HELICOPTER'>
    """

    AIRBUS_A320 = (AircraftType.AIRPLANE, 42600, 27200.0, 150, 0)
    BOEING_747_8F = (AircraftType.AIRPLANE, 197131, 226117.0, 0, 137756)
    ROBINSON_R44 = (AircraftType.HELICOPTER, 658, 190.0, 4, 0)
    BOEING_787 = (AircraftType.AIRPLANE, 119950, 126206.0, 242, 0)
    FOKKER_100 = (AircraftType.AIRPLANE, 24375, 13365.0, 97, 0)
    SIKORSKY_SKYCRANE = (AircraftType.HELICOPTER, 8724, 3328.0, 0, 9100)

    def __init__(
        self,
        aircraft_type: AircraftType,
        empty_weight: int,
        fuel_capacity: float,
        passenger_capacity: int,
        freight_capacity: int,
    ) -> None:
        self.type = aircraft_type
        self.empty_weight = empty_weight
        self.fuel_capacity = fuel_capacity
        self.passenger_capacity = passenger_capacity
        self.freight_capacity = freight_capacity

    @property
    def carries_passengers(self) -> bool:
        """True if this model is configured for passengers rather than freight."""
        return self.passenger_capacity > 0

    def __str__(self) -> str:
        return self.name
