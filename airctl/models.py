"""Aircraft, runway and phase data used by the traffic simulation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum


class AircraftType(IntEnum):
    """Kind of aircraft; the value is its numeric code."""

    COMMERCIAL = 0
    CARGO = 1
    MILITARY = 2
    MEDICAL = 3


class Phase(IntEnum):
    """Flight phase, for arrivals and departures alike."""

    HOLDING = 0
    APPROACH = 1
    LANDING = 2
    TAXI = 3
    AT_GATE = 4
    TAKEOFF_ROLL = 5
    CLIMB = 6
    DEPARTURE = 7


class Direction(IntEnum):
    """Direction a flight comes from or leaves towards."""

    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3


class RunwayId(IntEnum):
    """One of the airport's three runways."""

    A = 0
    B = 1
    C = 2

    @property
    def letter(self) -> str:
        return self.name


EMERGENCY_PRIORITY = 999

ARRIVAL_START_SPEED = 600
DEPARTURE_START_SPEED = 0


@dataclass(frozen=True)
class SpeedLimit:
    """Permitted speed band, in km/h, for one phase."""

    phase: Phase
    min_speed: int
    max_speed: int

    def allows(self, speed: int) -> bool:
        return self.min_speed <= speed <= self.max_speed


SPEED_LIMITS: tuple[SpeedLimit, ...] = (
    SpeedLimit(Phase.HOLDING, 400, 600),
    SpeedLimit(Phase.APPROACH, 240, 290),
    SpeedLimit(Phase.LANDING, 30, 240),
    SpeedLimit(Phase.TAXI, 15, 30),
    SpeedLimit(Phase.AT_GATE, 0, 5),
    SpeedLimit(Phase.TAKEOFF_ROLL, 50, 290),
    SpeedLimit(Phase.CLIMB, 300, 463),
    SpeedLimit(Phase.DEPARTURE, 800, 900),
)

_LIMITS_BY_PHASE = {limit.phase: limit for limit in SPEED_LIMITS}

AIRLINES: tuple[str, ...] = (
    "PIA",
    "Pakistan Airforce",
    "AirBlue",
    "FedEx",
    "Blue Dart",
    "Agha Khan Air Ambulance",
)

_DIRECTION_NAMES = {
    Direction.NORTH: "North",
    Direction.SOUTH: "South",
    Direction.EAST: "East",
    Direction.WEST: "West",
}

_PHASE_NAMES = {
    Phase.HOLDING: "Holding",
    Phase.APPROACH: "Approach",
    Phase.LANDING: "Landing",
    Phase.TAXI: "Taxi",
    Phase.AT_GATE: "At Gate",
    Phase.TAKEOFF_ROLL: "Takeoff Roll",
    Phase.CLIMB: "Climb",
    Phase.DEPARTURE: "Departure",
}

_TYPE_NAMES = {
    AircraftType.COMMERCIAL: "Commercial",
    AircraftType.CARGO: "Cargo",
    AircraftType.MILITARY: "Military",
    AircraftType.MEDICAL: "Medical",
}


def speed_limit_for(phase: int) -> SpeedLimit | None:
    """The speed band for ``phase``, or None if the phase has none."""
    return _LIMITS_BY_PHASE.get(phase)


def airline_name(number: int) -> str:
    """Airline for a menu choice from 1 to 6."""
    if not 1 <= number <= len(AIRLINES):
        raise ValueError(f"airline number must be between 1 and {len(AIRLINES)}: {number}")
    return AIRLINES[number - 1]


def direction_name(direction: int) -> str:
    return _DIRECTION_NAMES.get(direction, "Unknown")


def phase_name(phase: int) -> str:
    return _PHASE_NAMES.get(phase, "Unknown")


def aircraft_type_name(code: int) -> str:
    return _TYPE_NAMES.get(code, "Unknown")


@dataclass
class PhaseData:
    """Per-phase speed tracking state."""

    timer: int = 0
    threshold_crossed: bool = False
    sustained_speed: int = 0


@dataclass
class Aircraft:
    """A scheduled flight and its live simulation state.

    Arrivals (north or south) start holding at cruise speed; departures
    start at the gate, standing still.
    """

    flight_name: str
    airline: str
    type: AircraftType
    direction: Direction
    scheduled_time: int = 0
    priority: int = 0
    airline_number: int = 0
    is_emergency: bool = False
    phase: Phase | None = None
    speed: int | None = None
    is_assigned: bool = False
    completed: bool = False
    waiting_time: int = 0
    assigned_runway: RunwayId | None = None
    status: str = "Waiting"
    has_speed_violation: bool = False
    entry_time: float = field(default_factory=time.time)
    phase_data: PhaseData = field(default_factory=PhaseData)
    wait_start_time: float = field(default_factory=time.monotonic)
    phase_start_time: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        self.type = AircraftType(self.type)
        self.direction = Direction(self.direction)
        if self.phase is None:
            self.phase = Phase.HOLDING if self.is_arrival() else Phase.AT_GATE
        else:
            self.phase = Phase(self.phase)
        if self.speed is None:
            self.speed = (
                ARRIVAL_START_SPEED if self.phase == Phase.HOLDING else DEPARTURE_START_SPEED
            )

    def is_arrival(self) -> bool:
        """True for flights coming in from the north or south."""
        return self.direction in (Direction.NORTH, Direction.SOUTH)


@dataclass
class Runway:
    """A runway and the flight, if any, occupying it."""

    id: RunwayId
    is_available: bool = True
    current_flight: str = ""