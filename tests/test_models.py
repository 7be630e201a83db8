import pytest

from airctl.models import (
    AIRLINES,
    Aircraft,
    AircraftType,
    Direction,
    Phase,
    PhaseData,
    Runway,
    RunwayId,
    SPEED_LIMITS,
    SpeedLimit,
    aircraft_type_name,
    airline_name,
    direction_name,
    phase_name,
    speed_limit_for,
)


def test_speed_limit_for_holding_matches_table():
    limit = speed_limit_for(Phase.HOLDING)
    assert (limit.min_speed, limit.max_speed) == (400, 600)


def test_speed_limit_for_departure_matches_table():
    limit = speed_limit_for(Phase.DEPARTURE)
    assert (limit.min_speed, limit.max_speed) == (800, 900)


def test_every_phase_has_exactly_one_limit():
    assert sorted(limit.phase for limit in SPEED_LIMITS) == list(Phase)
    for phase in Phase:
        assert speed_limit_for(phase).phase == phase


def test_speed_limit_for_unknown_phase_is_none():
    assert speed_limit_for(42) is None


def test_speed_limit_allows_bounds():
    limit = SpeedLimit(Phase.TAXI, 15, 30)
    assert limit.allows(15)
    assert limit.allows(30)
    assert not limit.allows(14)
    assert not limit.allows(31)


@pytest.mark.parametrize("number", range(1, 7))
def test_airline_name_uses_menu_order(number):
    assert airline_name(number) == AIRLINES[number - 1]


def test_airline_name_known_values():
    assert airline_name(1) == "PIA"
    assert airline_name(6) == "Agha Khan Air Ambulance"


@pytest.mark.parametrize("number", [0, 7, -1])
def test_airline_name_rejects_out_of_range(number):
    with pytest.raises(ValueError):
        airline_name(number)


def test_names_for_known_codes():
    assert direction_name(Direction.WEST) == "West"
    assert phase_name(Phase.TAKEOFF_ROLL) == "Takeoff Roll"
    assert aircraft_type_name(AircraftType.MEDICAL) == "Medical"


def test_names_for_unknown_codes():
    assert direction_name(9) == "Unknown"
    assert phase_name(9) == "Unknown"
    assert aircraft_type_name(9) == "Unknown"


@pytest.mark.parametrize("direction", [Direction.NORTH, Direction.SOUTH])
def test_arrival_starts_holding_at_cruise(direction):
    flight = Aircraft("PK1", "PIA", AircraftType.COMMERCIAL, direction)
    assert flight.is_arrival()
    assert flight.phase == Phase.HOLDING
    assert flight.speed == 600


@pytest.mark.parametrize("direction", [Direction.EAST, Direction.WEST])
def test_departure_starts_at_gate_standing(direction):
    flight = Aircraft("PK2", "PIA", AircraftType.COMMERCIAL, direction)
    assert not flight.is_arrival()
    assert flight.phase == Phase.AT_GATE
    assert flight.speed == 0


def test_aircraft_defaults_and_coercion():
    flight = Aircraft("FX9", "FedEx", 1, 2)
    assert flight.type is AircraftType.CARGO
    assert flight.direction is Direction.EAST
    assert flight.status == "Waiting"
    assert flight.assigned_runway is None
    assert flight.phase_data == PhaseData()


def test_aircraft_rejects_bad_type():
    with pytest.raises(ValueError):
        Aircraft("X", "PIA", 7, Direction.NORTH)


def test_explicit_phase_and_speed_kept():
    flight = Aircraft("X", "PIA", 0, 0, phase=Phase.LANDING, speed=100)
    assert flight.phase == Phase.LANDING
    assert flight.speed == 100


def test_runway_defaults_to_free():
    runway = Runway(RunwayId.B)
    assert runway.is_available
    assert runway.current_flight == ""
    assert runway.id.letter == "B"