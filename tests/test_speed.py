import random

import pytest

from airctl.models import Aircraft, AircraftType, Direction, Phase, speed_limit_for
from airctl.speed import (
    SpeedViolation,
    check_speed_violation,
    monitor_speed,
    status_text,
)


class FixedRng:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return min(max(self.value, a), b)


def arrival(**kwargs):
    return Aircraft("PK301", "PIA", AircraftType.COMMERCIAL, Direction.NORTH, **kwargs)


def departure(**kwargs):
    return Aircraft("PK302", "PIA", AircraftType.COMMERCIAL, Direction.EAST, **kwargs)


def test_arrival_holding_speed_drops_by_random_change():
    flight = arrival()
    before = flight.speed
    rng = FixedRng(50)
    monitor_speed(flight, rng)
    assert rng.calls == [(1, 100)]
    assert flight.speed == before - 50
    assert flight.phase_data.timer == 1
    assert flight.status == f"Holding at {flight.speed} km/h"


def test_departure_speed_rises():
    flight = departure(phase=Phase.TAKEOFF_ROLL, speed=50)
    rng = FixedRng(10)
    monitor_speed(flight, rng)
    assert rng.calls == [(1, 30)]
    assert flight.speed == 60


def test_threshold_crossing_then_sustained_speed():
    flight = arrival(speed=410)
    monitor_speed(flight, FixedRng(20))
    assert flight.phase_data.threshold_crossed is True
    assert flight.phase_data.sustained_speed == 500
    monitor_speed(flight, FixedRng(20))
    assert flight.speed == 500
    assert flight.phase_data.threshold_crossed is False
    assert flight.phase_data.timer == 2


def test_speed_never_negative():
    flight = arrival(phase=Phase.LANDING, speed=3)
    monitor_speed(flight, FixedRng(30))
    assert flight.speed == 0


def test_phase_transition_after_ten_ticks():
    flight = arrival()
    flight.phase_data.timer = 10
    flight.phase_data.threshold_crossed = True
    monitor_speed(flight, FixedRng(1))
    assert flight.phase == Phase.APPROACH
    assert flight.speed == 290
    assert flight.phase_data.timer == 0
    assert flight.phase_data.threshold_crossed is False


def test_taxi_to_gate_sets_status():
    flight = arrival(phase=Phase.TAXI, speed=20)
    flight.phase_data.timer = 10
    monitor_speed(flight, FixedRng(1))
    assert flight.phase == Phase.AT_GATE
    assert flight.status == "At Gate"


@pytest.mark.parametrize("seed", [0, 1, 7])
def test_arrival_completes_after_all_phases(seed):
    flight = arrival()
    rng = random.Random(seed)
    ticks = 0
    while not flight.completed:
        monitor_speed(flight, rng)
        ticks += 1
        assert flight.speed >= 0
    assert flight.status == "Arrived"
    assert flight.phase == Phase.AT_GATE
    assert ticks == 5 * 11


@pytest.mark.parametrize("seed", [0, 3])
def test_departure_completes_after_all_phases(seed):
    flight = departure()
    rng = random.Random(seed)
    ticks = 0
    while not flight.completed:
        monitor_speed(flight, rng)
        ticks += 1
    assert flight.status == "Departed"
    assert flight.phase == Phase.DEPARTURE
    assert ticks == 5 * 11


def test_status_text_formats():
    assert status_text(arrival(speed=600)) == "Holding at 600 km/h"
    assert status_text(departure()) == "At Gate"
    assert status_text(departure(phase=Phase.CLIMB, speed=350)) == "Climbing at 350 km/h"


def test_violation_over_limit():
    flight = arrival(speed=700)
    result = check_speed_violation(flight)
    assert result == SpeedViolation(700, speed_limit_for(Phase.HOLDING).max_speed)
    assert flight.has_speed_violation is True


def test_violation_under_limit():
    flight = arrival(speed=300)
    result = check_speed_violation(flight)
    assert result == SpeedViolation(300, speed_limit_for(Phase.HOLDING).min_speed)


def test_no_violation_within_band():
    flight = arrival(speed=500)
    assert check_speed_violation(flight) is None
    assert flight.has_speed_violation is False


@pytest.mark.parametrize("kind", [AircraftType.MILITARY, AircraftType.MEDICAL])
def test_exempt_aircraft(kind):
    flight = Aircraft("PAF1", "Pakistan Airforce", kind, Direction.SOUTH, speed=900)
    assert check_speed_violation(flight) is None
    assert flight.has_speed_violation is False