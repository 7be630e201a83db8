"""Speed tracking, phase progression and speed-limit checks for a flight."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import NamedTuple, Protocol

from airctl.models import Aircraft, AircraftType, Phase, speed_limit_for

PHASE_TICKS = 10


class _RandInt(Protocol):
    def randint(self, a: int, b: int) -> int: ...


@dataclass(frozen=True)
class _SpeedRule:
    """How speed drifts in one phase and when it is pulled back."""

    low: int
    high: int
    threshold: int
    sustained: int


_ARRIVAL_RULES: dict[Phase, _SpeedRule] = {
    Phase.HOLDING: _SpeedRule(1, 100, 400, 500),
    Phase.APPROACH: _SpeedRule(1, 5, 240, 270),
    Phase.LANDING: _SpeedRule(1, 30, 30, 100),
    Phase.TAXI: _SpeedRule(1, 2, 15, 20),
    Phase.AT_GATE: _SpeedRule(0, 1, 0, 3),
}

_DEPARTURE_RULES: dict[Phase, _SpeedRule] = {
    Phase.AT_GATE: _SpeedRule(0, 1, 5, 1),
    Phase.TAXI: _SpeedRule(1, 2, 30, 20),
    Phase.TAKEOFF_ROLL: _SpeedRule(1, 30, 290, 220),
    Phase.CLIMB: _SpeedRule(1, 20, 463, 400),
    Phase.DEPARTURE: _SpeedRule(1, 10, 900, 860),
}

# phase -> (next phase, entry speed)
_ARRIVAL_NEXT: dict[Phase, tuple[Phase, int]] = {
    Phase.HOLDING: (Phase.APPROACH, 290),
    Phase.APPROACH: (Phase.LANDING, 240),
    Phase.LANDING: (Phase.TAXI, 30),
    Phase.TAXI: (Phase.AT_GATE, 5),
}

_DEPARTURE_NEXT: dict[Phase, tuple[Phase, int]] = {
    Phase.AT_GATE: (Phase.TAXI, 15),
    Phase.TAXI: (Phase.TAKEOFF_ROLL, 50),
    Phase.TAKEOFF_ROLL: (Phase.CLIMB, 300),
    Phase.CLIMB: (Phase.DEPARTURE, 800),
}

_STATUS_FORMATS: dict[Phase, str] = {
    Phase.HOLDING: "Holding at {} km/h",
    Phase.APPROACH: "Approaching at {} km/h",
    Phase.LANDING: "Landing at {} km/h",
    Phase.TAXI: "Taxiing at {} km/h",
    Phase.AT_GATE: "At Gate",
    Phase.TAKEOFF_ROLL: "Takeoff Roll at {} km/h",
    Phase.CLIMB: "Climbing at {} km/h",
    Phase.DEPARTURE: "Departing at {} km/h",
}


class SpeedViolation(NamedTuple):
    """A recorded speed together with the limit it broke."""

    recorded_speed: int
    permissible_speed: int


def status_text(flight: Aircraft) -> str:
    """Status line describing the flight's phase and speed."""
    fmt = _STATUS_FORMATS.get(flight.phase)
    if fmt is None:
        return flight.status
    return fmt.format(flight.speed)


def _drift(flight: Aircraft, rng: _RandInt) -> None:
    data = flight.phase_data
    if flight.is_arrival():
        rule = _ARRIVAL_RULES.get(flight.phase)
        if rule is None:
            return
        flight.speed = max(0, flight.speed - rng.randint(rule.low, rule.high))
        crossed = flight.speed <= rule.threshold
    else:
        rule = _DEPARTURE_RULES.get(flight.phase)
        if rule is None:
            return
        flight.speed = max(0, flight.speed + rng.randint(rule.low, rule.high))
        crossed = flight.speed >= rule.threshold
    if crossed:
        data.threshold_crossed = True
        data.sustained_speed = rule.sustained


def _advance_phase(flight: Aircraft) -> None:
    if flight.is_arrival():
        transitions, final_phase, final_status = _ARRIVAL_NEXT, Phase.AT_GATE, "Arrived"
    else:
        transitions, final_phase, final_status = _DEPARTURE_NEXT, Phase.DEPARTURE, "Departed"

    if flight.phase in transitions:
        flight.phase, flight.speed = transitions[flight.phase]
        if flight.phase == Phase.AT_GATE:
            flight.status = "At Gate"
    elif flight.phase == final_phase:
        flight.status = final_status
        flight.completed = True


def monitor_speed(flight: Aircraft, rng: _RandInt | None = None) -> None:
    """Advance the flight's speed by one tick.

    For the first ten ticks of a phase the speed drifts towards the end of
    the phase's band; once it crosses the threshold it is pulled back to a
    sustained value on the next tick. On the eleventh tick the flight moves
    to its next phase, or completes after its last one.
    """
    rng = rng if rng is not None else random
    data = flight.phase_data

    if data.timer < PHASE_TICKS:
        if data.threshold_crossed:
            flight.speed = data.sustained_speed
            data.threshold_crossed = False
        else:
            _drift(flight, rng)
        flight.status = status_text(flight)
        data.timer += 1
        return

    _advance_phase(flight)
    data.timer = 0
    data.threshold_crossed = False
    data.sustained_speed = 0


def check_speed_violation(flight: Aircraft) -> SpeedViolation | None:
    """Check the flight's speed against its phase limits.

    Military and medical aircraft are exempt. On a violation the flight is
    flagged and the recorded speed is returned with the limit it broke.
    """
    if flight.type in (AircraftType.MILITARY, AircraftType.MEDICAL):
        return None
    limit = speed_limit_for(flight.phase)
    if limit is None or limit.allows(flight.speed):
        return None
    permissible = limit.min_speed if flight.speed < limit.min_speed else limit.max_speed
    flight.has_speed_violation = True
    return SpeedViolation(flight.speed, permissible)