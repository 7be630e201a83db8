"""On-screen state of flights: positions, fading and phase styling."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from airctl.models import Aircraft, Phase

WHITE = (255, 255, 255)
REMOVAL_DELAY = 3.0
FADE_IN_STEP = 5.0
FADE_OUT_RATE = 85.0
MAX_ALPHA = 255.0
OFFSCREEN_X = 1200.0
DEFAULT_TARGET_X = 500.0
WAITING_START_X = 300.0
WAITING_SPACING = 100.0
ANIMATION_RATE = 2.0

_PHASE_COLORS = {
    Phase.APPROACH: (100, 150, 255),
    Phase.LANDING: (50, 200, 50),
    Phase.TAXI: (200, 200, 50),
    Phase.HOLDING: (200, 150, 50),
    Phase.TAKEOFF_ROLL: (255, 100, 100),
    Phase.DEPARTURE: (150, 100, 255),
    Phase.AT_GATE: (100, 255, 200),
    Phase.CLIMB: (255, 150, 200),
}

_PHASE_LABELS = {
    Phase.APPROACH: "Approaching",
    Phase.LANDING: "Landing",
    Phase.TAXI: "Taxiing",
    Phase.HOLDING: "holding",
    Phase.TAKEOFF_ROLL: "Takeoff",
    Phase.DEPARTURE: "Departing",
    Phase.AT_GATE: "At Gate",
    Phase.CLIMB: "Climbing",
}

_TARGET_X = {
    Phase.APPROACH: 200.0,
    Phase.LANDING: 400.0,
    Phase.TAXI: 600.0,
    Phase.HOLDING: 400.0,
    Phase.TAKEOFF_ROLL: 800.0,
    Phase.DEPARTURE: 1000.0,
    Phase.AT_GATE: 300.0,
    Phase.CLIMB: 900.0,
}

_ON_RUNWAY = (0, 1, 2)


def phase_color(phase: int) -> tuple[int, int, int]:
    """RGB colour used to draw a flight in ``phase``."""
    return _PHASE_COLORS.get(phase, WHITE)


def phase_label(phase: int) -> str:
    """Short label shown under a flight's name."""
    return _PHASE_LABELS.get(phase, "Unknown")


def target_x(phase: int) -> float:
    """Horizontal position a flight moves towards in ``phase``."""
    return _TARGET_X.get(phase, DEFAULT_TARGET_X)


@dataclass
class VisualState:
    """How one flight currently looks on screen."""

    last_state_change: float = 0.0
    current_phase: int | None = None
    runway_index: int = -1
    target_x: float = 0.0
    current_x: float = 0.0
    is_active: bool = False
    pending_removal: bool = False
    speed: float = 0.0
    completed: bool = False
    speed_violation: bool = False
    avionics_active: bool = False
    alpha: float = 0.0


class VisualTracker:
    """Follows active flights and animates them in, along and out."""

    def __init__(self) -> None:
        self.states: dict[str, VisualState] = {}

    def update(self, flights: Iterable[Aircraft | None], now: float) -> None:
        """Bring the visual states in line with the active flights."""
        seen: set[str] = set()
        for flight in flights:
            if flight is None:
                continue
            name = flight.flight_name
            seen.add(name)
            state = self.states.setdefault(name, VisualState())
            runway = -1 if flight.assigned_runway is None else int(flight.assigned_runway)
            changed = (
                state.current_phase != flight.phase
                or state.runway_index != runway
                or not state.is_active
            )
            state.speed = flight.speed
            state.completed = flight.completed
            state.speed_violation = flight.has_speed_violation
            state.avionics_active = flight.has_speed_violation
            if changed:
                state.last_state_change = now
                state.current_phase = flight.phase
                state.runway_index = runway
                state.is_active = True
                state.pending_removal = False
                state.target_x = target_x(flight.phase)

        for name, state in self.states.items():
            if name not in seen and not state.pending_removal:
                state.pending_removal = True
                state.last_state_change = now
                state.target_x = OFFSCREEN_X

        expired = [
            name
            for name, state in self.states.items()
            if state.pending_removal and now - state.last_state_change > REMOVAL_DELAY
        ]
        for name in expired:
            del self.states[name]

    def advance(self, now: float) -> list[tuple[str, VisualState]]:
        """Step fading and movement one frame; return the states in draw order.

        Flights without a runway are lined up side by side in a waiting row.
        """
        waiting_x = 0.0
        frame: list[tuple[str, VisualState]] = []
        for name, state in self.states.items():
            elapsed = max(0.0, now - state.last_state_change)
            if state.pending_removal:
                state.alpha = max(0.0, MAX_ALPHA - elapsed * FADE_OUT_RATE)
            else:
                state.alpha = min(MAX_ALPHA, state.alpha + FADE_IN_STEP)

            t = min(1.0, elapsed * ANIMATION_RATE)
            t = 1.0 - (1.0 - t) ** 3
            start = state.current_x
            state.current_x = start + t * (state.target_x - start)
            if state.runway_index not in _ON_RUNWAY:
                state.current_x = WAITING_START_X + waiting_x
                waiting_x += WAITING_SPACING
            frame.append((name, state))
        return frame