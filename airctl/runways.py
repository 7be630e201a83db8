"""Runway allocation shared between flight threads."""

from __future__ import annotations

import threading
import time
from dataclasses import replace

from airctl.models import Aircraft, AircraftType, Runway, RunwayId


class RunwayOccupiedError(RuntimeError):
    """Raised when a flight is put on a runway that is in use."""


def preferred_runways(flight: Aircraft) -> tuple[RunwayId, ...]:
    """Runways a flight may use, best first.

    Cargo only ever uses runway C. Emergencies may use any runway,
    arrivals favouring A and departures B. Other arrivals use A or C,
    other departures B or C.
    """
    if flight.type == AircraftType.CARGO:
        return (RunwayId.C,)
    emergency = flight.is_emergency or flight.type in (
        AircraftType.MILITARY,
        AircraftType.MEDICAL,
    )
    if emergency:
        if flight.is_arrival():
            return (RunwayId.A, RunwayId.C, RunwayId.B)
        return (RunwayId.B, RunwayId.C, RunwayId.A)
    if flight.is_arrival():
        return (RunwayId.A, RunwayId.C)
    return (RunwayId.B, RunwayId.C)


class RunwayBoard:
    """The three runways, guarded by one lock."""

    def __init__(self) -> None:
        self.condition = threading.Condition(threading.RLock())
        self._runways = [Runway(runway_id) for runway_id in RunwayId]

    def assign(self, flight: Aircraft, runway: RunwayId) -> None:
        """Put ``flight`` on ``runway``; the runway must be free."""
        runway = RunwayId(runway)
        with self.condition:
            slot = self._runways[runway]
            if not slot.is_available:
                raise RunwayOccupiedError(
                    f"runway {runway.letter} is occupied; cannot assign {flight.flight_name}"
                )
            slot.is_available = False
            slot.current_flight = flight.flight_name
            flight.is_assigned = True
            flight.assigned_runway = runway

    def free(self, flight_name: str) -> RunwayId | None:
        """Release the runway held by ``flight_name`` and wake waiters.

        Returns the freed runway, or None if the flight held none.
        """
        with self.condition:
            for slot in self._runways:
                if not slot.is_available and slot.current_flight == flight_name:
                    slot.is_available = True
                    slot.current_flight = ""
                    self.condition.notify_all()
                    return slot.id
        return None

    def try_assign(self, flight: Aircraft) -> RunwayId | None:
        """Give ``flight`` its first free preferred runway.

        When none is free, the flight's waiting time is brought up to
        date and None is returned.
        """
        with self.condition:
            for runway in preferred_runways(flight):
                if self._runways[runway].is_available:
                    self.assign(flight, runway)
                    return runway
            flight.waiting_time = int(time.monotonic() - flight.wait_start_time)
            return None

    def snapshot(self) -> tuple[Runway, ...]:
        """Copies of the runways' current state, in A, B, C order."""
        with self.condition:
            return tuple(replace(slot) for slot in self._runways)