"""Scheduling flights, running their lifecycles and reporting the airfield state."""

from __future__ import annotations

import itertools
import random
import threading
import time
from collections.abc import Iterable

from airctl.models import (
    Aircraft,
    Phase,
    RunwayId,
    aircraft_type_name,
    direction_name,
    phase_name,
)
from airctl.runways import RunwayBoard
from airctl.speed import check_speed_violation, monitor_speed
from airctl.violations import ViolationLedger

DEFAULT_TICK = 0.5
DEFAULT_DURATION = 300
GROUND_FAULT_ODDS = 100
DASHBOARD_NOTICES = 5
_GROUND_PHASES = (Phase.TAXI, Phase.AT_GATE)


def priority_key(flight: Aircraft) -> tuple[bool, int, float]:
    """Sort key: emergencies first, then higher priority, then earlier entry."""
    return (not flight.is_emergency, -flight.priority, flight.entry_time)


class Simulation:
    """Runs scheduled flights through runway allocation and their phases.

    ``tick`` is the pause, in seconds, between two steps of a flight; a
    simulation minute lasts two ticks.
    """

    def __init__(
        self,
        flights: Iterable[Aircraft],
        ledger: ViolationLedger | None = None,
        rng: random.Random | None = None,
        tick: float = DEFAULT_TICK,
    ) -> None:
        self.tick = tick
        self.ledger = ledger if ledger is not None else ViolationLedger()
        self.rng = rng if rng is not None else random.Random()
        self.runways = RunwayBoard()
        self.scheduled: list[Aircraft] = sorted(flights, key=lambda f: f.scheduled_time)
        now = time.monotonic()
        for flight in self.scheduled:
            flight.wait_start_time = now
        self._next_index = 0
        self._schedule_lock = threading.Lock()
        self._active_lock = threading.Lock()
        self._active: list[Aircraft] = []
        self._threads: list[threading.Thread] = []

    @property
    def active(self) -> list[Aircraft]:
        """A copy of the currently active flights."""
        with self._active_lock:
            return list(self._active)

    def due_flights(self, current_time: int) -> list[Aircraft]:
        """Take the flights scheduled for exactly ``current_time``, best first."""
        with self._schedule_lock:
            pending = self.scheduled[self._next_index:]
            due = list(
                itertools.takewhile(lambda f: f.scheduled_time == current_time, pending)
            )
            self._next_index += len(due)
        return sorted(due, key=priority_key)

    def activate(self, flight: Aircraft, current_time: int) -> None:
        """Mark ``flight`` as active from ``current_time`` on."""
        with self._active_lock:
            flight.phase_start_time = time.monotonic()
            flight.entry_time = current_time
            self._active.append(flight)
        print(f"Flight {flight.flight_name} is now active at time {current_time}")

    def step_flight(self, flight: Aircraft) -> bool:
        """Advance an assigned flight by one tick.

        Issues a notice on a speed violation. Returns True when a ground
        fault removed the flight from the system.
        """
        if not flight.is_assigned:
            return False
        monitor_speed(flight, self.rng)
        violation = check_speed_violation(flight)
        if violation is not None:
            self.ledger.issue(flight, violation.recorded_speed, violation.permissible_speed)
        if (
            self.rng.randrange(GROUND_FAULT_ODDS) == 0
            and flight.phase in _GROUND_PHASES
        ):
            self.handle_ground_fault(flight)
            return True
        return False

    def _free_runway(self, flight: Aircraft) -> None:
        freed = self.runways.free(flight.flight_name)
        if freed is not None:
            print(f"RUNWAY FREED: Runway {RunwayId(freed).letter} is now available")

    def flight_lifecycle(self, flight: Aircraft, stop: threading.Event | None = None) -> None:
        """Wait for a runway, fly every phase, then release the runway."""
        if stop is None:
            stop = threading.Event()
        while not flight.is_assigned and not flight.completed:
            if stop.is_set():
                return
            runway = self.runways.try_assign(flight)
            if runway is not None:
                print(
                    f"SUCCESS: Flight {flight.flight_name} (priority {flight.priority}) "
                    f"assigned to runway {RunwayId(runway).letter}"
                )
            else:
                stop.wait(self.tick)
        while not flight.completed and not stop.is_set():
            if self.step_flight(flight):
                break
            stop.wait(self.tick)
        self._free_runway(flight)

    def handle_ground_fault(self, flight: Aircraft) -> bool:
        """Remove a faulty flight and free its runway.

        Returns False if the flight was not active.
        """
        print(f"!!! GROUND FAULT detected for {flight.flight_name} - removing from system")
        with self._active_lock:
            match = next(
                (f for f in self._active if f.flight_name == flight.flight_name), None
            )
            if match is None:
                return False
            self._free_runway(flight)
            self._active.remove(match)
        return True

    def dashboard(self, current_time: int) -> str:
        """Text report of active flights, runways and recent notices."""
        lines = [
            "================= AirControlX Dashboard =================",
            f"Current Time: {current_time} minutes",
            "",
            "Active Flights:",
        ]
        for flight in self.active:
            line = (
                f"- {flight.flight_name} | {flight.airline}"
                f" | Type: {aircraft_type_name(flight.type)}"
                f" | Dir: {direction_name(flight.direction)}"
                f" | Status: {flight.status}"
                f" | Phase: {phase_name(flight.phase)}"
                f" | Speed: {flight.speed} km/h"
                f" | Wait: {flight.waiting_time} min"
                f" | Priority: {flight.priority}"
            )
            if flight.has_speed_violation:
                line += " [SPEED VIOLATION]"
            lines.append(line)

        lines += ["", "Runway Status:"]
        for runway in self.runways.snapshot():
            state = "Available" if runway.is_available else runway.current_flight
            lines.append(f"- RWY-{runway.id.letter}: {state}")

        total = len(self.ledger)
        if total:
            lines += ["", f"Aviation Violation Notices ({total}):"]
            for notice in self.ledger.recent(DASHBOARD_NOTICES):
                lines.append(
                    f"- {notice.avn_id} | {notice.flight_name}"
                    f" | Speed: {notice.recorded_speed}/{notice.permissible_speed} km/h"
                    f" | Fine: PKR {notice.fine_amount:g}"
                )
        lines.append("========================================================")
        return "\n".join(lines) + "\n\n"

    def _simulate_step(self, current_time: int, stop: threading.Event) -> None:
        due = self.due_flights(current_time)
        print(f"Flights scheduled for this minute: {len(due)}")
        if due:
            print("Sorted flights by priority (from highest to lowest):")
            for flight in due:
                print(
                    f"  - {flight.flight_name} (Priority: {flight.priority}, "
                    f"Type: {aircraft_type_name(flight.type)})"
                )
            for flight in due:
                self.activate(flight, current_time)
                thread = threading.Thread(
                    target=self.flight_lifecycle,
                    args=(flight, stop),
                    name=f"flight-{flight.flight_name}",
                    daemon=True,
                )
                self._threads.append(thread)
                thread.start()
                stop.wait(self.tick / 10)

        print("\nCurrent Runway Status:")
        for runway in self.runways.snapshot():
            state = (
                "Available" if runway.is_available else f"Occupied by {runway.current_flight}"
            )
            print(f"  Runway {runway.id.letter}: {state}")
        print(self.dashboard(current_time), end="")

    def run(self, duration: int = DEFAULT_DURATION, stop: threading.Event | None = None) -> None:
        """Step the schedule once a minute until ``duration`` has passed.

        Waits for every started flight to finish before returning.
        """
        if stop is None:
            stop = threading.Event()
        minute = self.tick * 2
        start = time.monotonic()
        current_time = 0
        while not stop.is_set():
            self._simulate_step(current_time, stop)
            current_time = int((time.monotonic() - start) / minute)
            if current_time > duration:
                break
            stop.wait(minute)
        for thread in self._threads:
            thread.join()