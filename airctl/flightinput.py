"""Interactive entry of the flight schedule."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from airctl.models import (
    AIRLINES,
    Aircraft,
    AircraftType,
    EMERGENCY_PRIORITY,
)

InputFn = Callable[[], str]


def _error_message(low: int, high: int | None) -> str:
    if high is None:
        if low == 1:
            return "Invalid input. Please enter a positive number: "
        if low == 0:
            return "Invalid input. Enter a non-negative number: "
        return f"Invalid input. Enter a number of at least {low}: "
    return f"Invalid input. Enter a number between {low} and {high}: "


def _parse_int(line: str) -> int | None:
    tokens = line.split()
    if not tokens:
        return None
    try:
        return int(tokens[0])
    except ValueError:
        return None


def prompt_int(
    prompt: str,
    low: int,
    high: int | None = None,
    input_fn: InputFn = input,
    output: TextIO | None = None,
) -> int:
    """Ask until a whole number in ``low``..``high`` is entered.

    ``high`` of None means no upper bound. EOFError from ``input_fn`` is
    passed on.
    """
    out = output if output is not None else sys.stdout
    out.write(prompt)
    out.flush()
    while True:
        value = _parse_int(input_fn())
        if value is not None and value >= low and (high is None or value <= high):
            return value
        out.write(_error_message(low, high))
        out.flush()


def _read_word(input_fn: InputFn) -> str:
    while True:
        tokens = input_fn().split()
        if tokens:
            return tokens[0]


def read_flights(input_fn: InputFn = input, output: TextIO | None = None) -> list[Aircraft]:
    """Read the flight schedule; arrivals come first, then departures."""
    out = output if output is not None else sys.stdout

    def ask(prompt: str, low: int, high: int | None = None) -> int:
        return prompt_int(prompt, low, high, input_fn, out)

    count = ask("Enter number of flights to schedule: ", 1)
    arrivals: list[Aircraft] = []
    departures: list[Aircraft] = []

    for number in range(1, count + 1):
        out.write(f"\nEnter details for flight {number}:\n")
        out.write("Flight Name: ")
        out.flush()
        name = _read_word(input_fn)

        menu = "".join(f"{i}. {airline}\n" for i, airline in enumerate(AIRLINES, start=1))
        airline_number = ask(f"Airline:\n{menu}", 1, len(AIRLINES))
        aircraft_type = ask(
            "Aircraft Type (0-Commercial, 1-Cargo, 2-Military, 3-Medical): ", 0, 3
        )
        direction = ask("Direction (0-North, 1-South, 2-East, 3-West): ", 0, 3)
        scheduled = ask("Scheduled Time (minute, e.g., 5 means at 5th min): ", 0)
        priority = ask(
            f"Priority (0–{EMERGENCY_PRIORITY}, higher number = higher priority): ",
            0,
            EMERGENCY_PRIORITY,
        )
        emergency = ask("Is Flight Emergency? (YES = 1 , NO = 0) : ", 0, 1)

        is_emergency = bool(emergency) or aircraft_type in (
            AircraftType.MILITARY,
            AircraftType.MEDICAL,
        )
        if is_emergency:
            out.write("flight is set emer\n")

        flight = Aircraft(
            flight_name=name,
            airline=AIRLINES[airline_number - 1],
            type=aircraft_type,
            direction=direction,
            scheduled_time=scheduled,
            priority=priority,
            airline_number=airline_number,
            is_emergency=is_emergency,
        )
        (arrivals if flight.is_arrival() else departures).append(flight)

    return arrivals + departures