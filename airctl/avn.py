"""Aviation violation notices and their pipe-delimited wire format."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass

AVN_ID_LIMIT = 19
FLIGHT_NAME_LIMIT = 29
AIRLINE_LIMIT = 29

EXIT_MESSAGE = "EXIT"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def _leading_int(token: str) -> int:
    """Integer at the start of ``token``, or 0 if there is none."""
    match = _INT_RE.match(token)
    return int(match.group(1)) if match else 0


def _leading_float(token: str) -> float:
    """Number at the start of ``token``, or 0.0 if there is none."""
    match = _FLOAT_RE.match(token)
    return float(match.group(1)) if match else 0.0


@dataclass
class Avn:
    """A single aviation violation notice."""

    avn_id: str = ""
    flight_name: str = ""
    airline: str = ""
    aircraft_type: int = 0
    recorded_speed: int = 0
    permissible_speed: int = 0
    issue_time: int = 0
    fine_amount: float = 0.0
    is_paid: bool = False

    def serialize(self) -> str:
        """Encode the notice as one newline-terminated, pipe-separated line."""
        return (
            f"{self.avn_id}|{self.flight_name}|{self.airline}|"
            f"{self.aircraft_type}|{self.recorded_speed}|{self.permissible_speed}|"
            f"{self.issue_time}|{self.fine_amount:.2f}|{1 if self.is_paid else 0}\n"
        )


def parse_avn(text: str) -> Avn:
    """Decode a pipe-separated notice.

    Empty fields are skipped, text fields are cut to their limits, numbers
    are read from the start of their field, and missing fields keep their
    defaults.
    """
    tokens = [token for token in text.split("|") if token]
    fields = iter(tokens)
    avn = Avn()

    def take() -> str | None:
        return next(fields, None)

    if (token := take()) is not None:
        avn.avn_id = token[:AVN_ID_LIMIT]
    if (token := take()) is not None:
        avn.flight_name = token[:FLIGHT_NAME_LIMIT]
    if (token := take()) is not None:
        avn.airline = token[:AIRLINE_LIMIT]
    if (token := take()) is not None:
        avn.aircraft_type = _leading_int(token)
    if (token := take()) is not None:
        avn.recorded_speed = _leading_int(token)
    if (token := take()) is not None:
        avn.permissible_speed = _leading_int(token)
    if (token := take()) is not None:
        avn.issue_time = _leading_int(token)
    if (token := take()) is not None:
        avn.fine_amount = _leading_float(token)
    if (token := take()) is not None:
        avn.is_paid = _leading_int(token) == 1
    return avn


def format_time(timestamp: float) -> str:
    """Render a Unix timestamp as local ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))


def is_exit_message(text: str) -> bool:
    """True when a pipe message asks the receiver to shut down."""
    return text.startswith(EXIT_MESSAGE)