"""Issuing and recording aviation violation notices."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from airctl.avn import Avn
from airctl.models import Aircraft, AircraftType

BASE_FINES: dict[AircraftType, float] = {
    AircraftType.COMMERCIAL: 500000.0,
    AircraftType.CARGO: 700000.0,
}
SURCHARGE = 1.15
DUE_PERIOD = 3 * 24 * 60 * 60
NOTICE_FLIGHT_NAME_LIMIT = 10
NOTICE_AIRLINE_LIMIT = 30


def fine_for(aircraft_type: int) -> float:
    """Fine in PKR, surcharge included, for an aircraft type."""
    base = BASE_FINES.get(aircraft_type, 0.0)
    return base * SURCHARGE if base > 0 else 0.0


class ViolationLedger:
    """Thread-safe record of issued notices.

    Each new notice is serialized and handed to ``sink``, if one is given.
    """

    def __init__(self, sink: Callable[[str], object] | None = None) -> None:
        self._sink = sink
        self._lock = threading.Lock()
        self._notices: list[Avn] = []
        self.due_dates: dict[str, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._notices)

    def issue(
        self,
        flight: Aircraft,
        recorded_speed: int,
        permissible_speed: int,
        now: float | None = None,
    ) -> Avn:
        """Record a notice against ``flight`` and forward it to the sink."""
        issue_time = int(time.time() if now is None else now)
        with self._lock:
            notice = Avn(
                avn_id=f"AVN-{len(self._notices) + 1}",
                flight_name=flight.flight_name[:NOTICE_FLIGHT_NAME_LIMIT],
                airline=flight.airline[:NOTICE_AIRLINE_LIMIT],
                aircraft_type=int(flight.type),
                recorded_speed=recorded_speed,
                permissible_speed=permissible_speed,
                issue_time=issue_time,
                fine_amount=fine_for(flight.type),
                is_paid=False,
            )
            self._notices.append(notice)
            self.due_dates[notice.avn_id] = issue_time + DUE_PERIOD
            print(f"!!! AVN ISSUED for {flight.flight_name} Speed Violation!")
            if self._sink is not None:
                self._sink(notice.serialize())
        return notice

    def recent(self, count: int = 5) -> list[Avn]:
        """Up to ``count`` notices, newest first."""
        with self._lock:
            if count <= 0:
                return []
            return list(reversed(self._notices[-count:]))