"""Airline portal: shows each airline the notices issued against it."""

from __future__ import annotations

import argparse
import os
import sys
import threading
from dataclasses import dataclass

from airctl.avn import Avn, format_time, is_exit_message, parse_avn
from airctl.pipes import ensure_fifo, read_messages

AVN_TO_PORTAL_PIPE = "/tmp/avn_to_portal"
DASHBOARD_INTERVAL = 3.0
RULE = "======================================================="
CLEAR_SCREEN = "\033[2J\033[H"

_TYPE_NAMES = {0: "Commercial", 1: "Cargo", 2: "Military", 3: "Medical"}


def _type_name(code: int) -> str:
    return _TYPE_NAMES.get(code, "Unknown")


@dataclass(frozen=True)
class AirlineSummary:
    """Counts and fine totals for one airline."""

    total: int
    paid: int
    unpaid: int
    total_fines: float
    paid_fines: float


class Portal:
    """Notices grouped by airline, updated as they arrive."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._airlines: dict[str, list[Avn]] = {}
        self.stopped = threading.Event()

    @property
    def running(self) -> bool:
        return not self.stopped.is_set()

    def notices_for(self, airline: str) -> list[Avn]:
        """A copy of the notices held for ``airline``."""
        with self._lock:
            return list(self._airlines.get(airline, []))

    def airlines(self) -> list[str]:
        """Airline names with notices, in sorted order."""
        with self._lock:
            return sorted(self._airlines)

    def receive(self, text: str) -> Avn | None:
        """Add or replace a notice; an exit message stops the portal and gives None."""
        if is_exit_message(text):
            print("Received exit signal. Shutting down...")
            self.stopped.set()
            return None
        avn = parse_avn(text)
        with self._lock:
            notices = self._airlines.setdefault(avn.airline, [])
            index = next((i for i, n in enumerate(notices) if n.avn_id == avn.avn_id), None)
            if index is None:
                notices.append(avn)
            else:
                notices[index] = avn
            print(
                f"[Portal] Received AVN: {avn.avn_id} | {avn.flight_name} | "
                f"Status: {'PAID' if avn.is_paid else 'UNPAID'}"
            )
        return avn

    def summary(self, airline: str) -> AirlineSummary:
        """Totals for ``airline``; KeyError if it has no notices."""
        with self._lock:
            notices = list(self._airlines[airline])
        paid = [n for n in notices if n.is_paid]
        return AirlineSummary(
            total=len(notices),
            paid=len(paid),
            unpaid=len(notices) - len(paid),
            total_fines=sum(n.fine_amount for n in notices),
            paid_fines=sum(n.fine_amount for n in paid),
        )

    def dashboard(self) -> str:
        """Text report of every airline's notices and totals."""
        lines = [RULE, "                    AIRLINE PORTAL                      ", RULE]
        names = self.airlines()
        if not names:
            lines.append("No AVNs received yet.")
        for airline in names:
            lines += [
                "",
                f"--- {airline} ---",
                "AVN ID    | Flight     | Type       | Speed/Limit | Fine(PKR)  "
                "| Issue Date        | Status",
                "----------|------------|------------|-------------|------------"
                "|-------------------|--------",
            ]
            for avn in self.notices_for(airline):
                lines.append(
                    f"{avn.avn_id} | {avn.flight_name} | {_type_name(avn.aircraft_type)} | "
                    f"{avn.recorded_speed}/{avn.permissible_speed} km/h | "
                    f"{avn.fine_amount:g} | {format_time(avn.issue_time)} | "
                    f"{'PAID' if avn.is_paid else 'UNPAID'}"
                )
            totals = self.summary(airline)
            lines += [
                "",
                f"Summary: Total AVNs: {totals.total} | Paid: {totals.paid} | "
                f"Unpaid: {totals.unpaid} | Total Fines: PKR {totals.total_fines:g} | "
                f"Paid: PKR {totals.paid_fines:g}",
            ]
        return "\n".join(lines) + "\n"

    def _listen(self) -> None:
        for message in read_messages(AVN_TO_PORTAL_PIPE, self.stopped):
            if self.receive(message) is None:
                break

    def run(self) -> None:
        """Listen for notices and refresh the dashboard until told to exit."""
        listener = threading.Thread(target=self._listen, name="portal-listener")
        listener.start()
        try:
            while not self.stopped.wait(DASHBOARD_INTERVAL):
                print(CLEAR_SCREEN + self.dashboard(), end="", flush=True)
        finally:
            self.stopped.set()
            listener.join()


def main(argv: list[str] | None = None) -> int:
    """Run the airline portal until the generator signals exit."""
    parser = argparse.ArgumentParser(prog="airctl-portal", description="Airline portal")
    parser.parse_args(argv)
    try:
        ensure_fifo(AVN_TO_PORTAL_PIPE)
    except OSError as exc:
        print(f"Error creating AVN_TO_PORTAL pipe: {exc.strerror}", file=sys.stderr)
        return 1
    print("Airline Portal Started")
    try:
        Portal().run()
    except KeyboardInterrupt:
        pass
    try:
        os.unlink(AVN_TO_PORTAL_PIPE)
    except FileNotFoundError:
        pass
    print("Airline Portal terminated cleanly.")
    return 0


if __name__ == "__main__":
    sys.exit(main())