"""AVN generator: collects notices from ATC and relays them to portal and payments."""

from __future__ import annotations

import argparse
import sys
import threading
from collections.abc import Callable

from airctl.avn import EXIT_MESSAGE, Avn, is_exit_message, parse_avn
from airctl.pipes import ensure_fifo, read_messages, send_nonblocking

ATC_TO_AVN_PIPE = "/tmp/atc_to_avn"
AVN_TO_PORTAL_PIPE = "/tmp/avn_to_portal"
AVN_TO_STRIPE_PIPE = "/tmp/avn_to_stripe"
STRIPE_TO_AVN_PIPE = "/tmp/stripe_to_avn"

ALL_PIPES = (ATC_TO_AVN_PIPE, AVN_TO_PORTAL_PIPE, AVN_TO_STRIPE_PIPE, STRIPE_TO_AVN_PIPE)
DASHBOARD_INTERVAL = 5.0
RULE = "======================================================="
CLEAR_SCREEN = "\033[2J\033[H"

SendFn = Callable[[str, str], bool]


class AvnGenerator:
    """Keeps every notice seen and forwards it to the portal and to payments.

    ``send`` is called with a pipe path and the text to write, and returns
    whether the write reached a reader.
    """

    def __init__(self, send: SendFn | None = None) -> None:
        self._send = send if send is not None else send_nonblocking
        self._lock = threading.Lock()
        self._notices: list[Avn] = []
        self._exit = threading.Event()

    @property
    def notices(self) -> list[Avn]:
        """A copy of the notices received so far, oldest first."""
        with self._lock:
            return list(self._notices)

    @property
    def exit_requested(self) -> bool:
        return self._exit.is_set()

    def send_exit(self) -> None:
        """Tell the portal and the payment process to shut down."""
        self._send(AVN_TO_PORTAL_PIPE, EXIT_MESSAGE)
        self._send(AVN_TO_STRIPE_PIPE, EXIT_MESSAGE)

    def _forward(self, avn: Avn) -> None:
        line = avn.serialize()
        for path, target in ((AVN_TO_PORTAL_PIPE, "Portal"), (AVN_TO_STRIPE_PIPE, "StripePay")):
            if self._send(path, line):
                print(f"AVN forwarded to {target}: {avn.avn_id} | {avn.flight_name}")
            else:
                print(f"Could not open {target.lower()} pipe for writing", file=sys.stderr)

    def receive(self, text: str) -> Avn | None:
        """Handle a message from ATC.

        A new notice is stored and forwarded. An exit message marks the
        generator as finished, passes the exit on, and returns None.
        """
        if is_exit_message(text):
            print("[AVN Pipe] Received exit signal. Shutting down...")
            self._exit.set()
            self.send_exit()
            return None
        avn = parse_avn(text)
        with self._lock:
            self._notices.append(avn)
            print(f"[AVN Pipe] New AVN received: {avn.avn_id} | {avn.flight_name}")
        self._forward(avn)
        return avn

    def apply_payment(self, text: str) -> Avn | None:
        """Apply a payment update to the matching notice and forward it.

        Returns the updated notice, or None if no notice has that id.
        """
        update = parse_avn(text)
        with self._lock:
            avn = next((n for n in self._notices if n.avn_id == update.avn_id), None)
            if avn is None:
                return None
            avn.is_paid = update.is_paid
            print(
                f"[AVN Pipe] Payment status updated for AVN {avn.avn_id} | "
                f"{avn.flight_name} | Paid: {'Yes' if avn.is_paid else 'No'}"
            )
            self._forward(avn)
            return avn

    def dashboard(self) -> str:
        """Text table of all notices and their payment status."""
        lines = [RULE, "                  AVN GENERATOR DASHBOARD               ", RULE]
        notices = self.notices
        if not notices:
            lines.append("No AVNs generated yet.")
        else:
            lines.append(
                "ID       | Flight     | Airline          | Speed/Limit | Fine(PKR)  | Status"
            )
            lines.append(
                "---------|------------|------------------|-------------|------------|--------"
            )
            for avn in notices:
                lines.append(
                    f"{avn.avn_id} | {avn.flight_name} | {avn.airline} | "
                    f"{avn.recorded_speed}/{avn.permissible_speed} km/h | "
                    f"{avn.fine_amount:g} | {'PAID' if avn.is_paid else 'UNPAID'}"
                )
        lines.append(RULE)
        return "\n".join(lines) + "\n"

    def _read_atc(self, stop: threading.Event) -> None:
        for message in read_messages(ATC_TO_AVN_PIPE, stop):
            if self.receive(message) is None:
                stop.set()
                break

    def _read_payments(self, stop: threading.Event) -> None:
        for message in read_messages(STRIPE_TO_AVN_PIPE, stop):
            self.apply_payment(message)

    def _display(self, stop: threading.Event) -> None:
        while not stop.wait(DASHBOARD_INTERVAL):
            print(CLEAR_SCREEN + self.dashboard(), end="", flush=True)

    def run(self, stop: threading.Event | None = None) -> None:
        """Listen to ATC and payments and show the dashboard until stopped."""
        if stop is None:
            stop = threading.Event()
        workers = [
            threading.Thread(target=self._read_atc, args=(stop,), name="atc-reader"),
            threading.Thread(target=self._read_payments, args=(stop,), name="payments"),
            threading.Thread(target=self._display, args=(stop,), name="display"),
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()


def main(argv: list[str] | None = None) -> int:
    """Create the pipes and run the generator until ATC signals exit."""
    parser = argparse.ArgumentParser(prog="airctl-avn", description="AVN generator")
    parser.parse_args(argv)
    for path in ALL_PIPES:
        try:
            ensure_fifo(path)
        except OSError as exc:
            print(f"Error creating pipe {path}: {exc.strerror}", file=sys.stderr)
            return 1
    print("All pipes created successfully")
    print("AVN Generator Process Started")

    generator = AvnGenerator()
    try:
        generator.run()
    except KeyboardInterrupt:
        pass
    print("AVN Generator Process Terminated Gracefully.")
    generator.send_exit()
    return 0


if __name__ == "__main__":
    sys.exit(main())