"""Payment process: takes notices and lets an operator pay them."""

from __future__ import annotations

import argparse
import os
import sys
import threading
from collections.abc import Callable
from dataclasses import replace

from airctl.avn import Avn, is_exit_message, parse_avn
from airctl.pipes import ensure_fifo, read_messages, send_nonblocking

AVN_TO_STRIPE_PIPE = "/tmp/avn_to_stripe"
STRIPE_TO_AVN_PIPE = "/tmp/stripe_to_avn"
STRIPE_TO_PORTAL_PIPE = "/tmp/stripe_to_portal"
ALL_PIPES = (AVN_TO_STRIPE_PIPE, STRIPE_TO_AVN_PIPE, STRIPE_TO_PORTAL_PIPE)
PROMPT = "Enter flight name to pay  "

SendFn = Callable[[str, str], bool]


class UnknownFlightError(KeyError):
    """Raised when paying for a flight with no notice on record."""


class StripePay:
    """Latest notice per flight, and payment of it.

    ``send`` is called with a pipe path and the text to write.
    """

    def __init__(self, send: SendFn | None = None) -> None:
        self._send = send if send is not None else send_nonblocking
        self._lock = threading.Lock()
        self._notices: dict[str, Avn] = {}
        self.stopped = threading.Event()

    @property
    def running(self) -> bool:
        return not self.stopped.is_set()

    def notice_for(self, flight_name: str) -> Avn | None:
        with self._lock:
            return self._notices.get(flight_name)

    def receive(self, text: str) -> Avn | None:
        """Store a notice under its flight; an exit message stops and gives None."""
        if is_exit_message(text):
            print("Received exit signal. Shutting down...")
            self.stopped.set()
            return None
        avn = parse_avn(text)
        with self._lock:
            self._notices[avn.flight_name] = avn
            print(f"AVN received for flight: {avn.flight_name}")
            print(PROMPT, end="", flush=True)
        return avn

    def pay(self, flight_name: str) -> Avn:
        """Mark the flight's notice paid and report it to the generator and portal."""
        with self._lock:
            current = self._notices.get(flight_name)
        if current is None:
            raise UnknownFlightError(flight_name)
        print(f"Processing payment for flight: {flight_name}")
        print(f"Fine amount: PKR {current.fine_amount:g}")
        paid = replace(current, is_paid=True)
        print(f"Payment successful for flight: {flight_name}")
        with self._lock:
            self._notices[flight_name] = paid
            line = paid.serialize()
            self._send(STRIPE_TO_AVN_PIPE, line)
            self._send(STRIPE_TO_PORTAL_PIPE, line)
        return paid

    def _listen(self) -> None:
        for message in read_messages(AVN_TO_STRIPE_PIPE, self.stopped):
            if self.receive(message) is None:
                break

    def run(self) -> None:
        """Listen for notices while reading flight names to pay from the console."""
        listener = threading.Thread(target=self._listen, name="stripe-listener", daemon=True)
        listener.start()
        try:
            while self.running:
                try:
                    name = input(PROMPT)
                except EOFError:
                    break
                if not self.running:
                    break
                name = name.strip()
                if not name:
                    continue
                try:
                    self.pay(name)
                except UnknownFlightError:
                    print(f"No AVN found for flight: {name}")
        finally:
            self.stopped.set()
            listener.join()


def main(argv: list[str] | None = None) -> int:
    """Run the payment process until the generator signals exit."""
    parser = argparse.ArgumentParser(prog="airctl-stripe", description="StripePay process")
    parser.parse_args(argv)
    for path in ALL_PIPES:
        try:
            ensure_fifo(path)
        except OSError as exc:
            print(f"Error creating pipe {path}: {exc.strerror}", file=sys.stderr)
            return 1
    print("All pipes created successfully")
    print("StripePay Process Started")
    try:
        StripePay().run()
    except KeyboardInterrupt:
        pass
    for path in ALL_PIPES:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
    print("StripePay Process Terminated")
    return 0


if __name__ == "__main__":
    sys.exit(main())