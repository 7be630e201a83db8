"""Air traffic control window: runs the simulation and draws the airfield."""

from __future__ import annotations

import argparse
import sys
import threading
import time

import pygame

from airctl.flightinput import read_flights
from airctl.pipes import ensure_fifo, send_blocking, send_nonblocking
from airctl.avn import EXIT_MESSAGE
from airctl.simulation import DEFAULT_DURATION, DEFAULT_TICK, Simulation
from airctl.violations import ViolationLedger
from airctl.visuals import VisualState, VisualTracker, phase_color, phase_label

ATC_TO_AVN_PIPE = "/tmp/atc_to_avn"
FONT_FILE = "Howdy Frog.ttf"
WINDOW_SIZE = (1400, 1000)
FRAME_RATE = 60

BACKGROUND = (0, 0, 0)
WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
RUNWAY_FREE = (200, 255, 200)
RUNWAY_OCCUPIED = (255, 120, 120)
VIOLATION_RED = (255, 50, 50)
RUNWAY_LEFT = 5
RUNWAY_TOP = 250
RUNWAY_SPACING = 200
RUNWAY_HEIGHT = 60
FLIGHT_TOP = 220
PLANE_SIZE = 24


class Renderer:
    """Draws runways, flights, legend and clock for a running simulation."""

    def __init__(
        self,
        simulation: Simulation,
        tracker: VisualTracker | None = None,
        size: tuple[int, int] = WINDOW_SIZE,
    ) -> None:
        pygame.font.init()
        self.simulation = simulation
        self.tracker = tracker if tracker is not None else VisualTracker()
        self.size = size
        self._fonts: dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        font = self._fonts.get(size)
        if font is None:
            try:
                font = pygame.font.Font(FONT_FILE, size)
            except (OSError, pygame.error):
                font = pygame.font.Font(None, size)
            self._fonts[size] = font
        return font

    def _text(self, surface, text, size, pos, color, alpha=None) -> None:
        rendered = self._font(size).render(text, True, color)
        if alpha is not None:
            rendered.set_alpha(int(alpha))
        surface.blit(rendered, pos)

    @staticmethod
    def _blend_rect(surface, rgba, rect: pygame.Rect) -> None:
        patch = pygame.Surface(rect.size, pygame.SRCALPHA)
        patch.fill(rgba)
        surface.blit(patch, rect.topleft)

    @staticmethod
    def _plane(surface, rgba, pos) -> None:
        s = PLANE_SIZE
        patch = pygame.Surface((s, s), pygame.SRCALPHA)
        pygame.draw.polygon(patch, rgba, [(0, s * 0.2), (s, s / 2), (0, s * 0.8)])
        pygame.draw.rect(patch, rgba, pygame.Rect(s // 4, 0, s // 6, s))
        surface.blit(patch, pos)

    def _draw_runways(self, surface) -> None:
        width = self.size[0]
        for runway in self.simulation.runways.snapshot():
            top = RUNWAY_TOP + int(runway.id) * RUNWAY_SPACING
            color = RUNWAY_FREE if runway.is_available else RUNWAY_OCCUPIED
            pygame.draw.rect(
                surface, color, pygame.Rect(RUNWAY_LEFT, top, width - RUNWAY_LEFT, RUNWAY_HEIGHT)
            )
            self._text(surface, f"Runway {runway.id.letter}", 16, (RUNWAY_LEFT, top - 20), WHITE)
            if not runway.is_available and runway.current_flight:
                self._text(
                    surface, runway.current_flight, 14, (RUNWAY_LEFT + 100, top - 20), YELLOW
                )

    def _draw_flight(self, surface, name: str, state: VisualState) -> None:
        alpha = int(state.alpha)
        x = state.current_x
        y = FLIGHT_TOP + state.runway_index * RUNWAY_SPACING
        rgb = VIOLATION_RED if state.speed_violation else phase_color(state.current_phase)
        self._plane(surface, (*rgb, alpha), (x, y))

        self._blend_rect(
            surface, (0, 0, 0, int(alpha * 0.7)), pygame.Rect(int(x + 25), int(y - 5), 200, 50)
        )
        self._text(surface, name, 12, (x + 30, y), WHITE, alpha)
        self._text(
            surface, phase_label(state.current_phase), 10, (x + 30, y + 15), (200, 200, 200), alpha
        )
        speed_color = (255, 100, 100) if state.speed_violation else (150, 255, 150)
        self._text(
            surface, f"Speed: {int(state.speed)} kts", 10, (x + 30, y + 30), speed_color, alpha
        )
        avionics_color = (150, 255, 150) if state.avionics_active else (255, 150, 150)
        avionics = "AVN: ON" if state.avionics_active else "AVN: OFF"
        self._text(surface, avionics, 10, (x + 120, y + 30), avionics_color, alpha)
        runway_letter = chr(ord("A") + state.runway_index)
        self._text(surface, f"RWY: {runway_letter}", 10, (x + 120, y + 15), (200, 200, 200), alpha)

    def _draw_legend(self, surface) -> None:
        legend_y = self.size[1] - 100
        self._text(surface, "STATUS INDICATORS:", 14, (30, legend_y), WHITE)
        y = legend_y + 25
        entries = (
            (VIOLATION_RED, "Speed Violation"),
            ((150, 255, 150), "AVN Active"),
            (WHITE, "Completed"),
        )
        x = 30
        for color, label in entries:
            pygame.draw.circle(surface, color, (x + 8, y + 8), 8)
            self._text(surface, label, 12, (x + 20, y - 5), WHITE)
            x += 150

    def draw(self, surface, current_time: int, now: float | None = None) -> None:
        """Render one frame of the airfield onto ``surface``."""
        if now is None:
            now = time.monotonic()
        self.tracker.update(self.simulation.active, now)
        surface.fill(BACKGROUND)
        self._draw_runways(surface)
        self._text(surface, "Scheduled Flights", 14, (30, 50), WHITE)
        for name, state in self.tracker.advance(now):
            if state.completed:
                continue
            self._draw_flight(surface, name, state)
        self._draw_legend(surface)
        self._text(surface, f"Simulation Time: T+{current_time}", 18, (30, 20), WHITE)


def _forward_notice(text: str) -> None:
    if not send_nonblocking(ATC_TO_AVN_PIPE, text):
        print("Could not open pipe for writing", file=sys.stderr)


def _send_exit() -> None:
    send_blocking(ATC_TO_AVN_PIPE, EXIT_MESSAGE)


def _start_music(path: str) -> None:
    try:
        pygame.mixer.init()
        pygame.mixer.music.load(path)
        pygame.mixer.music.set_volume(0.4)
        pygame.mixer.music.play(-1)
    except pygame.error:
        print("Failed to load background music!", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Read the schedule, run the simulation in a window, then signal exit."""
    parser = argparse.ArgumentParser(prog="airctl-atc", description="Air traffic control simulation")
    parser.add_argument("--duration", type=int, default=DEFAULT_DURATION)
    parser.add_argument("--tick", type=float, default=DEFAULT_TICK)
    parser.add_argument("--music", default=None, help="background music file")
    args = parser.parse_args(argv)

    try:
        ensure_fifo(ATC_TO_AVN_PIPE)
    except OSError as exc:
        print(f"Error creating pipe {ATC_TO_AVN_PIPE}: {exc.strerror}", file=sys.stderr)
        return 1

    try:
        flights = read_flights()
    except (EOFError, KeyboardInterrupt):
        return 1

    simulation = Simulation(flights, ViolationLedger(_forward_notice), tick=args.tick)
    renderer = Renderer(simulation, VisualTracker(), WINDOW_SIZE)

    pygame.init()
    screen = pygame.display.set_mode(WINDOW_SIZE)
    pygame.display.set_caption("ATC Simulation")
    clock = pygame.time.Clock()
    if args.music:
        _start_music(args.music)

    print("========== STARTING SIMULATION ==========")
    print(f"Total flights to process: {len(simulation.scheduled)}")

    stop = threading.Event()
    sim_thread = threading.Thread(
        target=simulation.run, args=(args.duration, stop), name="simulation", daemon=True
    )
    start = time.monotonic()
    sim_thread.start()
    minute = args.tick * 2

    try:
        while sim_thread.is_alive():
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    stop.set()
                    _send_exit()
            if stop.is_set():
                break
            current_time = int((time.monotonic() - start) / minute) if minute > 0 else 0
            renderer.draw(screen, current_time)
            pygame.display.flip()
            clock.tick(FRAME_RATE)
    finally:
        stop.set()
        sim_thread.join()
        pygame.quit()

    _send_exit()
    return 0


if __name__ == "__main__":
    sys.exit(main())