import pygame
import pytest

from airctl.atc import RUNWAY_FREE, RUNWAY_OCCUPIED, Renderer
from airctl.models import Aircraft, AircraftType, Direction, Phase, RunwayId
from airctl.simulation import Simulation
from airctl.visuals import FADE_IN_STEP, VisualTracker, target_x

SIZE = (1400, 1000)


@pytest.fixture
def simulation():
    return Simulation([], tick=0.01)


@pytest.fixture
def renderer(simulation):
    return Renderer(simulation, VisualTracker(), SIZE)


def _flight(name="PK7"):
    return Aircraft(name, "PIA", AircraftType.COMMERCIAL, Direction.NORTH)


def _pixels(surface):
    return bytes(surface.get_buffer())


def test_free_runways_drawn_green(renderer):
    surface = pygame.Surface(SIZE)
    renderer.draw(surface, 0, now=0.0)
    for index in range(3):
        assert surface.get_at((10, 270 + index * 200))[:3] == RUNWAY_FREE


def test_occupied_runway_drawn_red(renderer, simulation):
    simulation.runways.assign(_flight(), RunwayId.B)
    surface = pygame.Surface(SIZE)
    renderer.draw(surface, 0, now=0.0)
    assert surface.get_at((10, 470))[:3] == RUNWAY_OCCUPIED
    assert surface.get_at((10, 270))[:3] == RUNWAY_FREE


def test_draw_tracks_active_flights(renderer, simulation):
    flight = _flight()
    simulation.activate(flight, 0)
    surface = pygame.Surface(SIZE)
    renderer.draw(surface, 0, now=0.0)
    state = renderer.tracker.states["PK7"]
    assert state.target_x == target_x(Phase.HOLDING)
    assert state.alpha == FADE_IN_STEP
    assert state.is_active


def test_completed_flight_not_drawn(simulation):
    empty = pygame.Surface(SIZE)
    Renderer(Simulation([], tick=0.01), VisualTracker(), SIZE).draw(empty, 3, now=0.0)

    flight = _flight()
    simulation.runways.assign(flight, RunwayId.A)
    simulation.activate(flight, 0)
    flight.completed = True
    occupied = pygame.Surface(SIZE)
    reference = Renderer(simulation, VisualTracker(), SIZE)
    reference.draw(occupied, 3, now=0.0)
    assert "PK7" in reference.tracker.states

    flight.completed = False
    visible = pygame.Surface(SIZE)
    Renderer(simulation, VisualTracker(), SIZE).draw(visible, 3, now=0.0)
    assert _pixels(visible) != _pixels(occupied)


def test_clock_text_changes_frame(renderer):
    first = pygame.Surface(SIZE)
    second = pygame.Surface(SIZE)
    renderer.draw(first, 1, now=0.0)
    renderer.draw(second, 1, now=0.0)
    assert _pixels(first) == _pixels(second)
    renderer.draw(second, 250, now=0.0)
    assert _pixels(first) != _pixels(second)