import threading

import pytest

from airctl.models import Aircraft, AircraftType, Direction, RunwayId
from airctl.runways import RunwayBoard, RunwayOccupiedError, preferred_runways


def make_flight(name, kind=AircraftType.COMMERCIAL, direction=Direction.NORTH, emergency=False):
    return Aircraft(name, "PIA", kind, direction, is_emergency=emergency)


def test_cargo_only_uses_runway_c():
    for direction in Direction:
        assert preferred_runways(make_flight("C", AircraftType.CARGO, direction)) == (RunwayId.C,)


def test_cargo_emergency_still_only_c():
    flight = make_flight("C", AircraftType.CARGO, Direction.EAST, emergency=True)
    assert preferred_runways(flight) == (RunwayId.C,)


def test_regular_arrival_and_departure_preferences():
    assert preferred_runways(make_flight("A", direction=Direction.SOUTH)) == (RunwayId.A, RunwayId.C)
    assert preferred_runways(make_flight("D", direction=Direction.WEST)) == (RunwayId.B, RunwayId.C)


@pytest.mark.parametrize("kind", [AircraftType.MILITARY, AircraftType.MEDICAL])
def test_military_and_medical_use_all_runways(kind):
    assert preferred_runways(make_flight("M", kind, Direction.NORTH)) == (
        RunwayId.A, RunwayId.C, RunwayId.B,
    )
    assert preferred_runways(make_flight("M", kind, Direction.EAST)) == (
        RunwayId.B, RunwayId.C, RunwayId.A,
    )


def test_emergency_commercial_uses_all_runways():
    flight = make_flight("E", direction=Direction.EAST, emergency=True)
    assert set(preferred_runways(flight)) == set(RunwayId)


def test_new_board_is_all_free():
    snap = RunwayBoard().snapshot()
    assert [r.id for r in snap] == list(RunwayId)
    assert all(r.is_available and r.current_flight == "" for r in snap)


def test_assign_marks_runway_and_flight():
    board = RunwayBoard()
    flight = make_flight("PK1")
    board.assign(flight, RunwayId.B)
    snap = board.snapshot()
    assert not snap[RunwayId.B].is_available
    assert snap[RunwayId.B].current_flight == "PK1"
    assert flight.is_assigned
    assert flight.assigned_runway == RunwayId.B


def test_assign_occupied_runway_raises():
    board = RunwayBoard()
    board.assign(make_flight("PK1"), RunwayId.A)
    other = make_flight("PK2")
    with pytest.raises(RunwayOccupiedError):
        board.assign(other, RunwayId.A)
    assert not other.is_assigned
    assert board.snapshot()[RunwayId.A].current_flight == "PK1"


def test_free_releases_runway():
    board = RunwayBoard()
    board.assign(make_flight("PK1"), RunwayId.C)
    assert board.free("PK1") == RunwayId.C
    assert board.snapshot()[RunwayId.C].is_available
    assert board.free("PK1") is None


def test_free_unknown_flight_changes_nothing():
    board = RunwayBoard()
    board.assign(make_flight("PK1"), RunwayId.A)
    assert board.free("NOPE") is None
    assert not board.snapshot()[RunwayId.A].is_available


def test_try_assign_falls_back_then_waits():
    board = RunwayBoard()
    first, second, third = (make_flight(n) for n in ("A1", "A2", "A3"))
    assert board.try_assign(first) == RunwayId.A
    assert board.try_assign(second) == RunwayId.C
    assert board.try_assign(third) is None
    assert not third.is_assigned
    assert third.waiting_time >= 0


def test_try_assign_after_free_succeeds():
    board = RunwayBoard()
    cargo = make_flight("FX1", AircraftType.CARGO)
    blocker = make_flight("FX0", AircraftType.CARGO)
    assert board.try_assign(blocker) == RunwayId.C
    assert board.try_assign(cargo) is None
    board.free("FX0")
    assert board.try_assign(cargo) == RunwayId.C


def test_snapshot_is_a_copy():
    board = RunwayBoard()
    snap = board.snapshot()
    snap[0].is_available = False
    assert board.snapshot()[0].is_available


def test_concurrent_assignment_never_double_books():
    board = RunwayBoard()
    flights = [make_flight(f"F{i}", AircraftType.MILITARY) for i in range(20)]
    threads = [threading.Thread(target=board.try_assign, args=(f,)) for f in flights]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assigned = [f for f in flights if f.is_assigned]
    assert len(assigned) == len(RunwayId)
    assert {f.assigned_runway for f in assigned} == set(RunwayId)
    occupants = {r.current_flight for r in board.snapshot()}
    assert occupants == {f.flight_name for f in assigned}