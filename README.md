# airctl

An airport simulation made of four cooperating processes that talk to each
other over named pipes (FIFOs) in `/tmp`.

- **airctl-atc** (`airctl.atc`): the air traffic controller. It asks for
  the flights to schedule, gives them runways A, B and C, follows their
  speed through every phase (holding, approach, landing, taxi, at gate,
  takeoff roll, climb, departure) and issues an Aviation Violation Notice
  (AVN) whenever a commercial or cargo flight leaves the permitted speed
  band. A pygame window shows the runways, the moving aircraft, a legend and
  the simulation clock; a text dashboard is printed to the console each
  simulation minute.
- **airctl-generator** (`airctl.generator`): the AVN generator. It receives
  notices from the controller, keeps them, forwards each one to the portal
  and the payment desk, applies payment updates that come back, and
  redraws a table of all notices every 5 seconds.
- **airctl-portal** (`airctl.portal`): the airline portal. It groups notices
  by airline, replaces a notice when an update with the same id arrives,
  and every 3 seconds shows each airline's notices with totals of paid and
  unpaid fines.
- **airctl-stripepay** (`airctl.stripepay`): the payment desk. Type a flight
  name to pay the latest notice for that flight; the paid notice is sent
  back to the generator, which passes it on to the portal.

## Installing

```
pip install .
```

pygame is required for the controller's window.

## Running

Start each process in its own terminal. The readers should be running
before the controller begins sending notices:

```
airctl-generator
airctl-portal
airctl-stripepay
airctl-atc
```

The generator and the payment desk create the pipes they use; the portal
creates `/tmp/avn_to_portal` and the controller `/tmp/atc_to_avn`. On
shutdown the portal and the payment desk remove their pipes.

### The controller

`airctl-atc` first asks how many flights to schedule and then, for each
flight, its name, airline (1 PIA, 2 Pakistan Airforce, 3 AirBlue, 4 FedEx,
5 Blue Dart, 6 Agha Khan Air Ambulance), aircraft type (0 commercial,
1 cargo, 2 military, 3 medical), direction (0 north, 1 south, 2 east,
3 west), scheduled minute, priority (0 to 999) and whether it is an
emergency. Invalid answers are asked again.

North and south flights are arrivals and start holding at 600 km/h; east
and west flights are departures and start at the gate. Military and medical
flights always count as emergencies.

Options:

- `--duration N`: simulation minutes to run (default 300).
- `--tick SECONDS`: pause between two steps of a flight (default 0.5); a
  simulation minute lasts two ticks.
- `--music FILE`: background music to loop while the window is open.

Labels use the font file `Howdy Frog.ttf` from the working directory if
present, and pygame's default font otherwise.

### Runways and scheduling

Flights due in the same minute are started in order: emergencies first,
then higher priority, then earlier entry. Each flight then waits for a
runway:

- cargo flights use runway C only;
- emergency arrivals try A, then C, then B; emergency departures try B,
  then C, then A;
- other arrivals try A, then C; other departures try B, then C.

Each phase lasts ten steps before the flight moves on; after its last phase
the flight completes and frees its runway. A flight taxiing or at the gate
may suffer a ground fault (one chance in a hundred per step), which removes
it and frees its runway.

When the simulation ends, or the window is closed, the controller writes
`EXIT` to `/tmp/atc_to_avn`, waiting for a reader to open it. The generator
then stops and passes `EXIT` on to the portal and the payment desk.

## Speed limits and fines

| Phase        | km/h      |
|--------------|-----------|
| Holding      | 400 – 600 |
| Approach     | 240 – 290 |
| Landing      | 30 – 240  |
| Taxi         | 15 – 30   |
| At gate      | 0 – 5     |
| Takeoff roll | 50 – 290  |
| Climb        | 300 – 463 |
| Departure    | 800 – 900 |

Commercial flights are fined PKR 500,000 and cargo flights PKR 700,000 per
violation, each with 15% added on (`airctl.violations.fine_for`). Military
and medical flights are never checked. Notices are numbered `AVN-1`,
`AVN-2`, … and fall due three days after issue.

## Message format

Notices travel as one line of pipe-separated fields
(`airctl.avn.Avn.serialize` and `airctl.avn.parse_avn`):

```
AVN-1|PK301|PIA|0|620|600|1700000000|575000.00|0
```

being the notice id, flight name, airline, aircraft type code, recorded
speed, permitted speed, issue time (seconds since the epoch), fine and paid
flag (`1` for paid). A message starting with `EXIT` asks the receiver to
shut down.

## Using the pieces from Python

The simulation runs without the window or the pipes:

```python
from airctl.models import Aircraft, AircraftType, Direction
from airctl.simulation import Simulation
from airctl.violations import ViolationLedger

flights = [
    Aircraft("PK301", "PIA", AircraftType.COMMERCIAL, Direction.NORTH, priority=10),
    Aircraft("FX9", "FedEx", AircraftType.CARGO, Direction.EAST, scheduled_time=1),
]
ledger = ViolationLedger()
Simulation(flights, ledger, tick=0.05).run(duration=5)
print(len(ledger), [n.avn_id for n in ledger.recent(5)])
```

`AvnGenerator`, `Portal` and `StripePay` accept messages through their
`receive` methods, and the generator and payment desk take a `send`
function `(path, text) -> bool` in place of writing to the pipes.

## What it does not do

- Notices, payments and schedules live only in memory; nothing is saved
  between runs.
- The payment desk also writes paid notices to `/tmp/stripe_to_portal`, but
  the portal does not read that pipe; it learns of payments only through
  the generator.
- The processes run on POSIX systems only, since they rely on named pipes.

## Tests

```
pip install .[test]
pytest
```