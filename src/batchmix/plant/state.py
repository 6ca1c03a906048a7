from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from .alarms import AlarmLog
from .errors import ValidationError


TankRole = Literal["PIGMENT", "BASE", "MIXED"]

TANK_IDS = ("A", "B", "C")
VALVE_IDS = ("A", "B")
MIXER_ID = "C"

# valve id -> source tank id
VALVE_SOURCES: Dict[str, str] = {"A": "A", "B": "B"}

DEFAULT_LEVELS: Dict[str, float] = {"A": 100.0, "B": 100.0, "C": 0.0}
DEFAULT_TEMPERATURE_C = 22.5

TEMP_MIN_C = 18.0
TEMP_MAX_C = 35.0


# default clamp function
def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def normalize_id(ident: object, allowed: tuple, kind: str) -> str:
    if not isinstance(ident, str):
        raise ValidationError(f"{kind} id must be a string, got {ident!r}")
    key = ident.strip().upper()
    if key not in allowed:
        raise ValidationError(f"unknown {kind} id: {ident!r} (expected one of {', '.join(allowed)})")
    return key


@dataclass
class TankState:
    id: str
    role: TankRole
    level: float = 0.0
    max_level: float = 100.0


@dataclass
class ValveState:
    id: str
    open: bool = False


@dataclass
class AgitatorState:
    running: bool = False


@dataclass
class ProcessRunState:
    running: bool = False
    started_at: Optional[float] = None  # set by Start, cleared only by Reset
    temperature: float = DEFAULT_TEMPERATURE_C
    flow_rate: float = 0.0  # display value


def _default_tanks() -> Dict[str, TankState]:
    return {
        "A": TankState("A", "PIGMENT", DEFAULT_LEVELS["A"]),
        "B": TankState("B", "BASE", DEFAULT_LEVELS["B"]),
        "C": TankState("C", "MIXED", DEFAULT_LEVELS["C"]),
    }


def _default_valves() -> Dict[str, ValveState]:
    return {vid: ValveState(vid) for vid in VALVE_IDS}


@dataclass
class ProcessState:
    """
    Central state of the mixing plant.
    ONLY data. Flow/temperature live in process/, safety actions in interlock.py,
    operator commands in controller.py.
    """

    tanks: Dict[str, TankState] = field(default_factory=_default_tanks)
    valves: Dict[str, ValveState] = field(default_factory=_default_valves)
    agitator: AgitatorState = field(default_factory=AgitatorState)
    run: ProcessRunState = field(default_factory=ProcessRunState)
    alarms: AlarmLog = field(default_factory=AlarmLog)

    # ======================================================
    # Accessors
    # ======================================================
    def tank(self, tank_id: str) -> TankState:
        return self.tanks[normalize_id(tank_id, TANK_IDS, "tank")]

    def valve(self, valve_id: str) -> ValveState:
        return self.valves[normalize_id(valve_id, VALVE_IDS, "valve")]

    @property
    def mixer(self) -> TankState:
        return self.tanks[MIXER_ID]

    def any_valve_open(self) -> bool:
        return any(v.open for v in self.valves.values())

    # ======================================================
    # Lifecycle
    # ======================================================
    def reset(self) -> None:
        # in place: readers holding this instance keep seeing the live state
        for tid, tank in self.tanks.items():
            tank.level = DEFAULT_LEVELS[tid]
        for v in self.valves.values():
            v.open = False
        self.agitator.running = False

        self.run.running = False
        self.run.started_at = None
        self.run.temperature = DEFAULT_TEMPERATURE_C
        self.run.flow_rate = 0.0

        self.alarms.clear()


# ======================================================
# Invariants (used by tests and debug assertions)
# ======================================================
def invariant_violations(
    s: ProcessState,
    *,
    overflow_level: float = 95.0,
    dry_run_level: float = 5.0,
) -> List[str]:
    out: List[str] = []

    for tid, tank in s.tanks.items():
        if not (0.0 <= tank.level <= tank.max_level):
            out.append(f"tank {tid} level {tank.level} outside [0, {tank.max_level}]")

    c = s.mixer.level
    if s.agitator.running and c < dry_run_level:
        out.append(f"agitator running with mixer level {c} < {dry_run_level}")
    if c >= overflow_level and s.any_valve_open():
        out.append(f"valve open with mixer level {c} >= {overflow_level}")

    t = s.run.temperature
    if not (TEMP_MIN_C <= t <= TEMP_MAX_C):
        out.append(f"temperature {t} outside [{TEMP_MIN_C}, {TEMP_MAX_C}]")

    if len(s.alarms) > s.alarms.cfg.capacity:
        out.append(f"alarm log holds {len(s.alarms)} > {s.alarms.cfg.capacity} entries")

    return out


def assert_invariants(s: ProcessState, **thresholds: float) -> None:
    problems = invariant_violations(s, **thresholds)
    assert not problems, "; ".join(problems)
