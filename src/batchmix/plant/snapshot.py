# plant/snapshot.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .alarms import Alarm
from .state import ProcessState


def format_runtime(elapsed_s: float) -> str:
    if elapsed_s <= 0:
        return "00:00:00"
    total = int(elapsed_s)
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class PlantSnapshot:
    """Read-only copy of ProcessState handed to presentation code."""

    levels: Mapping[str, float]
    max_levels: Mapping[str, float]
    valves: Mapping[str, bool]
    agitator_running: bool
    running: bool
    started_at: Optional[float]
    temperature: float
    flow_rate: float
    elapsed_s: float
    alarms: Tuple[Alarm, ...]
    alarm_status: Tuple[str, str]
    tick: int = 0

    @property
    def runtime(self) -> str:
        return format_runtime(self.elapsed_s)

    @property
    def flowing(self) -> bool:
        return self.flow_rate > 0.0


def take_snapshot(s: ProcessState, now: float, tick: int = 0) -> PlantSnapshot:
    started = s.run.started_at
    # clock skew can put now before started_at; show zero instead of a negative runtime
    elapsed = max(0.0, float(now) - started) if started is not None else 0.0

    return PlantSnapshot(
        levels=MappingProxyType({tid: t.level for tid, t in s.tanks.items()}),
        max_levels=MappingProxyType({tid: t.max_level for tid, t in s.tanks.items()}),
        valves=MappingProxyType({vid: v.open for vid, v in s.valves.items()}),
        agitator_running=s.agitator.running,
        running=s.run.running,
        started_at=started,
        temperature=s.run.temperature,
        flow_rate=s.run.flow_rate,
        elapsed_s=elapsed,
        alarms=s.alarms.entries,
        alarm_status=s.alarms.status(),
        tick=tick,
    )
