# plant/process/flow.py
from __future__ import annotations

from ..state import ProcessState, VALVE_SOURCES, clamp
from .config import ProcessConfig


class FlowProcess:
    def __init__(self, cfg: ProcessConfig | None = None):
        self.cfg = cfg or ProcessConfig()

    def step(self, s: ProcessState) -> bool:
        """Move feed into the mixer through open valves. Returns True if anything flowed."""
        mixer = s.mixer
        flowed = False

        # each valve reads only its own source and writes only the mixer
        for vid, tid in VALVE_SOURCES.items():
            src = s.tanks[tid]
            if not s.valves[vid].open or src.level <= 0.0:
                continue

            moved = min(self.cfg.flow_rate_per_tick, float(src.level))
            src.level = float(src.level) - moved
            mixer.level = float(mixer.level) + moved
            flowed = True

        # rounding guard only; the overflow interlock is what keeps the mixer below max
        mixer.level = clamp(float(mixer.level), 0.0, float(mixer.max_level))

        s.run.flow_rate = self.cfg.flow_rate_per_tick * self.cfg.flow_display_factor if flowed else 0.0
        return flowed
