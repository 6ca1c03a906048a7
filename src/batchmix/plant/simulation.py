# plant/simulation.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .alarms import Alarm
from .interlock import InterlockEngine
from .process.mix_process import MixProcess
from .state import ProcessState


@dataclass
class SimulatorConfig:
    tick_ms: int = 100               # period the external scheduler calls tick()
    runtime_refresh_ms: int = 1000   # runtime display refresh period


class MixSimulator:

    def __init__(
        self,
        state: ProcessState,
        process: MixProcess | None = None,
        interlock: InterlockEngine | None = None,
        cfg: SimulatorConfig | None = None,
    ):
        self.state = state
        self.process = process or MixProcess()
        self.interlock = interlock or InterlockEngine()
        self.cfg = cfg or SimulatorConfig()

        self.tick_count: int = 0

    def tick(self) -> List[Alarm]:
        # 1) Physics: feed flow, mixer clamp, flow display, temperature
        self.process.step(self.state)

        # 2) Safety pass over the result
        alarms = self.interlock.check(self.state)

        self.tick_count += 1
        return alarms
