# plant/process/mix_process.py
from __future__ import annotations

import random

from ..state import ProcessState
from .config import ProcessConfig
from .flow import FlowProcess
from .thermal import ThermalProcess


class MixProcess:
    """
    Process/Physics.
    - moves feed into the mixer, updates flow display and temperature
    - NO safety rules here (that is the interlock)
    """

    def __init__(self, cfg: ProcessConfig | None = None, seed: int = 42, rng: random.Random | None = None):
        self.cfg = cfg or ProcessConfig()
        self.flow = FlowProcess(self.cfg)
        self.thermal = ThermalProcess(self.cfg, seed=seed, rng=rng)

    def step(self, s: ProcessState) -> bool:
        flowed = self.flow.step(s)
        self.thermal.step(s)
        return flowed
