# plant/process/thermal.py
from __future__ import annotations

import random

from ..state import ProcessState, clamp
from .config import ProcessConfig


class ThermalProcess:
    def __init__(self, cfg: ProcessConfig | None = None, seed: int = 42, rng: random.Random | None = None):
        self.cfg = cfg or ProcessConfig()
        self._rng = rng or random.Random(seed)

    def step(self, s: ProcessState) -> None:
        cfg = self.cfg
        t = float(s.run.temperature)

        if s.agitator.running:
            # mixing heat: noise in [0, 1), biased upward
            t += (self._rng.random() - cfg.temp_bias) * cfg.temp_variation
        else:
            # first-order approach to ambient
            t += (cfg.ambient_temperature_c - t) * cfg.cooling_rate

        s.run.temperature = clamp(t, cfg.temp_min_c, cfg.temp_max_c)
