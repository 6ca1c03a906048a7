# plant/process/config.py
from __future__ import annotations

from dataclasses import dataclass

from ..state import DEFAULT_TEMPERATURE_C, TEMP_MAX_C, TEMP_MIN_C


@dataclass
class ProcessConfig:
    # =========================
    # Feed flow
    # =========================
    flow_rate_per_tick: float = 0.5     # level units moved per open valve per tick
    flow_display_factor: float = 10.0   # flow_rate shown = flow_rate_per_tick * factor

    # =========================
    # Thermal
    # =========================
    temp_variation: float = 0.3         # agitating: T += (noise - bias) * variation
    temp_bias: float = 0.4              # < 0.5 -> net upward drift while agitating
    ambient_temperature_c: float = DEFAULT_TEMPERATURE_C
    cooling_rate: float = 0.01          # idle: fraction of gap to ambient closed per tick
    temp_min_c: float = TEMP_MIN_C
    temp_max_c: float = TEMP_MAX_C
