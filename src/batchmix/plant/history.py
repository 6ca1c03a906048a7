# plant/history.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Dict, List

import pandas as pd

from .state import ProcessState

COLUMNS = ["t", "time", "tank_a", "tank_b", "tank_c", "temperature", "flow_rate"]


@dataclass(frozen=True)
class TrendPoint:
    t: float
    tank_a: float
    tank_b: float
    tank_c: float
    temperature: float
    flow_rate: float

    @property
    def time(self) -> str:
        return datetime.fromtimestamp(self.t).strftime("%H:%M:%S")


class TrendHistory:
    """Rolling chart buffers: one point per tick, oldest dropped past max_points."""

    def __init__(self, max_points: int = 50):
        self.max_points = max_points
        self._points: Deque[TrendPoint] = deque(maxlen=max_points)

    def record(self, s: ProcessState, t: float) -> TrendPoint:
        p = TrendPoint(
            t=float(t),
            tank_a=s.tanks["A"].level,
            tank_b=s.tanks["B"].level,
            tank_c=s.tanks["C"].level,
            temperature=s.run.temperature,
            flow_rate=s.run.flow_rate,
        )
        self._points.append(p)
        return p

    def clear(self) -> None:
        self._points.clear()

    @property
    def points(self) -> List[TrendPoint]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def rows(self) -> List[Dict[str, object]]:
        return point_rows(self.points)

    def to_frame(self) -> pd.DataFrame:
        return points_frame(self.points)


def point_rows(points: List[TrendPoint]) -> List[Dict[str, object]]:
    return [
        {
            "t": p.t,
            "time": p.time,
            "tank_a": p.tank_a,
            "tank_b": p.tank_b,
            "tank_c": p.tank_c,
            "temperature": p.temperature,
            "flow_rate": p.flow_rate,
        }
        for p in points
    ]


def points_frame(points: List[TrendPoint]) -> pd.DataFrame:
    if not points:
        return pd.DataFrame(columns=COLUMNS).set_index("t")
    return pd.DataFrame(point_rows(points), columns=COLUMNS).set_index("t")
