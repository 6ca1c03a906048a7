# plant/alarms.py
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Literal, Optional, Tuple

from .errors import ValidationError

Severity = Literal["INFO", "WARNING", "CRITICAL"]

SEVERITIES: Tuple[str, ...] = ("INFO", "WARNING", "CRITICAL")


@dataclass
class AlarmConfig:
    capacity: int = 5
    dedup_window_s: float = 5.0


@dataclass(frozen=True)
class Alarm:
    message: str
    severity: Severity
    timestamp: float  # wall clock, epoch seconds

    @property
    def time_label(self) -> str:
        return datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S")


class AlarmLog:
    """
    Bounded alarm journal, newest first.
    - identical message text inside the dedup window is dropped (severity ignored)
    - oldest entry is evicted past capacity
    """

    def __init__(self, cfg: AlarmConfig | None = None, clock: Callable[[], float] = time.time):
        self.cfg = cfg or AlarmConfig()
        self.clock = clock
        self._entries: list[Alarm] = []

    def add(self, message: str, severity: Severity = "INFO") -> Optional[Alarm]:
        if severity not in SEVERITIES:
            raise ValidationError(f"unknown alarm severity: {severity!r}")

        now = float(self.clock())
        if self._is_duplicate(message, now):
            return None

        alarm = Alarm(message=message, severity=severity, timestamp=now)
        self._entries.insert(0, alarm)
        if len(self._entries) > self.cfg.capacity:
            del self._entries[self.cfg.capacity :]
        return alarm

    def _is_duplicate(self, message: str, now: float) -> bool:
        # a clock that jumped backwards gives a negative age: still inside the window
        for a in self._entries:
            if a.message == message and (now - a.timestamp) < self.cfg.dedup_window_s:
                return True
        return False

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> Tuple[Alarm, ...]:
        return tuple(self._entries)

    @property
    def latest(self) -> Optional[Alarm]:
        return self._entries[0] if self._entries else None

    def status(self) -> Tuple[str, str]:
        latest = self.latest
        if latest is None:
            return "OK", "No Active Alarms"
        return latest.severity, latest.message

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Alarm]:
        return iter(tuple(self._entries))
