# plant/interlock.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .alarms import Alarm, Severity
from .state import ProcessState, VALVE_SOURCES

logger = logging.getLogger(__name__)

MSG_OVERFLOW = "INTERLOCK: Overflow protection - Valves closed"
MSG_DRY_RUN = "INTERLOCK: Dry run protection - Agitator stopped"


def feed_low_message(tank_id: str) -> str:
    return f"Tank {tank_id} level critical (<5%)"


@dataclass
class InterlockConfig:
    overflow_level: float = 95.0        # mixer >= this -> close both valves
    dry_run_level: float = 5.0          # mixer < this -> stop agitator
    feed_low_level: float = 5.0         # source <= this with valve open -> advisory
    agitator_start_level: float = 10.0  # mixer < this -> agitator start refused


class InterlockEngine:
    """
    Safety pass over ProcessState, run after every tick and every command.
    Rules in fixed priority; a later rule sees the corrections of an earlier one.
    Forced actions are final for the tick. Returns only alarms that were logged.
    """

    def __init__(self, cfg: InterlockConfig | None = None):
        self.cfg = cfg or InterlockConfig()

    def check(self, s: ProcessState) -> List[Alarm]:
        raised: List[Alarm] = []

        self._overflow_protection(s, raised)
        self._dry_run_protection(s, raised)
        self._feed_low_advisories(s, raised)

        return raised

    def can_start_agitator(self, s: ProcessState) -> bool:
        return s.mixer.level >= self.cfg.agitator_start_level

    # ======================================================
    # Rules
    # ======================================================
    def _overflow_protection(self, s: ProcessState, raised: List[Alarm]) -> None:
        level = s.mixer.level
        if level < self.cfg.overflow_level or not s.any_valve_open():
            return

        for v in s.valves.values():
            v.open = False
        logger.warning("interlock: mixer at %.1f, feed valves closed", level)
        self._emit(s, raised, MSG_OVERFLOW, "WARNING")

    def _dry_run_protection(self, s: ProcessState, raised: List[Alarm]) -> None:
        level = s.mixer.level
        if level >= self.cfg.dry_run_level or not s.agitator.running:
            return

        s.agitator.running = False
        logger.warning("interlock: mixer at %.1f, agitator stopped", level)
        self._emit(s, raised, MSG_DRY_RUN, "WARNING")

    def _feed_low_advisories(self, s: ProcessState, raised: List[Alarm]) -> None:
        # advisory only: no state change
        for vid, tid in VALVE_SOURCES.items():
            if s.valves[vid].open and s.tanks[tid].level <= self.cfg.feed_low_level:
                self._emit(s, raised, feed_low_message(tid), "WARNING")

    @staticmethod
    def _emit(s: ProcessState, raised: List[Alarm], message: str, severity: Severity) -> None:
        alarm = s.alarms.add(message, severity)
        if alarm is not None:
            raised.append(alarm)
