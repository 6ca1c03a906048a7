# plant/runtime.py
from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, List, Optional

import pandas as pd

from .alarms import Alarm, AlarmConfig, AlarmLog
from .controller import CommandHandler, CommandResult
from .history import TrendHistory, TrendPoint, points_frame
from .interlock import InterlockConfig, InterlockEngine
from .process.config import ProcessConfig
from .process.mix_process import MixProcess
from .scheduler import ScheduledHandle, Scheduler
from .simulation import MixSimulator, SimulatorConfig
from .snapshot import PlantSnapshot, format_runtime, take_snapshot
from .state import ProcessState

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[PlantSnapshot], None]


class BatchPlant:
    """
    Owns the single ProcessState and serialises every mutation on it.
    - tick() and each command are one critical section
    - readers get immutable snapshots taken inside the lock
    - no timer of its own: attach() a Scheduler to drive it
    """

    def __init__(
        self,
        sim_cfg: SimulatorConfig | None = None,
        process_cfg: ProcessConfig | None = None,
        interlock_cfg: InterlockConfig | None = None,
        alarm_cfg: AlarmConfig | None = None,
        seed: int = 42,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        history_points: int = 50,
    ):
        self.clock = clock
        self.state = ProcessState(alarms=AlarmLog(alarm_cfg, clock=clock))
        self.interlock = InterlockEngine(interlock_cfg)
        self.history = TrendHistory(max_points=history_points)

        self.simulator = MixSimulator(
            self.state,
            process=MixProcess(process_cfg, seed=seed, rng=rng),
            interlock=self.interlock,
            cfg=sim_cfg,
        )
        self.commands = CommandHandler(
            self.state,
            interlock=self.interlock,
            clock=clock,
            on_reset=[self.history.clear],
        )

        self._lock = threading.RLock()
        self._listeners: List[SnapshotListener] = []
        self._listeners_lock = threading.Lock()
        self._handles: List[ScheduledHandle] = []

    @property
    def cfg(self) -> SimulatorConfig:
        return self.simulator.cfg

    # ======================================================
    # Reads
    # ======================================================
    def snapshot(self) -> PlantSnapshot:
        with self._lock:
            return take_snapshot(self.state, self.clock(), tick=self.simulator.tick_count)

    def runtime(self) -> str:
        return format_runtime(self.snapshot().elapsed_s)

    def trend_points(self) -> List[TrendPoint]:
        with self._lock:
            return self.history.points

    def trend_frame(self) -> pd.DataFrame:
        return points_frame(self.trend_points())

    def subscribe(self, fn: SnapshotListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(fn)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if fn in self._listeners:
                    self._listeners.remove(fn)

        return unsubscribe

    def _publish(self, snap: PlantSnapshot) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for fn in listeners:
            fn(snap)

    # ======================================================
    # Tick
    # ======================================================
    def tick(self) -> List[Alarm]:
        with self._lock:
            alarms = self.simulator.tick()
            self.history.record(self.state, self.clock())
            snap = take_snapshot(self.state, self.clock(), tick=self.simulator.tick_count)
        self._publish(snap)
        return alarms

    # ======================================================
    # Commands
    # ======================================================
    def _command(self, fn: Callable[..., CommandResult], *args: str) -> CommandResult:
        with self._lock:
            result = fn(*args)
            snap = take_snapshot(self.state, self.clock(), tick=self.simulator.tick_count)
        self._publish(snap)
        return result

    def open_valve(self, valve_id: str) -> CommandResult:
        return self._command(self.commands.open_valve, valve_id)

    def close_valve(self, valve_id: str) -> CommandResult:
        return self._command(self.commands.close_valve, valve_id)

    def toggle_valve(self, valve_id: str) -> CommandResult:
        return self._command(self.commands.toggle_valve, valve_id)

    def toggle_agitator(self) -> CommandResult:
        return self._command(self.commands.toggle_agitator)

    def start_process(self) -> CommandResult:
        return self._command(self.commands.start_process)

    def stop_process(self) -> CommandResult:
        return self._command(self.commands.stop_process)

    def reset_process(self) -> CommandResult:
        return self._command(self.commands.reset_process)

    def dispatch(self, command: str, *args: str) -> CommandResult:
        return self._command(self.commands.dispatch, command, *args)

    # ======================================================
    # Scheduling
    # ======================================================
    def attach(self, scheduler: Scheduler, on_runtime: Optional[Callable[[str], None]] = None) -> None:
        self._handles.append(scheduler.schedule_periodic(self.cfg.tick_ms, self.tick))
        if on_runtime is not None:
            self._handles.append(
                scheduler.schedule_periodic(self.cfg.runtime_refresh_ms, lambda: on_runtime(self.runtime()))
            )
        logger.info("plant attached: tick every %d ms", self.cfg.tick_ms)

    def detach(self) -> None:
        for h in self._handles:
            h.cancel()
        self._handles.clear()
