# plant/controller.py
from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .alarms import Alarm
from .errors import PreconditionError, ValidationError
from .interlock import InterlockEngine
from .state import ProcessState, normalize_id, VALVE_IDS

logger = logging.getLogger(__name__)

MSG_STARTED = "Batch process started"
MSG_EMERGENCY_STOP = "EMERGENCY STOP activated!"
MSG_AGITATOR_REFUSED = "Cannot start agitator: Mixer level too low (<10%)"


@dataclass
class CommandResult:
    command: str
    ok: bool = True
    alarms: List[Alarm] = field(default_factory=list)
    error: Optional[Exception] = None


class CommandHandler:
    """
    Operator commands.
    - every command ends with an interlock pass
    - refused commands (PreconditionError) come back as ok=False with an advisory alarm
    - bad ids raise ValidationError to the caller
    """

    COMMANDS = (
        "open_valve",
        "close_valve",
        "toggle_valve",
        "toggle_agitator",
        "start_process",
        "stop_process",
        "reset_process",
    )

    def __init__(
        self,
        state: ProcessState,
        interlock: InterlockEngine | None = None,
        clock: Callable[[], float] = time.time,
        on_reset: Optional[List[Callable[[], None]]] = None,
    ):
        self.state = state
        self.interlock = interlock or InterlockEngine()
        self.clock = clock
        # buffers outside ProcessState that Reset must also clear (trend history)
        self.on_reset: List[Callable[[], None]] = list(on_reset or [])

    # ======================================================
    # MAIN ENTRY
    # ======================================================
    def dispatch(self, command: str, *args: str) -> CommandResult:
        if command not in self.COMMANDS:
            raise ValidationError(f"unknown command: {command!r}")
        fn = getattr(self, command)
        try:
            inspect.signature(fn).bind(*args)
        except TypeError as e:
            raise ValidationError(f"bad arguments for {command}: {e}") from e
        return fn(*args)

    def _run(self, command: str, action: Callable[[List[Alarm]], None]) -> CommandResult:
        result = CommandResult(command=command)
        try:
            action(result.alarms)
        except PreconditionError as e:
            result.ok = False
            result.error = e
            logger.info("command %s refused: %s", command, e)
        result.alarms.extend(self.interlock.check(self.state))
        return result

    def _alarm(self, alarms: List[Alarm], message: str, severity) -> None:
        alarm = self.state.alarms.add(message, severity)
        if alarm is not None:
            alarms.append(alarm)

    # ======================================================
    # Valves
    # ======================================================
    def open_valve(self, valve_id: str) -> CommandResult:
        return self._set_valve("open_valve", valve_id, True)

    def close_valve(self, valve_id: str) -> CommandResult:
        return self._set_valve("close_valve", valve_id, False)

    def toggle_valve(self, valve_id: str) -> CommandResult:
        vid = normalize_id(valve_id, VALVE_IDS, "valve")
        return self._set_valve("toggle_valve", vid, not self.state.valves[vid].open)

    def _set_valve(self, command: str, valve_id: str, is_open: bool) -> CommandResult:
        # validate before taking any action
        valve = self.state.valve(valve_id)

        def action(_alarms: List[Alarm]) -> None:
            valve.open = is_open
            logger.info("valve %s %s", valve.id, "opened" if is_open else "closed")

        return self._run(command, action)

    # ======================================================
    # Agitator
    # ======================================================
    def toggle_agitator(self) -> CommandResult:
        def action(alarms: List[Alarm]) -> None:
            ag = self.state.agitator
            if not ag.running and not self.interlock.can_start_agitator(self.state):
                self._alarm(alarms, MSG_AGITATOR_REFUSED, "WARNING")
                raise PreconditionError("mixer level too low")
            ag.running = not ag.running
            logger.info("agitator %s", "started" if ag.running else "stopped")

        return self._run("toggle_agitator", action)

    # ======================================================
    # Process
    # ======================================================
    def start_process(self) -> CommandResult:
        def action(alarms: List[Alarm]) -> None:
            run = self.state.run
            if run.running:
                return

            run.running = True
            run.started_at = float(self.clock())
            for v in self.state.valves.values():
                v.open = True
            logger.info("batch process started")
            self._alarm(alarms, MSG_STARTED, "INFO")

        return self._run("start_process", action)

    def stop_process(self) -> CommandResult:
        def action(alarms: List[Alarm]) -> None:
            # logged as an emergency every time, even when already idle
            for v in self.state.valves.values():
                v.open = False
            self.state.agitator.running = False
            self.state.run.running = False
            logger.warning("emergency stop")
            self._alarm(alarms, MSG_EMERGENCY_STOP, "CRITICAL")

        return self._run("stop_process", action)

    def reset_process(self) -> CommandResult:
        def action(_alarms: List[Alarm]) -> None:
            self.state.reset()
            for fn in self.on_reset:
                fn()
            logger.info("process reset to defaults")

        return self._run("reset_process", action)
