"""Pytest configuration and test helpers."""

from __future__ import annotations

import pytest

from batchmix.plant.alarms import AlarmLog
from batchmix.plant.controller import CommandHandler
from batchmix.plant.interlock import InterlockEngine
from batchmix.plant.runtime import BatchPlant
from batchmix.plant.simulation import MixSimulator
from batchmix.plant.state import ProcessState


class FakeClock:
    """Wall clock stand-in; moves only when told to (backwards too)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state(clock: FakeClock) -> ProcessState:
    return ProcessState(alarms=AlarmLog(clock=clock))


@pytest.fixture
def engine() -> InterlockEngine:
    return InterlockEngine()


@pytest.fixture
def sim(state: ProcessState, engine: InterlockEngine) -> MixSimulator:
    return MixSimulator(state, interlock=engine)


@pytest.fixture
def commands(state: ProcessState, engine: InterlockEngine, clock: FakeClock) -> CommandHandler:
    return CommandHandler(state, interlock=engine, clock=clock)


@pytest.fixture
def plant(clock: FakeClock) -> BatchPlant:
    return BatchPlant(clock=clock, seed=7)
