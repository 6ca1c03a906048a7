from __future__ import annotations

import random

import pytest

from batchmix.plant.interlock import MSG_DRY_RUN, MSG_OVERFLOW, InterlockConfig, InterlockEngine, feed_low_message
from batchmix.plant.process.config import ProcessConfig
from batchmix.plant.process.mix_process import MixProcess
from batchmix.plant.process.thermal import ThermalProcess
from batchmix.plant.simulation import MixSimulator, SimulatorConfig
from batchmix.plant.state import ProcessState, assert_invariants


class ConstRandom:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def levels(state):
    return {tid: t.level for tid, t in state.tanks.items()}


def test_defaults() -> None:
    cfg = SimulatorConfig()
    assert cfg.tick_ms == 100
    assert cfg.runtime_refresh_ms == 1000
    assert ProcessConfig().flow_rate_per_tick == 0.5


def test_closed_valves_change_nothing(state, sim) -> None:
    before = levels(state)

    for _ in range(10):
        assert sim.tick() == []

    assert levels(state) == before
    assert state.run.flow_rate == 0.0
    assert len(state.alarms) == 0
    assert sim.tick_count == 10


def test_single_valve_tick(state, sim) -> None:
    state.valves["A"].open = True

    alarms = sim.tick()

    assert state.tanks["A"].level == 99.5
    assert state.tanks["B"].level == 100.0
    assert state.tanks["C"].level == 0.5
    assert state.run.flow_rate == 0.5 * 10
    assert alarms == []
    assert len(state.alarms) == 0


def test_transfer_is_limited_by_source_level(state, sim) -> None:
    state.tanks["B"].level = 0.2
    state.valves["B"].open = True

    sim.tick()

    assert state.tanks["B"].level == 0.0
    assert state.tanks["C"].level == pytest.approx(0.2)

    sim.tick()
    assert state.run.flow_rate == 0.0


def test_overflow_interlock_fires_once(state, sim) -> None:
    state.valves["A"].open = True
    state.valves["B"].open = True

    fired_at = None
    for n in range(1, 200):
        alarms = sim.tick()
        if alarms:
            fired_at = n
            assert [(a.message, a.severity) for a in alarms] == [(MSG_OVERFLOW, "WARNING")]
            break
        assert state.tanks["C"].level < 95.0

    assert fired_at == 95
    assert state.tanks["C"].level == 95.0
    assert not state.valves["A"].open and not state.valves["B"].open

    for _ in range(20):
        assert sim.tick() == []
    overflow = [a for a in state.alarms if a.message == MSG_OVERFLOW]
    assert len(overflow) == 1
    assert state.tanks["C"].level == 95.0


def test_dry_run_interlock_on_tick(state, sim) -> None:
    state.tanks["C"].level = 20.0
    state.agitator.running = True
    # mixer drained outside the feed path
    state.tanks["C"].level = 3.0

    alarms = sim.tick()

    assert not state.agitator.running
    assert [(a.message, a.severity) for a in alarms] == [(MSG_DRY_RUN, "WARNING")]
    assert sim.tick() == []


def test_feed_low_advisory_on_tick(state, sim) -> None:
    state.tanks["A"].level = 5.5
    state.valves["A"].open = True

    alarms = sim.tick()

    assert state.tanks["A"].level == 5.0
    assert [a.message for a in alarms] == [feed_low_message("A")]
    assert state.valves["A"].open


def test_mass_is_conserved() -> None:
    rng = random.Random(3)
    sim = MixSimulator(ProcessState())
    state = sim.state

    for _ in range(300):
        state.valves["A"].open = rng.random() < 0.6
        state.valves["B"].open = rng.random() < 0.6
        a0, b0, c0 = state.tanks["A"].level, state.tanks["B"].level, state.tanks["C"].level

        sim.tick()

        da = a0 - state.tanks["A"].level
        db = b0 - state.tanks["B"].level
        if c0 + da + db <= state.tanks["C"].max_level:
            assert state.tanks["C"].level - c0 == pytest.approx(da + db)
        assert_invariants(state)


def test_mixer_clamped_at_max(state) -> None:
    # overflow interlock disabled by threshold above max
    sim = MixSimulator(state, interlock=InterlockEngine(InterlockConfig(overflow_level=1000.0)))
    state.tanks["C"].level = 99.8
    state.valves["A"].open = True

    sim.tick()

    assert state.tanks["C"].level == 100.0


def test_idle_temperature_decays_to_ambient(state) -> None:
    thermal = ThermalProcess()
    state.run.temperature = 30.0

    thermal.step(state)

    assert state.run.temperature == pytest.approx(30.0 + (22.5 - 30.0) * 0.01)


def test_agitating_temperature_uses_injected_noise(state) -> None:
    thermal = ThermalProcess(rng=random.Random(1))
    expected_noise = random.Random(1).random()
    state.agitator.running = True

    thermal.step(state)

    assert state.run.temperature == pytest.approx(22.5 + (expected_noise - 0.4) * 0.3)


def test_temperature_is_clamped(state) -> None:
    state.agitator.running = True

    state.run.temperature = 34.95
    ThermalProcess(rng=ConstRandom(0.999)).step(state)
    assert state.run.temperature == 35.0

    state.run.temperature = 18.05
    ThermalProcess(rng=ConstRandom(0.0)).step(state)
    assert state.run.temperature == 18.0


def test_same_seed_same_run() -> None:
    runs = []
    for _ in range(2):
        s = ProcessState()
        s.tanks["C"].level = 50.0
        s.agitator.running = True
        sim = MixSimulator(s, process=MixProcess(seed=11))
        for _ in range(50):
            sim.tick()
        runs.append(s.run.temperature)

    assert runs[0] == runs[1]
