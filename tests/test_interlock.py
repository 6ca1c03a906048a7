from __future__ import annotations

from batchmix.plant.interlock import (
    MSG_DRY_RUN,
    MSG_OVERFLOW,
    InterlockConfig,
    InterlockEngine,
    feed_low_message,
)


def test_quiet_state_raises_nothing(state, engine) -> None:
    assert engine.check(state) == []
    assert len(state.alarms) == 0


def test_overflow_closes_both_valves(state, engine) -> None:
    state.tanks["C"].level = 95.0
    state.valves["A"].open = True

    alarms = engine.check(state)

    assert not state.valves["A"].open
    assert not state.valves["B"].open
    assert [(a.message, a.severity) for a in alarms] == [(MSG_OVERFLOW, "WARNING")]


def test_overflow_without_open_valve_is_silent(state, engine) -> None:
    state.tanks["C"].level = 99.0
    assert engine.check(state) == []


def test_dry_run_stops_agitator(state, engine) -> None:
    state.tanks["C"].level = 4.9
    state.agitator.running = True

    alarms = engine.check(state)

    assert not state.agitator.running
    assert [a.message for a in alarms] == [MSG_DRY_RUN]


def test_dry_run_boundary_is_exclusive(state, engine) -> None:
    state.tanks["C"].level = 5.0
    state.agitator.running = True

    assert engine.check(state) == []
    assert state.agitator.running


def test_feed_low_advisory_does_not_change_state(state, engine) -> None:
    state.tanks["B"].level = 5.0
    state.valves["B"].open = True

    alarms = engine.check(state)

    assert state.valves["B"].open
    assert [a.message for a in alarms] == [feed_low_message("B")]
    assert alarms[0].message == "Tank B level critical (<5%)"


def test_feed_low_needs_open_valve(state, engine) -> None:
    state.tanks["A"].level = 1.0
    assert engine.check(state) == []


def test_rules_run_in_priority_order(state, engine) -> None:
    state.tanks["C"].level = 96.0
    state.tanks["A"].level = 2.0
    state.valves["A"].open = True

    alarms = engine.check(state)

    # overflow closed valve A first, so the feed advisory sees it closed
    assert [a.message for a in alarms] == [MSG_OVERFLOW]


def test_second_check_adds_no_alarms(state, engine) -> None:
    state.tanks["C"].level = 97.0
    state.tanks["A"].level = 3.0
    state.valves["A"].open = True
    state.valves["B"].open = True
    engine.check(state)

    state.valves["A"].open = False
    state.tanks["C"].level = 50.0
    state.valves["B"].open = True
    state.tanks["B"].level = 1.0
    first = engine.check(state)
    before = len(state.alarms)

    second = engine.check(state)

    assert [a.message for a in first] == [feed_low_message("B")]
    assert second == []
    assert len(state.alarms) == before


def test_agitator_start_precondition(state, engine) -> None:
    state.tanks["C"].level = 9.99
    assert not engine.can_start_agitator(state)
    state.tanks["C"].level = 10.0
    assert engine.can_start_agitator(state)


def test_thresholds_are_configurable(state) -> None:
    engine = InterlockEngine(InterlockConfig(overflow_level=50.0))
    state.tanks["C"].level = 50.0
    state.valves["B"].open = True

    assert [a.message for a in engine.check(state)] == [MSG_OVERFLOW]
    assert not state.valves["B"].open
