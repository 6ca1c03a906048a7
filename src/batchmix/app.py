# app.py (Streamlit) — operator panel for BatchPlant: reads snapshots, forwards commands
from __future__ import annotations

import time

import streamlit as st

from batchmix.log import log, setup_logging
from batchmix.plant.controller import CommandResult
from batchmix.plant.runtime import BatchPlant
from batchmix.plant.snapshot import PlantSnapshot


# ======================================================
# INIT
# ======================================================
st.set_page_config(page_title="Batch Mixing Plant", layout="wide")

if "plant" not in st.session_state:
    setup_logging()
    st.session_state.plant = BatchPlant()
    st.session_state.running = False
    st.session_state.ticks_per_refresh = 5
    st.session_state.refresh_s = 0.5
    st.session_state.last_result = None
    log("operator panel started")

plant: BatchPlant = st.session_state.plant


def run_command(result: CommandResult) -> None:
    st.session_state.last_result = result


# ======================================================
# SIDEBAR CONTROLS
# ======================================================
st.sidebar.title("Process")

c1, c2, c3 = st.sidebar.columns(3)
if c1.button("Start", key="start"):
    run_command(plant.start_process())
if c2.button("E-Stop", key="stop"):
    run_command(plant.stop_process())
if c3.button("Reset", key="reset"):
    run_command(plant.reset_process())

st.sidebar.divider()
st.sidebar.subheader("Valves / Agitator")

v1, v2, v3 = st.sidebar.columns(3)
if v1.button("Valve A", key="valve_a"):
    run_command(plant.toggle_valve("A"))
if v2.button("Valve B", key="valve_b"):
    run_command(plant.toggle_valve("B"))
if v3.button("Agitator", key="agitator"):
    run_command(plant.toggle_agitator())

last: CommandResult | None = st.session_state.last_result
if last is not None and not last.ok:
    st.sidebar.warning(f"{last.command}: {last.error}")

st.sidebar.divider()
st.sidebar.subheader("Simulation")

st.session_state.ticks_per_refresh = st.sidebar.slider(
    "ticks per refresh", 1, 20, int(st.session_state.ticks_per_refresh)
)
st.session_state.refresh_s = st.sidebar.slider(
    "UI refresh (seconds)", 0.1, 2.0, float(st.session_state.refresh_s), 0.1
)

if st.sidebar.button("Tick once", key="tick"):
    plant.tick()

st.session_state.running = st.sidebar.toggle("Running", value=st.session_state.running, key="running_toggle")


# ======================================================
# MAIN UI
# ======================================================
snap: PlantSnapshot = plant.snapshot()

st.title("Batch Mixing Plant — Simulation")

severity, message = snap.alarm_status
if severity == "CRITICAL":
    st.error(message)
elif severity == "WARNING":
    st.warning(message)
elif severity == "INFO":
    st.info(message)
else:
    st.success(message)

a, b, c, d, e = st.columns(5)
a.metric("Tank A (pigment)", f"{round(snap.levels['A'])}%")
b.metric("Tank B (base)", f"{round(snap.levels['B'])}%")
c.metric("Mixer", f"{round(snap.levels['C'])}%")
d.metric("Temperature", f"{snap.temperature:.1f}°C")
e.metric("Runtime", snap.runtime)

s1, s2, s3, s4 = st.columns(4)
s1.metric("V1", "OPEN" if snap.valves["A"] else "CLOSED")
s2.metric("V2", "OPEN" if snap.valves["B"] else "CLOSED")
s3.metric("Agitator", "RUNNING" if snap.agitator_running else "OFF")
s4.metric("Flow rate", f"{snap.flow_rate:.1f}")

st.divider()

st.subheader("Alarms")
if not snap.alarms:
    st.write("No Active Alarms")
for alarm in snap.alarms:
    st.write(f"`{alarm.time_label}` **{alarm.severity}** {alarm.message}")

# History
trend = plant.trend_frame()
if len(trend) > 1:
    st.subheader("Trends")
    df = trend.set_index("time")
    st.line_chart(df[["tank_a", "tank_b", "tank_c"]])
    st.line_chart(df[["temperature", "flow_rate"]])


# ======================================================
# LOOP
# ======================================================
if st.session_state.running:
    for _ in range(int(st.session_state.ticks_per_refresh)):
        plant.tick()
    time.sleep(st.session_state.refresh_s)
    st.rerun()
