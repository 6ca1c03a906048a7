"""
Trend charts for a TrendHistory, the two views of the operator panel:
- tank levels (A, B, mixer), 0..100
- temperature (15..35 °C) with flow rate (0..10) on a second axis

Uses matplotlib only, Agg backend (files, no window).
"""
from __future__ import annotations

import os
from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .history import TrendHistory  # noqa: E402


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def plot_levels(history: TrendHistory, outpath: str) -> None:
    pts = history.points
    xs = list(range(len(pts)))

    plt.figure()
    plt.plot(xs, [p.tank_a for p in pts], label="Tank A")
    plt.plot(xs, [p.tank_b for p in pts], label="Tank B")
    plt.plot(xs, [p.tank_c for p in pts], label="Mixer")
    plt.ylim(0, 100)
    plt.title("Tank levels")
    plt.xlabel("tick")
    plt.ylabel("level (%)")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outpath, dpi=150)
    plt.close()


def plot_temperature_flow(history: TrendHistory, outpath: str) -> None:
    pts = history.points
    xs = list(range(len(pts)))

    fig, ax = plt.subplots()
    ax.plot(xs, [p.temperature for p in pts], label="Temperature (°C)")
    ax.set_ylim(15, 35)
    ax.set_xlabel("tick")
    ax.set_ylabel("°C")

    ax2 = ax.twinx()
    ax2.plot(xs, [p.flow_rate for p in pts], label="Flow Rate", linestyle="--")
    ax2.set_ylim(0, 10)
    ax2.set_ylabel("flow")

    ax.set_title("Temperature and flow")
    fig.tight_layout()
    fig.savefig(outpath, dpi=150)
    plt.close(fig)


def render_trends(history: TrendHistory, outdir: str) -> List[str]:
    ensure_dir(outdir)
    levels = os.path.join(outdir, "levels.png")
    temp = os.path.join(outdir, "temperature_flow.png")

    plot_levels(history, levels)
    plot_temperature_flow(history, temp)
    return [levels, temp]
