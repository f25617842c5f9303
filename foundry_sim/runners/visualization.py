"""Visualization functions for scenario results.

- Heating curve: portion temperatures against the setpoint, with each
  material's melt and solidify thresholds and the moment each portion melted
"""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # Use non-interactive backend
import matplotlib.pyplot as plt
import numpy as np


def save_heating_curve_figure(
    tracker,
    output_path,
    melt_hysteresis: float,
    solidify_hysteresis: float,
    dpi: int = 150,
    title: str = "Crucible Heating Curve",
) -> Path:
    """Plot every portion's temperature over time.

    Args:
        tracker: TickHistoryTracker with recorded samples
        output_path: Figure path (format from the suffix)
        melt_hysteresis: Margin above the melting point for melting [C]
        solidify_hysteresis: Margin below the melting point for solidifying [C]
        dpi: Figure DPI
        title: Figure title

    Returns:
        Path to the saved figure
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(exist_ok=True, parents=True)

    times = tracker.times
    fig, (ax_temp, ax_prog) = plt.subplots(
        2, 1, figsize=(10, 8), sharex=True, gridspec_kw={"height_ratios": [3, 1]},
    )

    ax_temp.plot(times, tracker.setpoints, color="black", linewidth=1.5,
                 linestyle="--", label="Setpoint")

    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    thresholds_drawn = set()

    for i, series in enumerate(tracker.all_series()):
        color = colors[i % len(colors)]
        label = f"{series.material_id} ({series.portion_id[:6]})"
        ax_temp.plot(times, series.temperature, color=color, linewidth=1.8, label=label)
        ax_prog.plot(times, series.melt_progress, color=color, linewidth=1.2)
        ax_prog.plot(times, series.solidify_progress, color=color, linewidth=1.2, linestyle=":")

        melt_time = series.melt_time(times)
        if melt_time is not None:
            ax_temp.axvline(melt_time, color=color, alpha=0.4, linestyle=":")

        if series.material_id not in thresholds_drawn:
            thresholds_drawn.add(series.material_id)
            ax_temp.axhline(series.melting_point + melt_hysteresis, color=color,
                            alpha=0.5, linestyle="-.", linewidth=0.8)
            ax_temp.axhline(series.melting_point - solidify_hysteresis, color=color,
                            alpha=0.3, linestyle="-.", linewidth=0.8)

    ax_temp.set_ylabel("Temperature [C]")
    ax_temp.set_title(title)
    ax_temp.grid(True, alpha=0.3)
    if len(times) > 0:
        ax_temp.set_xlim(float(np.min(times)), float(np.max(times)))
    ax_temp.legend(loc="lower right", fontsize=8)

    ax_prog.set_xlabel("Time [s]")
    ax_prog.set_ylabel("Progress [s]")
    ax_prog.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=dpi)
    plt.close(fig)

    return output_path
