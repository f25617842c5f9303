"""Export functions for scenario output data.

- Tick history CSV (long form, one row per portion per recorded sample)
- Summary CSV (configuration, per-portion melt times, pour result)
"""

import csv
from pathlib import Path

import numpy as np

from foundry_sim.config.defaults import STAT_NAMES


def export_history_csv(tracker, filename="tick_history.csv"):
    """Export the recorded tick history to CSV.

    Args:
        tracker: TickHistoryTracker with recorded samples
        filename: Output CSV filename

    Returns:
        Path to output file
    """
    times = tracker.times
    setpoints = tracker.setpoints
    fills = tracker.fill_volumes
    liquid_fills = tracker.liquid_fill_fractions
    series = tracker.all_series()

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "sample",
            "time_s",
            "setpoint_C",
            "fill_L",
            "liquid_fill_fraction",
            "portion_id",
            "material",
            "temperature_C",
            "melt_progress_s",
            "solidify_progress_s",
            "phase",
        ])

        for sample in range(len(times)):
            for s in series:
                if np.isnan(s.temperature[sample]):
                    continue
                writer.writerow([
                    sample,
                    f"{times[sample]:.4f}",
                    f"{setpoints[sample]:.2f}",
                    f"{fills[sample]:.6f}",
                    f"{liquid_fills[sample]:.6f}",
                    s.portion_id,
                    s.material_id,
                    f"{s.temperature[sample]:.4f}",
                    f"{s.melt_progress[sample]:.4f}",
                    f"{s.solidify_progress[sample]:.4f}",
                    "liquid" if s.liquid[sample] == 1.0 else "solid",
                ])

    return Path(filename)


def export_summary_csv(scenario, crucible, tracker, pour_report=None, alloy=None,
                       filename="scenario_summary.csv"):
    """Export summary statistics to CSV.

    Args:
        scenario: Scenario that was run
        crucible: Crucible after the run
        tracker: TickHistoryTracker with recorded samples
        pour_report: PourReport of the final pour, if one was requested
        alloy: Alloy produced by the pour, if accepted
        filename: Output CSV filename

    Returns:
        Path to output file
    """
    config = scenario.config

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Parameter", "Value", "Unit"])

        writer.writerow(["SCENARIO", "", ""])
        writer.writerow(["Name", scenario.name, "-"])
        writer.writerow(["Time Step", scenario.dt, "s"])
        writer.writerow(["Duration", scenario.duration, "s"])
        writer.writerow(["Ticks", scenario.n_ticks, "-"])

        writer.writerow(["CRUCIBLE", "", ""])
        writer.writerow(["Capacity", config.crucible.capacity, "L"])
        writer.writerow(["Ambient", config.crucible.ambient_temp, "C"])
        writer.writerow(["Heat Rate Base", config.thermal.heat_rate_base, "1/s"])
        writer.writerow(["Integrator", config.thermal.integrator.value, "-"])
        writer.writerow(["Melt Hysteresis", config.phase.melt_hysteresis, "C"])
        writer.writerow(["Solidify Hysteresis", config.phase.solidify_hysteresis, "C"])

        writer.writerow(["PORTIONS", "", ""])
        times = tracker.times
        for s in tracker.all_series():
            melt_time = s.melt_time(times)
            writer.writerow([
                f"{s.material_id} {s.portion_id[:8]} melt time",
                f"{melt_time:.4f}" if melt_time is not None else "never",
                "s",
            ])
            writer.writerow([
                f"{s.material_id} {s.portion_id[:8]} max temperature",
                f"{np.nanmax(s.temperature):.4f}",
                "C",
            ])

        writer.writerow(["FINAL STATE", "", ""])
        writer.writerow(["Fill Volume", f"{crucible.fill_volume:.6f}", "L"])
        if len(tracker):
            writer.writerow(["Peak Liquid Fill", f"{np.max(tracker.liquid_fill_fractions):.6f}", "-"])
        for material, liters in crucible.melted_composition().items():
            writer.writerow([f"Melted {material.name}", f"{liters:.6f}", "L"])

        if pour_report is not None:
            writer.writerow(["POUR", "", ""])
            writer.writerow(["Accepted", pour_report.accepted, "-"])
            if pour_report.reason is not None:
                writer.writerow(["Rejection", pour_report.reason.value, "-"])
            for material, liters in pour_report.drained.items():
                writer.writerow([f"Drained {material.name}", f"{liters:.6f}", "L"])

        if alloy is not None:
            writer.writerow(["ALLOY", "", ""])
            writer.writerow(["Name", alloy.name, "-"])
            writer.writerow(["Tier", alloy.tier.label, "-"])
            writer.writerow(["Score", f"{alloy.score:.4f}", "-"])
            for stat in STAT_NAMES:
                writer.writerow([stat.capitalize(), f"{getattr(alloy.stats, stat):.4f}", "-"])

    return Path(filename)
