"""Orchestration of scripted crucible scenarios.

This module provides the scenario workflow, coordinating the crucible,
the history tracker, the exporters and the figures with centralized output
configuration.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foundry_sim.config.validation import warn_if_unsafe
from foundry_sim.core.alloy import Alloy, make_alloy
from foundry_sim.core.portion import ObjectLifecycle
from foundry_sim.core.pour import PourReport
from foundry_sim.crucible.casts import get_cast
from foundry_sim.crucible.crucible import Crucible
from foundry_sim.materials.registry import MaterialRegistry, create_default_registry
from foundry_sim.runners.config import OutputConfig, load_output_config
from foundry_sim.runners.exporters import export_history_csv, export_summary_csv
from foundry_sim.runners.scenario import Scenario, load_scenario
from foundry_sim.runners.trackers import TickHistoryTracker
from foundry_sim.runners.visualization import save_heating_curve_figure


@dataclass
class ScenarioResult:
    """Results of one scenario run.

    Attributes:
        scenario: Scenario that was run
        crucible: Crucible in its final state
        tracker: Recorded tick history
        pour_report: Report of the final pour (None if no pour requested)
        alloy: Poured alloy (None if no pour or the pour was rejected)
        output_files: Output name -> written path
        runtime_seconds: Wall-clock runtime

    """

    scenario: Scenario
    crucible: Crucible
    tracker: TickHistoryTracker
    pour_report: PourReport | None = None
    alloy: Alloy | None = None
    output_files: dict[str, Path] = field(default_factory=dict)
    runtime_seconds: float = 0.0

    def melt_times(self) -> dict[str, float | None]:
        """Portion id -> time it first became liquid (None if it never did)."""
        times = self.tracker.times
        return {s.portion_id: s.melt_time(times) for s in self.tracker.all_series()}

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "name": self.scenario.name,
            "config": self.scenario.config.to_dict(),
            "elapsed": self.crucible.elapsed,
            "fill_volume": self.crucible.fill_volume,
            "melted": {m.id: v for m, v in self.crucible.melted_composition().items()},
            "melt_times": self.melt_times(),
            "pour_accepted": bool(self.pour_report) if self.pour_report is not None else None,
            "alloy": None if self.alloy is None else {
                "name": self.alloy.name,
                "tier": self.alloy.tier.label,
                "score": self.alloy.score,
                "stats": self.alloy.rounded_stats(),
            },
            "runtime_seconds": self.runtime_seconds,
            "output_files": {k: str(v) for k, v in self.output_files.items()},
        }


def _pour_target(scenario: Scenario) -> float:
    request = scenario.pour
    if request.cast is not None:
        return get_cast(request.cast).volume
    if request.target is not None:
        return request.target
    return scenario.config.pour.target_volume


def run_scenario(
    scenario: Scenario | str | Path,
    output_config: OutputConfig | None = None,
    registry: MaterialRegistry | None = None,
    lifecycle: ObjectLifecycle | None = None,
) -> ScenarioResult:
    """Run a scripted crucible scenario.

    Args:
        scenario: Scenario, or path to a scenario YAML file
        output_config: Output configuration (uses the scenario's ``output``
            section if not provided)
        registry: Materials; defaults to the scenario's materials_file or
            the standard metals
        lifecycle: External-object lifecycle collaborator

    Returns:
        ScenarioResult
    """
    if not isinstance(scenario, Scenario):
        scenario = load_scenario(scenario)
    if output_config is None:
        output_config = load_output_config(scenario.raw)
    verbose = output_config.verbosity >= 1

    if registry is None:
        if scenario.materials_file is not None:
            registry = MaterialRegistry.from_yaml(scenario.materials_file)
        else:
            registry = create_default_registry()

    warn_if_unsafe(scenario.config)
    crucible = Crucible(registry, config=scenario.config, lifecycle=lifecycle)
    tracker = TickHistoryTracker(record_interval=output_config.record_interval)

    if verbose:
        print("=" * 70)
        print(f"CRUCIBLE SCENARIO: {scenario.name}")
        print("=" * 70)
        print(f"  dt = {scenario.dt} s, duration = {scenario.duration} s ({scenario.n_ticks} ticks)")
        print(f"  Capacity: {crucible.capacity} L, ambient: {crucible.ambient} C")
        print(f"  Output directory: {output_config.output_dir}")

    # ========================================================================
    # Tick loop
    # ========================================================================
    start = time.perf_counter()
    commits = list(scenario.commits)
    setpoints = list(scenario.setpoint_schedule)

    tracker.record(0, crucible, force=True)
    n_ticks = scenario.n_ticks
    for tick in range(n_ticks):
        now = tick * scenario.dt

        while setpoints and setpoints[0].time <= now + 1e-12:
            crucible.setpoint = setpoints.pop(0).setpoint

        while commits and commits[0].time <= now + 1e-12:
            event = commits.pop(0)
            portion = crucible.commit(event.material, event.volume)
            if verbose:
                status = "committed" if portion else "rejected"
                print(f"  t={now:7.2f} s  {event.material} {event.volume:.3f} L {status}")

        changed = crucible.tick(scenario.dt)
        if verbose:
            for portion in changed:
                print(f"  t={crucible.elapsed:7.2f} s  {portion.material.name} -> {portion.phase.value}")

        tracker.record(tick + 1, crucible, force=(tick == n_ticks - 1))

    # ========================================================================
    # Pour
    # ========================================================================
    pour_report = None
    alloy = None
    if scenario.pour is not None:
        target = _pour_target(scenario)
        selection = scenario.pour.selection
        if scenario.pour.auto_balance:
            selection = crucible.balance_to_target(selection, target)

        pour_report = crucible.try_pour(selection, target)
        if pour_report:
            alloy = make_alloy(pour_report.drained)

        if verbose:
            if alloy is not None:
                print(f"  Poured {target:.3f} L: {alloy.name} [{alloy.tier.label}] score {alloy.score:.1f}")
            else:
                print(f"  Pour of {target:.3f} L rejected: {pour_report.reason.value}")

    runtime = time.perf_counter() - start
    result = ScenarioResult(
        scenario=scenario,
        crucible=crucible,
        tracker=tracker,
        pour_report=pour_report,
        alloy=alloy,
        runtime_seconds=runtime,
    )

    # ========================================================================
    # Outputs
    # ========================================================================
    if output_config.enable_history_csv or output_config.enable_summary_csv or output_config.enable_figures:
        output_config.output_dir.mkdir(exist_ok=True, parents=True)

    if output_config.enable_history_csv:
        result.output_files["history_csv"] = export_history_csv(
            tracker, output_config.history_csv_path(),
        )

    if output_config.enable_summary_csv:
        result.output_files["summary_csv"] = export_summary_csv(
            scenario, crucible, tracker, pour_report, alloy,
            filename=output_config.summary_csv_path(),
        )

    if output_config.enable_figures and output_config.enable_heating_curve_figure:
        result.output_files["heating_curve"] = save_heating_curve_figure(
            tracker,
            output_config.heating_curve_figure_path(),
            melt_hysteresis=scenario.config.phase.melt_hysteresis,
            solidify_hysteresis=scenario.config.phase.solidify_hysteresis,
            dpi=output_config.figure_dpi,
            title=f"Crucible Heating Curve: {scenario.name}",
        )

    if verbose:
        for name, path in result.output_files.items():
            print(f"  ✓ Saved {name}: {path}")
        print(f"  Runtime: {runtime:.3f} s")

    return result
