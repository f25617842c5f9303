"""Scenario runners for scripted crucible runs.

This package provides modular components for running crucible scenarios:
- scenario: Scenario definitions loaded from YAML
- config: Output configuration management with centralized toggles
- trackers: Tick history collection
- exporters: CSV export functions
- visualization: Heating curve figure
- orchestration: Main scenario workflow

Example usage:
    from foundry_sim.runners import load_scenario, run_scenario

    scenario = load_scenario("scenarios/iron_copper.yaml")
    result = run_scenario(scenario)
    print(result.alloy.name if result.alloy else "no alloy")
"""

from foundry_sim.runners.config import OutputConfig, load_output_config
from foundry_sim.runners.exporters import export_history_csv, export_summary_csv
from foundry_sim.runners.orchestration import ScenarioResult, run_scenario
from foundry_sim.runners.scenario import (
    CommitEvent,
    PourRequest,
    Scenario,
    SetpointEvent,
    load_scenario,
)
from foundry_sim.runners.trackers import PortionSeries, TickHistoryTracker
from foundry_sim.runners.visualization import save_heating_curve_figure

__all__ = [
    # Main orchestration
    "run_scenario",
    "ScenarioResult",
    # Scenarios
    "Scenario",
    "CommitEvent",
    "SetpointEvent",
    "PourRequest",
    "load_scenario",
    # Config
    "OutputConfig",
    "load_output_config",
    # Trackers
    "TickHistoryTracker",
    "PortionSeries",
    # Exporters
    "export_history_csv",
    "export_summary_csv",
    # Visualization
    "save_heating_curve_figure",
]
