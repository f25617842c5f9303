"""Core simulation for the crucible.

This module contains the portion state, the per-tick thermal and phase
updates, and the on-demand composition, balancing, pouring and alloy
computations.
"""

from foundry_sim.core.thermal import ThermalSimulator, approach_factor, cool_toward
from foundry_sim.core.portion import (
    NullLifecycle,
    ObjectLifecycle,
    Phase,
    Portion,
    ThermalSnapshot,
)
from foundry_sim.core.phase import PhaseTransitionMachine, required_seconds
from foundry_sim.core.composition import (
    liquid_fill_fraction,
    melted_composition,
    melted_total,
    total_volume,
)
from foundry_sim.core.alloy import (
    Alloy,
    QualityTier,
    auto_name,
    combine_stats,
    compute_score,
    make_alloy,
    normalize,
    score_to_tier,
)
from foundry_sim.core.balancer import balance_to_target
from foundry_sim.core.pour import PourExecutor, PourRejection, PourReport

__all__ = [
    # Portion state
    "Phase",
    "Portion",
    "ThermalSnapshot",
    "ObjectLifecycle",
    "NullLifecycle",
    # Per-tick simulation
    "ThermalSimulator",
    "approach_factor",
    "cool_toward",
    "PhaseTransitionMachine",
    "required_seconds",
    # Composition
    "melted_composition",
    "melted_total",
    "total_volume",
    "liquid_fill_fraction",
    # Alloy engine
    "Alloy",
    "QualityTier",
    "normalize",
    "combine_stats",
    "compute_score",
    "score_to_tier",
    "auto_name",
    "make_alloy",
    # Balancing and pouring
    "balance_to_target",
    "PourExecutor",
    "PourReport",
    "PourRejection",
]
