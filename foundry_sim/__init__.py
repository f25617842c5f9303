"""Crucible Melting and Alloy Pouring Simulation

A tick-driven model of a crucible that heats material portions toward a
furnace setpoint, melts and solidifies them under hysteresis, and pours an
exact volume of the molten mix into an alloy.

Key Principles:
- Injected, immutable material registry (no global tables)
- Frame-rate independent exponential heating
- Sustained time above/below threshold for every phase change
- Read-only balancing, all-or-nothing pouring
- Deterministic ordering by material id

Version: 1.0
"""

__version__ = "1.0"

# Materials
from foundry_sim.materials import (
    Material,
    MaterialRegistry,
    MetalStats,
    create_default_registry,
)

# Configuration
from foundry_sim.config import (
    ConfigurationError,
    FoundryConfig,
    ThermalIntegrator,
    create_default_config,
    create_validated_config,
)

# Core simulation
from foundry_sim.core import (
    Alloy,
    ObjectLifecycle,
    Phase,
    Portion,
    QualityTier,
    ThermalSnapshot,
    balance_to_target,
    make_alloy,
)

# Container
from foundry_sim.crucible import Crucible, create_crucible, get_cast, list_casts

__all__ = [
    # Version
    "__version__",
    # Materials
    "Material",
    "MetalStats",
    "MaterialRegistry",
    "create_default_registry",
    # Config
    "FoundryConfig",
    "ThermalIntegrator",
    "ConfigurationError",
    "create_default_config",
    "create_validated_config",
    # Core
    "Phase",
    "Portion",
    "ThermalSnapshot",
    "ObjectLifecycle",
    "Alloy",
    "QualityTier",
    "make_alloy",
    "balance_to_target",
    # Container
    "Crucible",
    "create_crucible",
    "get_cast",
    "list_casts",
]
