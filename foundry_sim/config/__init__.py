"""Configuration Module - Single Source of Truth for Simulation Parameters

This module provides the complete configuration system for foundry_sim.

Recommended Usage:
    from foundry_sim.config import FoundryConfig, create_validated_config
    from foundry_sim.config.enums import ThermalIntegrator

    # Create a default config (already validated)
    config = create_validated_config()

    # Create a custom config with validation
    config = create_validated_config(capacity=8.0, melt_hysteresis=15.0)

    # Or build manually
    from foundry_sim.config import FoundryConfig, ThermalConfig
    config = FoundryConfig(thermal=ThermalConfig(heat_rate_base=0.5))

Import Policy:
    DO NOT use: from foundry_sim.config import *

Submodules:
    enums: Configuration enumerations (ThermalIntegrator)
    simulation_config: Configuration dataclasses (CrucibleConfig, PourConfig, etc.)
    validation: Validation utilities (validate_config, check_invariants, etc.)
"""

from foundry_sim.config.enums import ThermalIntegrator
from foundry_sim.config.simulation_config import (
    CrucibleConfig,
    FoundryConfig,
    PhaseConfig,
    PourConfig,
    ThermalConfig,
    create_default_config,
)
from foundry_sim.config.validation import (
    ConfigurationError,
    ConfigurationWarning,
    check_invariants,
    create_validated_config,
    validate_and_fix,
    validate_config,
    warn_if_unsafe,
)


__all__ = [
    # Enums
    "ThermalIntegrator",
    # Config classes
    "CrucibleConfig",
    "ThermalConfig",
    "PhaseConfig",
    "PourConfig",
    "FoundryConfig",
    # Factory functions
    "create_default_config",
    "create_validated_config",
    # Validation
    "ConfigurationError",
    "ConfigurationWarning",
    "validate_config",
    "check_invariants",
    "warn_if_unsafe",
    "validate_and_fix",
]
