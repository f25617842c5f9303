"""
Configuration Validation Utilities

This module provides validation functions for simulation configurations.
It includes invariant checking, safety warnings and best-effort fixes.

Import Policy:
    from foundry_sim.config.validation import validate_config, check_invariants, warn_if_unsafe

DO NOT use: from foundry_sim.config.validation import *
"""

import warnings
from copy import deepcopy
from typing import List, Tuple

from foundry_sim.config.defaults import MIN_STEP
from foundry_sim.config.enums import ThermalIntegrator
from foundry_sim.config.simulation_config import FoundryConfig, create_default_config


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigurationWarning(Warning):
    """Warning for potentially unsafe configuration choices."""

    pass


def validate_config(config: FoundryConfig, raise_on_error: bool = True) -> Tuple[bool, List[str]]:
    """Validate a simulation configuration.

    Args:
        config: FoundryConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        Tuple of (is_valid, error_messages)

    Raises:
        ConfigurationError: If validation fails and raise_on_error=True
    """
    errors = config.validate()

    if errors:
        if raise_on_error:
            raise ConfigurationError(
                f"Configuration validation failed with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )
        return False, errors

    return True, []


def check_invariants(config: FoundryConfig) -> bool:
    """Check the invariants the simulation relies on.

    Invariants checked:
        1. Capacity is non-negative
        2. Setpoint range is ordered and contains the initial setpoint
        3. Hysteresis margins and decay rate are non-negative
        4. Melt/solidify scales are positive
        5. Pour target, step and epsilon are positive, epsilon < step / 2
        6. The standard pour fits in the crucible

    Args:
        config: FoundryConfig to check

    Returns:
        True if all invariants are satisfied
    """
    is_valid, _ = validate_config(config, raise_on_error=False)
    return is_valid


def warn_if_unsafe(config: FoundryConfig) -> List[str]:
    """Check for legal but questionable configuration choices.

    Warnings are issued via Python's warnings module.

    Args:
        config: FoundryConfig to check

    Returns:
        List of warning messages (empty if no warnings)
    """
    warnings_list = []

    if config.crucible.setpoint_max <= config.crucible.ambient_temp:
        warnings_list.append(
            f"setpoint_max ({config.crucible.setpoint_max}) does not exceed ambient "
            f"({config.crucible.ambient_temp}). Portions can never heat up."
        )

    if config.thermal.heat_rate_base == 0:
        warnings_list.append(
            "heat_rate_base is 0. Portion temperatures will never change."
        )

    if config.phase.progress_decay_rate == 0:
        warnings_list.append(
            "progress_decay_rate is 0. Melt progress never leaks, so portions "
            "flickering across the threshold will eventually melt."
        )

    # Forward Euler lags the exact curve noticeably at large k*dt
    if config.thermal.integrator == ThermalIntegrator.CLAMPED_EULER:
        warnings_list.append(
            "CLAMPED_EULER integration depends on the host frame rate. "
            "Use EXACT for reproducible runs."
        )

    if config.pour.step < MIN_STEP:
        warnings_list.append(
            f"step ({config.pour.step}) is below the balancer minimum ({MIN_STEP}) "
            "and will be raised to it."
        )

    for warning_msg in warnings_list:
        warnings.warn(warning_msg, ConfigurationWarning, stacklevel=2)

    return warnings_list


def auto_fix_config(config: FoundryConfig) -> FoundryConfig:
    """Automatically fix common configuration issues.

    Best effort only. The input is not modified; a fixed copy is returned.

    Args:
        config: FoundryConfig to fix

    Returns:
        Fixed FoundryConfig
    """
    fixed = deepcopy(config)

    cru = fixed.crucible
    if cru.setpoint_max < cru.setpoint_min:
        cru.setpoint_min, cru.setpoint_max = cru.setpoint_max, cru.setpoint_min
        warnings.warn(
            f"Auto-fixed swapped setpoint range to [{cru.setpoint_min}, {cru.setpoint_max}]",
            ConfigurationWarning,
            stacklevel=2,
        )

    clamped = min(max(cru.initial_setpoint, cru.setpoint_min), cru.setpoint_max)
    if clamped != cru.initial_setpoint:
        warnings.warn(
            f"Auto-fixed initial_setpoint from {cru.initial_setpoint} to {clamped}",
            ConfigurationWarning,
            stacklevel=2,
        )
        cru.initial_setpoint = clamped

    pour = fixed.pour
    if pour.step > 0 and pour.epsilon >= pour.step / 2:
        old_epsilon = pour.epsilon
        pour.epsilon = pour.step / 10
        warnings.warn(
            f"Auto-fixed epsilon from {old_epsilon} to {pour.epsilon} (step = {pour.step})",
            ConfigurationWarning,
            stacklevel=2,
        )

    return fixed


def validate_and_fix(config: FoundryConfig, auto_fix: bool = False) -> FoundryConfig:
    """Validate and optionally auto-fix a configuration.

    Args:
        config: FoundryConfig to validate
        auto_fix: If True, automatically fix unsafe parameters

    Returns:
        Valid (and possibly fixed) FoundryConfig

    Raises:
        ConfigurationError: If validation fails and errors cannot be auto-fixed

    Example:
        >>> config = FoundryConfig()
        >>> valid_config = validate_and_fix(config, auto_fix=True)
    """
    if auto_fix:
        config = auto_fix_config(config)

    is_valid, errors = validate_config(config, raise_on_error=False)

    if not is_valid:
        raise ConfigurationError(
            "Configuration validation failed. Errors cannot be auto-fixed:\n"
            + "\n".join(f"  - {err}" for err in errors)
        )

    warn_if_unsafe(config)

    return config


def create_validated_config(**kwargs) -> FoundryConfig:
    """Create a configuration with overrides, then validate it.

    Keyword names are looked up on each sub-config in turn
    (crucible, thermal, phase, pour).

    Args:
        **kwargs: Parameters to override in default config

    Returns:
        Validated FoundryConfig

    Raises:
        ConfigurationError: If the resulting configuration is invalid
        ValueError: If a keyword matches no configuration field

    Example:
        >>> config = create_validated_config(capacity=8.0, heat_rate_base=0.5)
    """
    config = create_default_config()

    for key, value in kwargs.items():
        if hasattr(config.crucible, key):
            setattr(config.crucible, key, value)
        elif hasattr(config.thermal, key):
            if key == "integrator" and isinstance(value, str):
                value = ThermalIntegrator(value)
            setattr(config.thermal, key, value)
        elif hasattr(config.phase, key):
            setattr(config.phase, key, value)
        elif hasattr(config.pour, key):
            setattr(config.pour, key, value)
        else:
            raise ValueError(f"Unknown configuration parameter: {key}")

    return validate_and_fix(config)
