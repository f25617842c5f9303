"""Simulation Configuration - Single Source of Truth (SSOT)

This module provides the central configuration dataclasses for the crucible
simulation. ALL tunable parameters flow through these configuration classes.

Import Policy:
    from foundry_sim.config.simulation_config import FoundryConfig, CrucibleConfig, ThermalConfig

DO NOT use: from foundry_sim.config.simulation_config import *
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from foundry_sim.config.defaults import (
    DEFAULT_AMBIENT_TEMP,
    DEFAULT_CAPACITY,
    DEFAULT_EPSILON,
    DEFAULT_GLOBAL_MELT_SCALE,
    DEFAULT_HEAT_RATE_BASE,
    DEFAULT_INITIAL_SETPOINT,
    DEFAULT_MELT_HYSTERESIS,
    DEFAULT_OUTSIDE_COOLING_RATE,
    DEFAULT_PROGRESS_DECAY_RATE,
    DEFAULT_SETPOINT_MAX,
    DEFAULT_SETPOINT_MIN,
    DEFAULT_SOLIDIFY_HYSTERESIS,
    DEFAULT_SOLIDIFY_SCALE,
    DEFAULT_STEP,
    DEFAULT_TARGET_VOLUME,
    DEFAULT_THERMAL_INTEGRATOR,
)
from foundry_sim.config.enums import ThermalIntegrator


@dataclass
class CrucibleConfig:
    """Container configuration.

    Attributes:
        capacity: Maximum total portion volume (liters)
        ambient_temp: Room temperature (degC); lower/upper thermal bound
            together with the setpoint
        initial_setpoint: Furnace setpoint at construction (degC)
        setpoint_min, setpoint_max: Furnace dial range (degC)

    """

    capacity: float = DEFAULT_CAPACITY
    ambient_temp: float = DEFAULT_AMBIENT_TEMP
    initial_setpoint: float = DEFAULT_INITIAL_SETPOINT
    setpoint_min: float = DEFAULT_SETPOINT_MIN
    setpoint_max: float = DEFAULT_SETPOINT_MAX

    def validate(self) -> list[str]:
        """Validate crucible configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if self.capacity < 0:
            errors.append(f"capacity must be >= 0, got {self.capacity}")

        if self.setpoint_max < self.setpoint_min:
            errors.append(
                f"setpoint_max ({self.setpoint_max}) must be >= setpoint_min ({self.setpoint_min})",
            )

        if not (self.setpoint_min <= self.initial_setpoint <= self.setpoint_max):
            errors.append(
                f"initial_setpoint ({self.initial_setpoint}) must lie in "
                f"[{self.setpoint_min}, {self.setpoint_max}]",
            )

        return errors


@dataclass
class ThermalConfig:
    """Heat transfer configuration.

    Attributes:
        heat_rate_base: Base coefficient k0 (1/s); k = k0 * heat_sensitivity
        integrator: Temperature update scheme
        outside_cooling_rate: Cooling coefficient for portions removed from
            the crucible (1/s)

    """

    heat_rate_base: float = DEFAULT_HEAT_RATE_BASE
    integrator: ThermalIntegrator = ThermalIntegrator(DEFAULT_THERMAL_INTEGRATOR)
    outside_cooling_rate: float = DEFAULT_OUTSIDE_COOLING_RATE

    def __post_init__(self):
        if isinstance(self.integrator, str):
            self.integrator = ThermalIntegrator(self.integrator)

    def validate(self) -> list[str]:
        errors = []

        if not isinstance(self.integrator, ThermalIntegrator):
            errors.append(f"integrator must be a ThermalIntegrator, got {self.integrator!r}")

        if self.heat_rate_base < 0:
            errors.append(f"heat_rate_base must be >= 0, got {self.heat_rate_base}")

        if self.outside_cooling_rate < 0:
            errors.append(
                f"outside_cooling_rate must be >= 0, got {self.outside_cooling_rate}",
            )

        return errors


@dataclass
class PhaseConfig:
    """Melt/solidify state machine configuration.

    Attributes:
        melt_hysteresis: Margin above the melting point before melt progress
            accrues (degC)
        solidify_hysteresis: Margin below the melting point before solidify
            progress accrues (degC)
        global_melt_scale: Multiplier on every material's melt duration
        solidify_scale: Multiplier on melt duration for solidifying.
            None reuses global_melt_scale.
        progress_decay_rate: Progress lost per second while below threshold

    """

    melt_hysteresis: float = DEFAULT_MELT_HYSTERESIS
    solidify_hysteresis: float = DEFAULT_SOLIDIFY_HYSTERESIS
    global_melt_scale: float = DEFAULT_GLOBAL_MELT_SCALE
    solidify_scale: float | None = DEFAULT_SOLIDIFY_SCALE
    progress_decay_rate: float = DEFAULT_PROGRESS_DECAY_RATE

    @property
    def effective_solidify_scale(self) -> float:
        if self.solidify_scale is None:
            return self.global_melt_scale
        return self.solidify_scale

    def validate(self) -> list[str]:
        """Validate phase configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if self.melt_hysteresis < 0:
            errors.append(f"melt_hysteresis must be >= 0, got {self.melt_hysteresis}")
        if self.solidify_hysteresis < 0:
            errors.append(f"solidify_hysteresis must be >= 0, got {self.solidify_hysteresis}")

        if self.global_melt_scale <= 0:
            errors.append(f"global_melt_scale must be > 0, got {self.global_melt_scale}")
        if self.solidify_scale is not None and self.solidify_scale <= 0:
            errors.append(f"solidify_scale must be > 0 or None, got {self.solidify_scale}")

        if self.progress_decay_rate < 0:
            errors.append(f"progress_decay_rate must be >= 0, got {self.progress_decay_rate}")

        return errors


@dataclass
class PourConfig:
    """Pour and balancing configuration.

    Attributes:
        target_volume: Default exact pour volume (liters)
        step: Selection quantization step (liters)
        epsilon: Tolerance on sums and availability (liters)

    """

    target_volume: float = DEFAULT_TARGET_VOLUME
    step: float = DEFAULT_STEP
    epsilon: float = DEFAULT_EPSILON

    def validate(self) -> list[str]:
        errors = []

        if self.target_volume <= 0:
            errors.append(f"target_volume must be > 0, got {self.target_volume}")
        if self.step <= 0:
            errors.append(f"step must be > 0, got {self.step}")
        if self.epsilon <= 0:
            errors.append(f"epsilon must be > 0, got {self.epsilon}")
        elif self.step > 0 and self.epsilon >= self.step / 2:
            errors.append(
                f"epsilon ({self.epsilon}) must be < step / 2 ({self.step / 2}) "
                "or quantized selections become ambiguous",
            )

        return errors


@dataclass
class FoundryConfig:
    """Complete simulation configuration (SSOT).

    Example:
        >>> config = FoundryConfig()
        >>> errors = config.validate()
        >>> if errors:
        ...     for err in errors:
        ...         print(f"Configuration error: {err}")

    Attributes:
        crucible: Container configuration
        thermal: Heat transfer configuration
        phase: Melt/solidify configuration
        pour: Pour and balancing configuration

    """

    crucible: CrucibleConfig = field(default_factory=CrucibleConfig)
    thermal: ThermalConfig = field(default_factory=ThermalConfig)
    phase: PhaseConfig = field(default_factory=PhaseConfig)
    pour: PourConfig = field(default_factory=PourConfig)

    def validate(self) -> list[str]:
        """Validate complete configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        errors.extend(self.crucible.validate())
        errors.extend(self.thermal.validate())
        errors.extend(self.phase.validate())
        errors.extend(self.pour.validate())

        # A standard pour must fit in the crucible
        if self.crucible.capacity > 0 and self.pour.target_volume > self.crucible.capacity:
            errors.append(
                f"target_volume ({self.pour.target_volume}) exceeds crucible capacity "
                f"({self.crucible.capacity})",
            )

        return errors

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary representation of configuration

        """
        config_dict = asdict(self)
        config_dict["thermal"]["integrator"] = self.thermal.integrator.value
        return config_dict

    @classmethod
    def from_dict(cls, data: dict) -> "FoundryConfig":
        """Create configuration from dictionary.

        Missing sections and keys fall back to the defaults.

        Args:
            data: Dictionary representation of configuration

        Returns:
            FoundryConfig instance

        """
        crucible_data = data.get("crucible") or {}
        thermal_data = data.get("thermal") or {}
        phase_data = data.get("phase") or {}
        pour_data = data.get("pour") or {}

        crucible = CrucibleConfig(
            capacity=crucible_data.get("capacity", DEFAULT_CAPACITY),
            ambient_temp=crucible_data.get("ambient_temp", DEFAULT_AMBIENT_TEMP),
            initial_setpoint=crucible_data.get("initial_setpoint", DEFAULT_INITIAL_SETPOINT),
            setpoint_min=crucible_data.get("setpoint_min", DEFAULT_SETPOINT_MIN),
            setpoint_max=crucible_data.get("setpoint_max", DEFAULT_SETPOINT_MAX),
        )

        thermal = ThermalConfig(
            heat_rate_base=thermal_data.get("heat_rate_base", DEFAULT_HEAT_RATE_BASE),
            integrator=thermal_data.get("integrator", DEFAULT_THERMAL_INTEGRATOR),
            outside_cooling_rate=thermal_data.get(
                "outside_cooling_rate", DEFAULT_OUTSIDE_COOLING_RATE,
            ),
        )

        phase = PhaseConfig(
            melt_hysteresis=phase_data.get("melt_hysteresis", DEFAULT_MELT_HYSTERESIS),
            solidify_hysteresis=phase_data.get("solidify_hysteresis", DEFAULT_SOLIDIFY_HYSTERESIS),
            global_melt_scale=phase_data.get("global_melt_scale", DEFAULT_GLOBAL_MELT_SCALE),
            solidify_scale=phase_data.get("solidify_scale", DEFAULT_SOLIDIFY_SCALE),
            progress_decay_rate=phase_data.get("progress_decay_rate", DEFAULT_PROGRESS_DECAY_RATE),
        )

        pour = PourConfig(
            target_volume=pour_data.get("target_volume", DEFAULT_TARGET_VOLUME),
            step=pour_data.get("step", DEFAULT_STEP),
            epsilon=pour_data.get("epsilon", DEFAULT_EPSILON),
        )

        return cls(crucible=crucible, thermal=thermal, phase=phase, pour=pour)


def create_default_config() -> FoundryConfig:
    """Create a default simulation configuration.

    Returns:
        Valid FoundryConfig instance

    Raises:
        ValueError: If the defaults themselves are inconsistent

    """
    config = FoundryConfig()
    errors = config.validate()

    if errors:
        raise ValueError("Default configuration is invalid:\n" + "\n".join(errors))

    return config

