"""Thermal simulator: first-order approach of portion temperatures to the setpoint.

Model:
    dT/dt = k * (T_set - T),   k = heat_rate_base * material.heat_sensitivity

Integration (see ThermalIntegrator):
    EXACT:          T_new = T_set + (T - T_set) * exp(-k * dt)
    CLAMPED_EULER:  T_new = T + min(k * dt, 1) * (T_set - T)

After each update the temperature is clamped to
[min(ambient, setpoint), max(ambient, setpoint)], so no portion ever sits
outside the band spanned by room temperature and the furnace setpoint.

Import Policy:
    from foundry_sim.core.thermal import ThermalSimulator, cool_toward

DO NOT use: from foundry_sim.core.thermal import *
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np

from foundry_sim.config.enums import ThermalIntegrator
from foundry_sim.config.simulation_config import ThermalConfig

if TYPE_CHECKING:
    from foundry_sim.core.portion import Portion


def approach_factor(k_dt, integrator: ThermalIntegrator):
    """Fraction of the remaining gap closed in one step.

    Works on scalars and numpy arrays. Always in [0, 1] for k*dt >= 0.
    """
    if integrator == ThermalIntegrator.EXACT:
        return -np.expm1(-np.asarray(k_dt, dtype=np.float64))
    return np.clip(k_dt, 0.0, 1.0)


def cool_toward(temperature: float, ambient: float, rate: float, dt: float) -> float:
    """Exact first-order approach of a single temperature toward ambient.

    Used for portions that have been taken out of the crucible.
    """
    if dt <= 0 or rate <= 0:
        return temperature
    return ambient + (temperature - ambient) * math.exp(-rate * dt)


class ThermalSimulator:
    """Integrates portion temperatures toward the crucible setpoint.

    Example:
        >>> sim = ThermalSimulator(ThermalConfig(heat_rate_base=0.25))
        >>> sim.step(crucible_portions, setpoint=700.0, ambient=20.0, dt=0.02)

    """

    def __init__(self, config: ThermalConfig | None = None):
        self.config = config or ThermalConfig()

    def rate_for(self, portion: "Portion") -> float:
        """Heat-rate coefficient k for one portion (1/s)."""
        return self.config.heat_rate_base * portion.material.heat_sensitivity

    def step(
        self,
        portions: Sequence["Portion"],
        setpoint: float,
        ambient: float,
        dt: float,
    ) -> None:
        """Advance every active portion's temperature by dt seconds.

        Portions with zero volume are skipped. Only temperatures change.

        Args:
            portions: Portions to update in place
            setpoint: Furnace setpoint [degC]
            ambient: Room temperature [degC]
            dt: Elapsed time [s]; non-positive values are a no-op

        """
        if dt <= 0:
            return

        active = [p for p in portions if p.is_active]
        if not active:
            return

        temps = np.array([p.temperature for p in active], dtype=np.float64)
        rates = np.array([self.rate_for(p) for p in active], dtype=np.float64)

        alpha = approach_factor(rates * dt, self.config.integrator)
        temps = temps + alpha * (setpoint - temps)
        temps = np.clip(temps, min(ambient, setpoint), max(ambient, setpoint))

        for portion, temp in zip(active, temps):
            portion.temperature = float(temp)
