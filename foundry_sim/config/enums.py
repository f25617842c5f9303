"""
Configuration Enums for foundry_sim

This module defines the enumeration types used by the simulation configuration.

Import Policy:
    from foundry_sim.config.enums import ThermalIntegrator

DO NOT use: from foundry_sim.config.enums import *
"""

from enum import Enum


class ThermalIntegrator(Enum):
    """Integration scheme for the portion temperature lag.

    Options:
        EXACT: Closed-form exponential approach
            T_new = T_set + (T_old - T_set) * exp(-k * dt)
            Frame-rate independent (default, production)
        CLAMPED_EULER: Explicit Euler step with k*dt clamped to 1
            T_new = T_old + min(k * dt, 1) * (T_set - T_old)
            Matches the legacy per-frame update for small dt

    Note:
        Unclamped explicit Euler is intentionally not offered. For k*dt > 1
        it overshoots the setpoint and makes results depend on frame rate.
    """
    EXACT = "exact"
    CLAMPED_EULER = "clamped_euler"
